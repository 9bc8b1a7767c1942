"""
Script Workspace API Routes

Script CRUD, pipeline transitions, readiness and deliverability checks,
scheduling, version snapshots and attachments.
"""

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from app.api.dependencies import (
    CurrentUserDep,
    PipelineServiceDep,
    ScriptRepoDep,
    require_paid_plan,
)
from app.domain.models import (
    Attachment,
    DeliverabilityResponse,
    ReadinessResponse,
    ScheduleRequest,
    ScriptCreate,
    ScriptResponse,
    ScriptUpdate,
    ScriptVersion,
    Stage,
    StageTransitionRequest,
    TransitionResponse,
)
from app.domain.readiness import assess_deliverability, validate_readiness
from app.infrastructure.db.repositories.script_repository import ScriptRepository
from app.infrastructure.exceptions import NotFoundError


logger = logging.getLogger(__name__)

router = APIRouter()

RESTORABLE_FIELDS = ("hook_content", "outline_content", "script_content", "notes_content")


async def _get_script_or_404(scripts: ScriptRepository, user_id: str, script_id: int):
    script = await scripts.get_for_user(user_id, script_id)
    if not script:
        raise NotFoundError(f"Script {script_id} not found", operation="get", table="scripts")
    return script


# =============================================================================
# CRUD
# =============================================================================

@router.get("/scripts", response_model=List[ScriptResponse])
async def list_scripts(
    user_id: CurrentUserDep,
    scripts: ScriptRepoDep,
    stage: Optional[Stage] = None,
):
    """List the caller's scripts, most recently edited first."""
    if stage is not None:
        return await scripts.list_by_stage(user_id, stage)
    return await scripts.list_for_user(user_id)


@router.post("/scripts", response_model=ScriptResponse, status_code=status.HTTP_201_CREATED)
async def create_script(data: ScriptCreate, user_id: CurrentUserDep, scripts: ScriptRepoDep):
    script = await scripts.create_for_user(user_id, data)
    logger.info(f"Created script {script.id} for user {user_id}")
    return script


@router.get("/scripts/{script_id}", response_model=ScriptResponse)
async def get_script(script_id: int, user_id: CurrentUserDep, scripts: ScriptRepoDep):
    return await _get_script_or_404(scripts, user_id, script_id)


@router.patch("/scripts/{script_id}", response_model=ScriptResponse)
async def update_script(
    script_id: int,
    data: ScriptUpdate,
    user_id: CurrentUserDep,
    scripts: ScriptRepoDep,
):
    """Save workspace edits. Stage changes go through /stage."""
    script = await scripts.edit(user_id, script_id, data.model_dump(exclude_unset=True))
    if not script:
        raise NotFoundError(f"Script {script_id} not found", operation="update", table="scripts")
    return script


@router.delete("/scripts/{script_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_script(script_id: int, user_id: CurrentUserDep, scripts: ScriptRepoDep):
    deleted = await scripts.delete_for_user(user_id, script_id)
    if not deleted:
        raise NotFoundError(f"Script {script_id} not found", operation="delete", table="scripts")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Pipeline
# =============================================================================

@router.post(
    "/scripts/{script_id}/stage",
    response_model=TransitionResponse,
    responses={422: {"description": "Readiness gate rejected the move"}},
)
async def move_script(
    script_id: int,
    request: StageTransitionRequest,
    user_id: CurrentUserDep,
    pipeline: PipelineServiceDep,
):
    """
    Move a script to another pipeline column.

    Entering "ready" runs the readiness gate; a failed gate answers 422
    with every blocking issue and writes nothing.
    """
    result = await pipeline.request_transition(
        user_id,
        script_id,
        request.stage,
        from_position=request.from_position,
        to_position=request.to_position,
    )

    if result.rejected:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=result.to_rejection_dict(),
        )

    return TransitionResponse(
        outcome=result.outcome.value,
        from_stage=result.from_stage,
        to_stage=result.to_stage,
        script=ScriptResponse.model_validate(result.script),
    )


@router.get("/scripts/{script_id}/readiness", response_model=ReadinessResponse)
async def check_readiness(script_id: int, user_id: CurrentUserDep, scripts: ScriptRepoDep):
    """Run the readiness gate without moving the script."""
    script = await _get_script_or_404(scripts, user_id, script_id)
    issues = validate_readiness(script)
    return ReadinessResponse(script_id=script_id, is_ready=not issues, issues=issues)


@router.get(
    "/scripts/{script_id}/deliverability",
    response_model=DeliverabilityResponse,
    dependencies=[Depends(require_paid_plan)],
)
async def check_deliverability(script_id: int, user_id: CurrentUserDep, scripts: ScriptRepoDep):
    """Advisory pacing, cue and readability report. Paid plans only."""
    script = await _get_script_or_404(scripts, user_id, script_id)
    report = assess_deliverability(
        script.script_content,
        hook_content=script.hook_content,
        target_minutes=script.target_length_minutes,
        words_per_minute=script.words_per_minute,
    )
    return DeliverabilityResponse(script_id=script_id, is_ready=report.is_ready, **asdict(report))


@router.put(
    "/scripts/{script_id}/schedule",
    response_model=ScriptResponse,
    dependencies=[Depends(require_paid_plan)],
)
async def schedule_script(
    script_id: int,
    request: ScheduleRequest,
    user_id: CurrentUserDep,
    scripts: ScriptRepoDep,
):
    """Set or clear the planned publish date. Paid plans only."""
    script = await scripts.set_schedule(user_id, script_id, request.scheduled_date)
    if not script:
        raise NotFoundError(f"Script {script_id} not found", operation="schedule", table="scripts")
    return script


# =============================================================================
# Versions & Attachments
# =============================================================================

@router.post(
    "/scripts/{script_id}/versions",
    response_model=ScriptResponse,
    status_code=status.HTTP_201_CREATED,
)
async def snapshot_script(script_id: int, user_id: CurrentUserDep, scripts: ScriptRepoDep):
    """Append a snapshot of the four content fields."""
    script = await _get_script_or_404(scripts, user_id, script_id)
    version = ScriptVersion(
        timestamp=datetime.now(timezone.utc),
        label=f"Snapshot {len(script.versions or []) + 1}",
        hook_content=script.hook_content,
        outline_content=script.outline_content,
        script_content=script.script_content,
        notes_content=script.notes_content,
    )
    return await scripts.append_version(user_id, script_id, version)


@router.post("/scripts/{script_id}/versions/{index}/restore", response_model=ScriptResponse)
async def restore_version(
    script_id: int,
    index: int,
    user_id: CurrentUserDep,
    scripts: ScriptRepoDep,
):
    """Copy a snapshot's contents back onto the script (0-based index)."""
    script = await _get_script_or_404(scripts, user_id, script_id)
    versions = script.versions or []
    if index < 0 or index >= len(versions):
        raise NotFoundError(
            f"Version {index} not found for script {script_id}",
            operation="restore",
            table="scripts",
        )

    snapshot = versions[index]
    values = {field: snapshot.get(field) or "" for field in RESTORABLE_FIELDS}
    return await scripts.edit(user_id, script_id, values)


@router.post(
    "/scripts/{script_id}/attachments",
    response_model=ScriptResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_attachment(
    script_id: int,
    attachment: Attachment,
    user_id: CurrentUserDep,
    scripts: ScriptRepoDep,
):
    script = await scripts.append_attachment(user_id, script_id, attachment)
    if not script:
        raise NotFoundError(f"Script {script_id} not found", operation="attach", table="scripts")
    return script
