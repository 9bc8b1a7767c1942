"""
Idea Inbox API Routes

Capture, triage and promote ideas. Promotion creates a script and links
the idea to it.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Response, status

from app.api.dependencies import CurrentUserDep, IdeaRepoDep, ScriptRepoDep
from app.domain.models import (
    IdeaCreate,
    IdeaResponse,
    IdeaStatus,
    IdeaUpdate,
    PromoteIdeaRequest,
    ScriptCreate,
    ScriptResponse,
)
from app.infrastructure.exceptions import ConflictError, NotFoundError


logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_idea_or_404(ideas: IdeaRepoDep, user_id: str, idea_id: int):
    idea = await ideas.get_for_user(user_id, idea_id)
    if not idea:
        raise NotFoundError(f"Idea {idea_id} not found", operation="get", table="ideas")
    return idea


@router.get("/ideas", response_model=List[IdeaResponse])
async def list_ideas(
    user_id: CurrentUserDep,
    ideas: IdeaRepoDep,
    status_filter: Optional[IdeaStatus] = None,
):
    """List the caller's ideas, newest first, optionally filtered by status."""
    rows = await ideas.list_for_user(user_id)
    if status_filter is not None:
        rows = [idea for idea in rows if idea.status == status_filter.value]
    return rows


@router.post("/ideas", response_model=IdeaResponse, status_code=status.HTTP_201_CREATED)
async def create_idea(
    data: IdeaCreate,
    user_id: CurrentUserDep,
    ideas: IdeaRepoDep,
):
    idea = await ideas.create_for_user(user_id, data)
    logger.info(f"Captured idea {idea.id} for user {user_id}")
    return idea


@router.get("/ideas/{idea_id}", response_model=IdeaResponse)
async def get_idea(idea_id: int, user_id: CurrentUserDep, ideas: IdeaRepoDep):
    return await _get_idea_or_404(ideas, user_id, idea_id)


@router.patch("/ideas/{idea_id}", response_model=IdeaResponse)
async def update_idea(
    idea_id: int,
    data: IdeaUpdate,
    user_id: CurrentUserDep,
    ideas: IdeaRepoDep,
):
    values = data.model_dump(exclude_unset=True, mode="json")
    idea = await ideas.update_fields(user_id, idea_id, values)
    if not idea:
        raise NotFoundError(f"Idea {idea_id} not found", operation="update", table="ideas")
    return idea


@router.delete("/ideas/{idea_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_idea(idea_id: int, user_id: CurrentUserDep, ideas: IdeaRepoDep):
    deleted = await ideas.delete_for_user(user_id, idea_id)
    if not deleted:
        raise NotFoundError(f"Idea {idea_id} not found", operation="delete", table="ideas")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/ideas/{idea_id}/promote",
    response_model=ScriptResponse,
    status_code=status.HTTP_201_CREATED,
)
async def promote_idea(
    idea_id: int,
    user_id: CurrentUserDep,
    ideas: IdeaRepoDep,
    scripts: ScriptRepoDep,
    options: Optional[PromoteIdeaRequest] = None,
):
    """
    Create a script seeded from the idea and mark the idea promoted.

    Raises:
        ConflictError (409): The idea was already promoted or is archived
    """
    idea = await _get_idea_or_404(ideas, user_id, idea_id)
    if idea.status in (IdeaStatus.PROMOTED.value, IdeaStatus.ARCHIVED.value):
        raise ConflictError(
            f"Idea {idea_id} is {idea.status} and cannot be promoted",
            details={"idea_id": idea_id, "status": idea.status},
        )

    options = options or PromoteIdeaRequest()
    script = await scripts.create_for_user(
        user_id,
        ScriptCreate(
            title=idea.title,
            stage=options.stage,
            topic=idea.topic,
            format=idea.format,
            hook_type=idea.hook_type,
            target_length_minutes=options.target_length_minutes,
            words_per_minute=options.words_per_minute,
            notes_content=idea.description or "",
        ),
        idea_id=idea.id,
    )

    await ideas.update_fields(
        user_id,
        idea_id,
        {"status": IdeaStatus.PROMOTED.value, "promoted_to_script_id": script.id},
    )
    logger.info(f"Promoted idea {idea_id} to script {script.id}")
    return script
