"""
Pipeline Stage Machine

Moves scripts between the five pipeline columns. Entry into "ready" is
gated by the readiness validator; every other move is free.

The planner (plan_transition) is pure. PipelineService wraps it with the
single store write a successful move requires.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol

from app.domain.models import STAGES, Stage
from app.domain.readiness import validate_readiness
from app.infrastructure.exceptions import NotFoundError


logger = logging.getLogger(__name__)

STALLED_AFTER = timedelta(days=7)
READY_GATE_TITLE = "Cannot move to Ready"


class TransitionOutcome(str, Enum):
    MOVED = "moved"
    UNCHANGED = "unchanged"
    REJECTED = "rejected"


@dataclass
class TransitionResult:
    """What happened to a requested stage move."""
    outcome: TransitionOutcome
    script_id: Optional[int] = None
    from_stage: Optional[Stage] = None
    to_stage: Optional[Stage] = None
    errors: List[str] = field(default_factory=list)
    script: Any = None

    @property
    def moved(self) -> bool:
        return self.outcome == TransitionOutcome.MOVED

    @property
    def rejected(self) -> bool:
        return self.outcome == TransitionOutcome.REJECTED

    def to_rejection_dict(self) -> Dict[str, Any]:
        return {
            "title": READY_GATE_TITLE,
            "errors": list(self.errors),
            "script_id": self.script_id,
        }


def _as_stage(value: Any) -> Stage:
    return value if isinstance(value, Stage) else Stage(value)


def plan_transition(
    script: Any,
    target_stage: Stage,
    from_position: Optional[int] = None,
    to_position: Optional[int] = None,
) -> TransitionResult:
    """
    Decide the outcome of moving a script to target_stage without writing.

    Dropping a card back onto its own column is a no-op unless both
    positions are known and differ (a reorder within the column).
    """
    current = _as_stage(script.stage)
    target = _as_stage(target_stage)
    script_id = getattr(script, "id", None)

    if target == current:
        reordered = (
            from_position is not None
            and to_position is not None
            and from_position != to_position
        )
        if not reordered:
            return TransitionResult(
                outcome=TransitionOutcome.UNCHANGED,
                script_id=script_id,
                from_stage=current,
                to_stage=target,
                script=script,
            )

    if target == Stage.READY:
        errors = validate_readiness(script)
        if errors:
            return TransitionResult(
                outcome=TransitionOutcome.REJECTED,
                script_id=script_id,
                from_stage=current,
                to_stage=target,
                errors=errors,
                script=script,
            )

    return TransitionResult(
        outcome=TransitionOutcome.MOVED,
        script_id=script_id,
        from_stage=current,
        to_stage=target,
        script=script,
    )


class ScriptStore(Protocol):
    """The two store operations a transition needs."""

    async def get_for_user(self, user_id: str, script_id: int) -> Optional[Any]:
        ...

    async def update_stage(
        self, user_id: str, script_id: int, stage: Stage, edited_at: datetime
    ) -> Any:
        ...


class PipelineService:
    """Applies planned transitions to the owner's scripts."""

    def __init__(self, script_repo: ScriptStore):
        self.script_repo = script_repo

    async def request_transition(
        self,
        user_id: str,
        script_id: int,
        target_stage: Stage,
        from_position: Optional[int] = None,
        to_position: Optional[int] = None,
    ) -> TransitionResult:
        """
        Move one of the owner's scripts to target_stage.

        Raises:
            NotFoundError: The owner has no script with this id
        """
        script = await self.script_repo.get_for_user(user_id, script_id)
        if script is None:
            raise NotFoundError(
                f"Script {script_id} not found",
                operation="transition",
                table="scripts",
            )

        result = plan_transition(script, target_stage, from_position, to_position)

        if result.outcome == TransitionOutcome.UNCHANGED:
            logger.debug(f"Script {script_id} already in {result.to_stage.value}")
            return result

        if result.outcome == TransitionOutcome.REJECTED:
            logger.info(
                f"Script {script_id} blocked from ready: {len(result.errors)} issue(s)"
            )
            return result

        result.script = await self.script_repo.update_stage(
            user_id, script_id, result.to_stage, datetime.now(timezone.utc)
        )
        logger.info(
            f"Script {script_id} moved {result.from_stage.value} -> {result.to_stage.value}"
        )
        return result


# =============================================================================
# Dashboard summary
# =============================================================================

@dataclass
class PipelineSummary:
    stage_counts: Dict[str, int]
    stalled_script_ids: List[int]
    unscheduled_ready_ids: List[int]
    scheduled_count: int
    total: int


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def summarize_pipeline(scripts: Iterable[Any], now: Optional[datetime] = None) -> PipelineSummary:
    """Column counts plus the scripts that need attention."""
    now = _aware(now) or datetime.now(timezone.utc)
    counts = {stage.value: 0 for stage in STAGES}
    stalled: List[int] = []
    unscheduled_ready: List[int] = []
    scheduled = 0
    total = 0

    for script in scripts:
        total += 1
        stage = _as_stage(script.stage)
        counts[stage.value] += 1

        if script.scheduled_date is not None:
            scheduled += 1
        elif stage == Stage.READY:
            unscheduled_ready.append(script.id)

        last_edited = _aware(script.last_edited)
        if stage != Stage.PUBLISHED and last_edited is not None and now - last_edited > STALLED_AFTER:
            stalled.append(script.id)

    return PipelineSummary(
        stage_counts=counts,
        stalled_script_ids=stalled,
        unscheduled_ready_ids=unscheduled_ready,
        scheduled_count=scheduled,
        total=total,
    )
