"""
Domain Models for ScriptFlow

Pure Python/Pydantic models with no framework dependencies.
These models define the core business entities and validation rules.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Stage(str, Enum):
    """Pipeline stage a script occupies."""
    IDEA = "idea"
    DRAFT = "draft"
    EDITING = "editing"
    READY = "ready"
    PUBLISHED = "published"


# Column order on the pipeline board
STAGES: tuple = (
    Stage.IDEA,
    Stage.DRAFT,
    Stage.EDITING,
    Stage.READY,
    Stage.PUBLISHED,
)


class IdeaStatus(str, Enum):
    """Lifecycle of a captured idea."""
    CAPTURED = "captured"
    VALIDATED = "validated"
    PROMOTED = "promoted"
    ARCHIVED = "archived"


class IdeaPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Value Objects
# =============================================================================

class Attachment(BaseModel):
    """Descriptor of a file attached to a script (storage is external)."""
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)
    category: str = Field(default="other", max_length=50)


class ScriptVersion(BaseModel):
    """Point-in-time snapshot of a script's four content fields."""
    timestamp: datetime
    label: str
    hook_content: Optional[str] = None
    outline_content: Optional[str] = None
    script_content: Optional[str] = None
    notes_content: Optional[str] = None


# =============================================================================
# Idea DTOs
# =============================================================================

class IdeaCreate(BaseModel):
    """Schema for capturing a new idea."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    topic: Optional[str] = Field(None, max_length=50)
    format: Optional[str] = Field(None, max_length=50)
    hook_type: Optional[str] = Field(None, max_length=50)
    priority: IdeaPriority = IdeaPriority.MEDIUM
    status: IdeaStatus = IdeaStatus.CAPTURED

    @field_validator("title")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace only")
        return v.strip()


class IdeaUpdate(BaseModel):
    """Schema for editing an idea. All fields optional."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    topic: Optional[str] = Field(None, max_length=50)
    format: Optional[str] = Field(None, max_length=50)
    hook_type: Optional[str] = Field(None, max_length=50)
    priority: Optional[IdeaPriority] = None
    status: Optional[IdeaStatus] = None


class IdeaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    topic: Optional[str] = None
    format: Optional[str] = None
    hook_type: Optional[str] = None
    priority: IdeaPriority
    status: IdeaStatus
    promoted_to_script_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Script DTOs
# =============================================================================

def _check_initial_stage(v: Stage) -> Stage:
    # Gated and terminal stages are reached through transitions only
    if v in (Stage.READY, Stage.PUBLISHED):
        raise ValueError(f"A new script cannot start in '{v.value}'")
    return v


class ScriptCreate(BaseModel):
    """Schema for creating a script directly or by promoting an idea."""
    title: str = Field(..., min_length=1, max_length=200)
    stage: Stage = Stage.IDEA
    topic: Optional[str] = Field(None, max_length=50)
    format: Optional[str] = Field(None, max_length=50)
    hook_type: Optional[str] = Field(None, max_length=50)
    target_length_minutes: int = Field(default=10, gt=0)
    words_per_minute: int = Field(default=150, gt=0)
    hook_content: str = ""
    outline_content: str = ""
    script_content: str = ""
    notes_content: str = ""

    @field_validator("stage")
    @classmethod
    def validate_initial_stage(cls, v: Stage) -> Stage:
        return _check_initial_stage(v)


class ScriptUpdate(BaseModel):
    """
    Field edits from the workspace. Stage is intentionally absent:
    stage changes go through the pipeline transition endpoint.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    topic: Optional[str] = Field(None, max_length=50)
    format: Optional[str] = Field(None, max_length=50)
    hook_type: Optional[str] = Field(None, max_length=50)
    target_length_minutes: Optional[int] = Field(None, gt=0)
    words_per_minute: Optional[int] = Field(None, gt=0)
    hook_content: Optional[str] = None
    outline_content: Optional[str] = None
    script_content: Optional[str] = None
    notes_content: Optional[str] = None
    checklist_intro: Optional[bool] = None
    checklist_body: Optional[bool] = None
    checklist_cta: Optional[bool] = None


class ScriptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    idea_id: Optional[int] = None
    title: str
    stage: Stage
    topic: Optional[str] = None
    format: Optional[str] = None
    hook_type: Optional[str] = None
    target_length_minutes: Optional[int] = None
    words_per_minute: Optional[int] = None
    hook_content: Optional[str] = None
    outline_content: Optional[str] = None
    script_content: Optional[str] = None
    notes_content: Optional[str] = None
    checklist_intro: bool = False
    checklist_body: bool = False
    checklist_cta: bool = False
    attachments: List[Attachment] = Field(default_factory=list)
    versions: List[ScriptVersion] = Field(default_factory=list)
    scheduled_date: Optional[datetime] = None
    published_date: Optional[datetime] = None
    last_edited: Optional[datetime] = None


class PromoteIdeaRequest(BaseModel):
    """Options for turning an idea into a script."""
    stage: Stage = Stage.IDEA
    target_length_minutes: int = Field(default=10, gt=0)
    words_per_minute: int = Field(default=150, gt=0)

    @field_validator("stage")
    @classmethod
    def validate_initial_stage(cls, v: Stage) -> Stage:
        return _check_initial_stage(v)


class StageTransitionRequest(BaseModel):
    """Drag-and-drop move between (or within) pipeline columns."""
    stage: Stage
    from_position: Optional[int] = Field(None, ge=0)
    to_position: Optional[int] = Field(None, ge=0)


class ScheduleRequest(BaseModel):
    """Set (or clear, with null) the planned publish date."""
    scheduled_date: Optional[datetime] = None


class ReadinessResponse(BaseModel):
    script_id: int
    is_ready: bool
    issues: List[str]


class DeliverabilityResponse(BaseModel):
    script_id: int
    words: int
    estimated_minutes: float
    target_minutes: float
    pacing_score: float
    action_cues: int
    recommended_cues: int
    readability_score: float
    readability_label: str
    avg_words_per_sentence: float
    long_segments: int
    issues: List[str]
    is_ready: bool


class PipelineSummaryResponse(BaseModel):
    stage_counts: Dict[str, int]
    stalled_script_ids: List[int]
    unscheduled_ready_ids: List[int]
    scheduled_count: int
    total: int


# =============================================================================
# Review DTOs
# =============================================================================

class ReviewCreate(BaseModel):
    """Post-publish performance review form."""
    views: float = Field(..., ge=0)
    retention_percentage: float = Field(..., ge=0, le=100)
    revenue: float = Field(default=0, ge=0)
    what_worked: str = Field(..., description="What worked well?")
    what_didnt_work: str = Field(..., description="What didn't work?")
    changes_for_next_time: str = Field(..., description="What will you change?")

    @field_validator("what_worked", "what_didnt_work", "changes_for_next_time")
    @classmethod
    def validate_reflection(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Reflection cannot be empty")
        return v.strip()


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    script_id: int
    views: float
    retention_percentage: float
    revenue: float
    what_worked: str
    what_didnt_work: str
    changes_for_next_time: str
    is_above_average: bool
    created_at: datetime


# =============================================================================
# Settings DTOs
# =============================================================================

class SettingsUpdate(BaseModel):
    default_words_per_minute: int = Field(default=150, gt=0, le=400)
    max_concurrent_drafts: int = Field(default=5, ge=1, le=50)
    require_schedule_before_draft: bool = False


class SettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    default_words_per_minute: int = 150
    max_concurrent_drafts: int = 5
    require_schedule_before_draft: bool = False
    channel_baseline_views: Optional[float] = None
    channel_baseline_retention: Optional[float] = None
    has_pending_review: bool = False
    pending_review_script_id: Optional[int] = None


class TransitionResponse(BaseModel):
    """Result of an accepted (or no-op) stage move."""
    outcome: str
    from_stage: Stage
    to_stage: Stage
    script: ScriptResponse
