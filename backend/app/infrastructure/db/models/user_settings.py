"""
UserSettings SQLModel

Per-owner preferences plus the rolling channel baselines reviews are
compared against. One row per owner, keyed by the owner id.
"""

from typing import Optional

from sqlmodel import Field

from app.infrastructure.db.models.base import TimestampMixin


class UserSettings(TimestampMixin, table=True):
    """Maps to the 'user_settings' table."""

    __tablename__ = "user_settings"

    user_id: str = Field(..., primary_key=True, max_length=255)
    default_words_per_minute: int = Field(default=150)
    max_concurrent_drafts: int = Field(default=5)
    require_schedule_before_draft: bool = Field(default=False)
    channel_baseline_views: Optional[float] = Field(default=None)
    channel_baseline_retention: Optional[float] = Field(default=None)
    has_pending_review: bool = Field(default=False)
    pending_review_script_id: Optional[int] = Field(default=None)
