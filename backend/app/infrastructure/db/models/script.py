"""
Script SQLModel

The unit of work moving through the pipeline. Attachments and version
snapshots are embedded JSON lists owned by the script.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, JSON
from sqlmodel import Field

from app.infrastructure.db.models.base import IntIdMixin, TimestampMixin, utcnow


class Script(IntIdMixin, TimestampMixin, table=True):
    """Maps to the 'scripts' table."""

    __tablename__ = "scripts"

    user_id: str = Field(..., index=True, max_length=255)
    idea_id: Optional[int] = Field(default=None)
    title: str = Field(..., max_length=200)
    stage: str = Field(default="idea", max_length=20, index=True)

    # Classification
    topic: Optional[str] = Field(default=None, max_length=50)
    format: Optional[str] = Field(default=None, max_length=50)
    hook_type: Optional[str] = Field(default=None, max_length=50)

    # Length targets
    target_length_minutes: Optional[int] = Field(default=10)
    words_per_minute: Optional[int] = Field(default=150)

    # Content
    hook_content: Optional[str] = Field(default="")
    outline_content: Optional[str] = Field(default="")
    script_content: Optional[str] = Field(default="")
    notes_content: Optional[str] = Field(default="")

    # Structure checklist
    checklist_intro: bool = Field(default=False)
    checklist_body: bool = Field(default=False)
    checklist_cta: bool = Field(default=False)

    attachments: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    versions: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    scheduled_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    published_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    last_edited: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
