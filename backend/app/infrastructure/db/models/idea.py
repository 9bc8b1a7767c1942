"""
Idea SQLModel

Captured content ideas waiting to be promoted into scripts.
"""

from typing import Optional

from sqlmodel import Field

from app.infrastructure.db.models.base import IntIdMixin, TimestampMixin


class Idea(IntIdMixin, TimestampMixin, table=True):
    """Maps to the 'ideas' table."""

    __tablename__ = "ideas"

    user_id: str = Field(..., index=True, max_length=255)
    title: str = Field(..., max_length=200)
    description: Optional[str] = Field(default=None)
    topic: Optional[str] = Field(default=None, max_length=50)
    format: Optional[str] = Field(default=None, max_length=50)
    hook_type: Optional[str] = Field(default=None, max_length=50)
    priority: str = Field(default="medium", max_length=20)
    status: str = Field(default="captured", max_length=20, index=True)
    promoted_to_script_id: Optional[int] = Field(default=None)
