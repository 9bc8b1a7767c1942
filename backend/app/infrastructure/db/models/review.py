"""
Review SQLModel

Post-publish performance record for one script.
"""

from sqlmodel import Field

from app.infrastructure.db.models.base import IntIdMixin, TimestampMixin


class Review(IntIdMixin, TimestampMixin, table=True):
    """Maps to the 'reviews' table."""

    __tablename__ = "reviews"

    user_id: str = Field(..., index=True, max_length=255)
    script_id: int = Field(..., index=True)
    views: float = Field(default=0)
    retention_percentage: float = Field(default=0)
    revenue: float = Field(default=0)
    what_worked: str = Field(default="")
    what_didnt_work: str = Field(default="")
    changes_for_next_time: str = Field(default="")
    is_above_average: bool = Field(default=False)
