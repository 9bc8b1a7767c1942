"""
UserProfile SQLModel

Identity mirror kept in sync by the Clerk webhook, plus the Stripe
customer id attached at first checkout.
"""

from typing import Optional

from pydantic import ConfigDict
from sqlmodel import Field, SQLModel

from app.infrastructure.db.models.base import IntIdMixin, TimestampMixin


class UserProfileBase(SQLModel):
    """Identity fields shared between the table and the sync payloads."""

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)


class UserProfile(UserProfileBase, IntIdMixin, TimestampMixin, table=True):
    """Maps to the 'user_profiles' table."""

    __tablename__ = "user_profiles"

    user_id: str = Field(
        ...,
        unique=True,
        index=True,
        max_length=255,
        description="Clerk user id"
    )
    stripe_customer_id: Optional[str] = Field(
        default=None,
        unique=True,
        index=True,
        max_length=255,
    )

    model_config = ConfigDict(from_attributes=True)


class UserProfileIdentity(UserProfileBase):
    """Fields the identity webhook is allowed to overwrite."""
    pass
