"""
Subscription Database Model

SQLModel table for the local mirror of each owner's Stripe subscription.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field

from app.infrastructure.db.models.base import IntIdMixin, TimestampMixin


class SubscriptionModel(IntIdMixin, TimestampMixin, table=True):
    """
    Subscription table, at most one row per owner.

    Maps to the 'subscriptions' table in PostgreSQL.
    """

    __tablename__ = "subscriptions"

    user_id: str = Field(..., unique=True, index=True, max_length=255)

    # Plan details
    plan_name: str = Field(..., max_length=50)
    status: str = Field(..., max_length=30)

    # Stripe IDs
    stripe_subscription_id: str = Field(..., unique=True, index=True, max_length=255)
    stripe_price_id: str = Field(..., max_length=255)

    current_period_end: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
