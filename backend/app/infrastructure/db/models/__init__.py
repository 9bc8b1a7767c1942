"""
SQLModel ORM Models for ScriptFlow

Exports all database models for Alembic autogenerate and application use.
Import models here to register them with SQLModel.metadata.
"""

from app.infrastructure.db.models.base import (
    IntIdMixin,
    TimestampMixin,
)
from app.infrastructure.db.models.idea import Idea
from app.infrastructure.db.models.script import Script
from app.infrastructure.db.models.review import Review
from app.infrastructure.db.models.user_settings import UserSettings
from app.infrastructure.db.models.user_profile import (
    UserProfile,
    UserProfileBase,
    UserProfileIdentity,
)
from app.infrastructure.db.models.subscription import SubscriptionModel


__all__ = [
    # Base
    "IntIdMixin",
    "TimestampMixin",
    # Content
    "Idea",
    "Script",
    "Review",
    "UserSettings",
    # Identity & billing
    "UserProfile",
    "UserProfileBase",
    "UserProfileIdentity",
    "SubscriptionModel",
]
