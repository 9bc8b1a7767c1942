"""
Repository Layer for ScriptFlow

Exports all repository classes for dependency injection.
"""

from app.infrastructure.db.repositories.base_repository import (
    BaseRepository,
    IReadRepository,
    IWriteRepository,
)
from app.infrastructure.db.repositories.idea_repository import IdeaRepository
from app.infrastructure.db.repositories.script_repository import ScriptRepository
from app.infrastructure.db.repositories.review_repository import ReviewRepository
from app.infrastructure.db.repositories.user_settings_repository import (
    UserSettingsRepository,
)
from app.infrastructure.db.repositories.user_profile_repository import (
    UserProfileRepository,
)
from app.infrastructure.db.repositories.subscription_repository import (
    SubscriptionRepository,
)


__all__ = [
    # Base
    "BaseRepository",
    "IReadRepository",
    "IWriteRepository",
    # Repositories
    "IdeaRepository",
    "ScriptRepository",
    "ReviewRepository",
    "UserSettingsRepository",
    "UserProfileRepository",
    "SubscriptionRepository",
]
