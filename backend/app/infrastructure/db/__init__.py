"""
Database Infrastructure Package for ScriptFlow

Exports database utilities and dependency providers.
"""

from app.infrastructure.db.database import (
    DatabaseManager,
    get_db_manager,
    get_session,
    get_session_context,
    init_db,
    close_db,
)

from app.infrastructure.db.dependencies import (
    SessionDep,
    get_idea_repository,
    get_script_repository,
    get_review_repository,
    get_user_settings_repository,
    get_user_profile_repository,
    get_subscription_repository,
    IdeaRepoDep,
    ScriptRepoDep,
    ReviewRepoDep,
    UserSettingsRepoDep,
    UserProfileRepoDep,
    SubscriptionRepoDep,
)


__all__ = [
    # Database management
    "DatabaseManager",
    "get_db_manager",
    "get_session",
    "get_session_context",
    "init_db",
    "close_db",
    # Dependencies
    "SessionDep",
    "get_idea_repository",
    "get_script_repository",
    "get_review_repository",
    "get_user_settings_repository",
    "get_user_profile_repository",
    "get_subscription_repository",
    "IdeaRepoDep",
    "ScriptRepoDep",
    "ReviewRepoDep",
    "UserSettingsRepoDep",
    "UserProfileRepoDep",
    "SubscriptionRepoDep",
]
