"""
Dependency Injection Providers for ScriptFlow

Provides FastAPI dependencies for database sessions and repositories.
All repositories in one request share the request's session, so a
handler's writes commit or roll back together.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.db.database import get_session
from app.infrastructure.db.repositories import (
    IdeaRepository,
    ReviewRepository,
    ScriptRepository,
    SubscriptionRepository,
    UserProfileRepository,
    UserSettingsRepository,
)


# Type alias for session dependency
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_idea_repository(
    session: SessionDep,
) -> AsyncGenerator[IdeaRepository, None]:
    """
    Dependency provider for IdeaRepository.

    Usage:
        @router.get("/ideas")
        async def list_ideas(
            repo: IdeaRepository = Depends(get_idea_repository)
        ):
            ...
    """
    yield IdeaRepository(session)


async def get_script_repository(
    session: SessionDep,
) -> AsyncGenerator[ScriptRepository, None]:
    yield ScriptRepository(session)


async def get_review_repository(
    session: SessionDep,
) -> AsyncGenerator[ReviewRepository, None]:
    yield ReviewRepository(session)


async def get_user_settings_repository(
    session: SessionDep,
) -> AsyncGenerator[UserSettingsRepository, None]:
    yield UserSettingsRepository(session)


async def get_user_profile_repository(
    session: SessionDep,
) -> AsyncGenerator[UserProfileRepository, None]:
    yield UserProfileRepository(session)


async def get_subscription_repository(
    session: SessionDep,
) -> AsyncGenerator[SubscriptionRepository, None]:
    yield SubscriptionRepository(session)


# Type aliases for repository dependencies
IdeaRepoDep = Annotated[IdeaRepository, Depends(get_idea_repository)]
ScriptRepoDep = Annotated[ScriptRepository, Depends(get_script_repository)]
ReviewRepoDep = Annotated[ReviewRepository, Depends(get_review_repository)]
UserSettingsRepoDep = Annotated[
    UserSettingsRepository,
    Depends(get_user_settings_repository)
]
UserProfileRepoDep = Annotated[
    UserProfileRepository,
    Depends(get_user_profile_repository)
]
SubscriptionRepoDep = Annotated[
    SubscriptionRepository,
    Depends(get_subscription_repository)
]
