"""
Idea Repository

Owner-scoped persistence for the idea inbox.
"""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import IdeaCreate
from app.infrastructure.db.models.idea import Idea
from app.infrastructure.db.repositories.base_repository import BaseRepository


class IdeaRepository(BaseRepository[Idea]):
    """Repository for Idea CRUD."""

    def __init__(self, session: AsyncSession):
        super().__init__(Idea, session)

    async def create_for_user(self, user_id: str, data: IdeaCreate) -> Idea:
        """
        Capture a new idea for an owner.

        Args:
            user_id: Owner id
            data: Idea creation data

        Returns:
            Created Idea
        """
        now = datetime.now(timezone.utc)
        values = data.model_dump(mode="json")

        idea = Idea(
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **values,
        )
        return await self.add(idea)
