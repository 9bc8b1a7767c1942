"""
Review Repository

Owner-scoped persistence for post-publish reviews.
"""

from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import ReviewCreate
from app.infrastructure.db.models.review import Review
from app.infrastructure.db.repositories.base_repository import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    """Repository for Review persistence and history queries."""

    def __init__(self, session: AsyncSession):
        super().__init__(Review, session)

    async def performance_history(self, user_id: str) -> List[Tuple[float, float]]:
        """(views, retention_percentage) of every review the owner has submitted."""
        stmt = select(Review.views, Review.retention_percentage).where(
            Review.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def create_for_script(
        self,
        user_id: str,
        script_id: int,
        data: ReviewCreate,
        is_above_average: bool,
    ) -> Review:
        now = datetime.now(timezone.utc)
        review = Review(
            user_id=user_id,
            script_id=script_id,
            is_above_average=is_above_average,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        return await self.add(review)
