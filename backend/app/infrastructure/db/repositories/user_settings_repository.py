"""
UserSettings Repository

One settings row per owner, keyed by the owner id itself.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import SettingsUpdate
from app.infrastructure.db.models.user_settings import UserSettings
from app.infrastructure.db.repositories.base_repository import BaseRepository


class UserSettingsRepository(BaseRepository[UserSettings]):
    """Repository for the per-owner settings row."""

    def __init__(self, session: AsyncSession):
        super().__init__(UserSettings, session)

    async def get_by_user_id(self, user_id: str) -> Optional[UserSettings]:
        stmt = select(UserSettings).where(UserSettings.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_preferences(self, user_id: str, data: SettingsUpdate) -> UserSettings:
        """
        Create or update the owner's preferences.

        Baselines and the pending-review fields are left untouched.
        """
        now = datetime.now(timezone.utc)
        preferences = data.model_dump()

        stmt = pg_insert(UserSettings).values(
            user_id=user_id,
            created_at=now,
            updated_at=now,
            has_pending_review=False,
            **preferences,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={**preferences, "updated_at": now},
        )
        await self.session.execute(stmt)
        await self.session.flush()

        settings_row = await self.get_by_user_id(user_id)
        await self.session.refresh(settings_row)
        return settings_row

    async def update_for_user(
        self,
        user_id: str,
        values: Dict[str, Any],
    ) -> Optional[UserSettings]:
        """Update the owner's row. Returns None when no row exists."""
        settings_row = await self.get_by_user_id(user_id)
        if not settings_row:
            return None

        for field, value in values.items():
            setattr(settings_row, field, value)

        self.session.add(settings_row)
        await self.session.flush()
        await self.session.refresh(settings_row)
        return settings_row
