"""
Script Repository

Owner-scoped persistence for scripts, including the embedded version and
attachment lists.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Attachment, ScriptCreate, ScriptVersion, Stage
from app.infrastructure.db.models.script import Script
from app.infrastructure.db.repositories.base_repository import BaseRepository


class ScriptRepository(BaseRepository[Script]):
    """
    Repository for Script CRUD and pipeline writes.

    JSON list columns are replaced wholesale on append so the ORM sees the
    change.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Script, session)

    async def list_for_user(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 500
    ) -> List[Script]:
        """Get the owner's scripts, most recently edited first."""
        stmt = (
            select(Script)
            .where(Script.user_id == user_id)
            .order_by(Script.last_edited.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_stage(self, user_id: str, stage: Stage) -> List[Script]:
        stmt = select(Script).where(
            Script.user_id == user_id,
            Script.stage == stage.value,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_for_user(
        self,
        user_id: str,
        data: ScriptCreate,
        idea_id: Optional[int] = None,
    ) -> Script:
        """
        Create a new script for an owner.

        Args:
            user_id: Owner id
            data: Script creation data
            idea_id: Source idea when promoting

        Returns:
            Created Script
        """
        now = datetime.now(timezone.utc)
        values = data.model_dump()
        values["stage"] = data.stage.value

        script = Script(
            user_id=user_id,
            idea_id=idea_id,
            attachments=[],
            versions=[],
            last_edited=now,
            created_at=now,
            updated_at=now,
            **values,
        )
        return await self.add(script)

    async def edit(
        self,
        user_id: str,
        script_id: int,
        values: Dict[str, Any],
    ) -> Optional[Script]:
        """Apply workspace edits and refresh last_edited."""
        values = dict(values)
        values["last_edited"] = datetime.now(timezone.utc)
        return await self.update_fields(user_id, script_id, values)

    async def update_stage(
        self,
        user_id: str,
        script_id: int,
        stage: Stage,
        edited_at: datetime,
    ) -> Optional[Script]:
        """The single write of a stage transition."""
        return await self.update_fields(
            user_id,
            script_id,
            {"stage": stage.value, "last_edited": edited_at},
        )

    async def append_version(
        self,
        user_id: str,
        script_id: int,
        version: ScriptVersion,
    ) -> Optional[Script]:
        script = await self.get_for_user(user_id, script_id)
        if not script:
            return None

        versions = list(script.versions or [])
        versions.append(version.model_dump(mode="json"))
        return await self.update_fields(user_id, script_id, {"versions": versions})

    async def append_attachment(
        self,
        user_id: str,
        script_id: int,
        attachment: Attachment,
    ) -> Optional[Script]:
        script = await self.get_for_user(user_id, script_id)
        if not script:
            return None

        attachments = list(script.attachments or [])
        attachments.append(attachment.model_dump(mode="json"))
        return await self.edit(user_id, script_id, {"attachments": attachments})

    async def set_schedule(
        self,
        user_id: str,
        script_id: int,
        scheduled_date: Optional[datetime],
    ) -> Optional[Script]:
        return await self.update_fields(user_id, script_id, {"scheduled_date": scheduled_date})

    async def set_published_date(
        self,
        user_id: str,
        script_id: int,
        published_date: datetime,
    ) -> Optional[Script]:
        return await self.update_fields(user_id, script_id, {"published_date": published_date})
