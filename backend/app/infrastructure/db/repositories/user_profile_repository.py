"""
UserProfile Repository for ScriptFlow

Identity mirror writes driven by the Clerk webhook, plus the Stripe
customer id attached during checkout.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.db.models.user_profile import (
    UserProfile,
    UserProfileIdentity,
)
from app.infrastructure.db.repositories.base_repository import BaseRepository


class UserProfileRepository(BaseRepository[UserProfile]):
    """
    Repository for UserProfile queries keyed by owner id.

    - upsert_identity: create-or-refresh from user.created
    - update_identity: refresh from user.updated (no row, no write)
    - set_stripe_customer_id: attach the customer created at checkout
    """

    def __init__(self, session: AsyncSession):
        super().__init__(UserProfile, session)

    async def get_by_user_id(self, user_id: str) -> Optional[UserProfile]:
        """
        Get a profile by the owner id.

        Args:
            user_id: The Clerk user id (not profile ID)

        Returns:
            UserProfile or None if not found
        """
        stmt = select(UserProfile).where(UserProfile.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_identity(
        self,
        user_id: str,
        identity: UserProfileIdentity,
    ) -> UserProfile:
        """
        Insert the profile, or overwrite only its identity fields.

        stripe_customer_id is never part of the conflict update so a
        checkout that ran before the identity event keeps its customer.
        """
        now = datetime.now(timezone.utc)
        fields = identity.model_dump()

        stmt = pg_insert(UserProfile).values(
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **fields,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={**fields, "updated_at": now},
        )
        await self.session.execute(stmt)
        await self.session.flush()

        profile = await self.get_by_user_id(user_id)
        await self.session.refresh(profile)
        return profile

    async def update_identity(
        self,
        user_id: str,
        identity: UserProfileIdentity,
    ) -> Optional[UserProfile]:
        """
        Update identity fields by owner id.

        Fields left unset on identity are not touched.

        Returns:
            Updated UserProfile or None if no row exists
        """
        profile = await self.get_by_user_id(user_id)
        if not profile:
            return None

        update_data = identity.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.now(timezone.utc)

        for field, value in update_data.items():
            setattr(profile, field, value)

        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def set_stripe_customer_id(
        self,
        user_id: str,
        stripe_customer_id: str,
    ) -> UserProfile:
        """Attach a Stripe customer, creating a bare profile if needed."""
        now = datetime.now(timezone.utc)

        stmt = pg_insert(UserProfile).values(
            user_id=user_id,
            stripe_customer_id=stripe_customer_id,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={"stripe_customer_id": stripe_customer_id, "updated_at": now},
        )
        await self.session.execute(stmt)
        await self.session.flush()

        profile = await self.get_by_user_id(user_id)
        await self.session.refresh(profile)
        return profile

    async def delete_by_user_id(self, user_id: str) -> bool:
        """
        Delete a profile by owner id.

        Returns:
            True if deleted, False if not found
        """
        stmt = delete(UserProfile).where(UserProfile.user_id == user_id)
        result = await self.session.execute(stmt)
        return bool(result.rowcount)
