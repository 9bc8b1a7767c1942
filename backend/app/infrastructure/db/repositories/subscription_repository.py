"""
Subscription Repository

Data access layer for the local subscription mirror.
Follows Repository pattern for Clean Architecture.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.db.models.subscription import SubscriptionModel
from app.domain.subscription import Subscription


logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """
    Repository for subscription data access.

    Session-injected: writes flush, the request session commits. Rows are
    mapped to the Subscription domain entity on the way out.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # Query Methods
    # =========================================================================

    async def get_by_user_id(self, user_id: str) -> Optional[Subscription]:
        """
        Get subscription by owner id.

        Args:
            user_id: Clerk user id

        Returns:
            Subscription domain model or None
        """
        model = await self._get_model(SubscriptionModel.user_id == user_id)
        return self._to_domain(model) if model else None

    async def get_by_user_and_stripe_id(
        self,
        user_id: Optional[str],
        stripe_subscription_id: str,
    ) -> Optional[Subscription]:
        """
        Get subscription by owner id AND Stripe subscription ID.

        A None owner never matches.
        """
        if not user_id:
            return None
        model = await self._get_model(
            SubscriptionModel.user_id == user_id,
            SubscriptionModel.stripe_subscription_id == stripe_subscription_id,
        )
        return self._to_domain(model) if model else None

    async def get_by_stripe_subscription_id(
        self,
        stripe_subscription_id: str,
    ) -> Optional[Subscription]:
        """
        Get subscription by Stripe subscription ID alone.

        Args:
            stripe_subscription_id: Stripe subscription ID

        Returns:
            Subscription domain model or None
        """
        model = await self._get_model(
            SubscriptionModel.stripe_subscription_id == stripe_subscription_id
        )
        return self._to_domain(model) if model else None

    # =========================================================================
    # Command Methods
    # =========================================================================

    async def upsert(
        self,
        user_id: str,
        plan_name: str,
        status: str,
        stripe_subscription_id: str,
        stripe_price_id: str,
        current_period_end: Optional[datetime] = None,
    ) -> Subscription:
        """
        Create or update subscription by user_id.

        Uses PostgreSQL upsert for atomicity. current_period_end is only
        overwritten when a value is supplied.
        """
        now = datetime.now(timezone.utc)

        values: Dict[str, Any] = {
            "user_id": user_id,
            "plan_name": plan_name,
            "status": status,
            "stripe_subscription_id": stripe_subscription_id,
            "stripe_price_id": stripe_price_id,
            "current_period_end": current_period_end,
            "created_at": now,
            "updated_at": now,
        }
        set_: Dict[str, Any] = {
            "plan_name": plan_name,
            "status": status,
            "stripe_subscription_id": stripe_subscription_id,
            "stripe_price_id": stripe_price_id,
            "updated_at": now,
        }
        if current_period_end is not None:
            set_["current_period_end"] = current_period_end

        stmt = pg_insert(SubscriptionModel).values(**values)
        stmt = stmt.on_conflict_do_update(index_elements=["user_id"], set_=set_)

        await self.session.execute(stmt)
        await self.session.flush()

        model = await self._get_model(SubscriptionModel.user_id == user_id)
        await self.session.refresh(model)
        logger.info(f"Upserted {plan_name} subscription {stripe_subscription_id} for user {user_id}")
        return self._to_domain(model)

    async def update_by_stripe_id(
        self,
        user_id: str,
        stripe_subscription_id: str,
        values: Dict[str, Any],
    ) -> Optional[Subscription]:
        """
        Update columns on the owner's row mirroring a Stripe subscription.

        Returns:
            Updated subscription, or None when no row mirrors it
        """
        model = await self._get_model(
            SubscriptionModel.user_id == user_id,
            SubscriptionModel.stripe_subscription_id == stripe_subscription_id,
        )
        if not model:
            return None

        for field, value in values.items():
            setattr(model, field, value)
        model.updated_at = datetime.now(timezone.utc)

        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        logger.info(f"Updated subscription {stripe_subscription_id}: {sorted(values)}")
        return self._to_domain(model)

    async def delete_all_for_user(self, user_id: str) -> int:
        stmt = delete(SubscriptionModel).where(SubscriptionModel.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    # =========================================================================
    # Mapping Methods
    # =========================================================================

    async def _get_model(self, *criteria) -> Optional[SubscriptionModel]:
        statement = select(SubscriptionModel).where(*criteria)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    def _to_domain(self, model: SubscriptionModel) -> Subscription:
        """Convert database model to domain entity."""
        return Subscription(
            id=model.id,
            user_id=model.user_id,
            plan_name=model.plan_name,
            status=model.status,
            stripe_subscription_id=model.stripe_subscription_id,
            stripe_price_id=model.stripe_price_id,
            current_period_end=model.current_period_end,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
