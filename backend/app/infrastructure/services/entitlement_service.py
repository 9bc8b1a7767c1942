"""
Entitlement Service

Answers "what may this owner use" from the local subscription mirror.
"""

from app.domain.subscription import Entitlement, entitlement_for
from app.infrastructure.db.repositories.subscription_repository import SubscriptionRepository


class EntitlementService:
    def __init__(self, repo: SubscriptionRepository):
        self.repo = repo

    async def get_entitlement(self, user_id: str) -> Entitlement:
        """FreeEntitlement without a subscription row, PaidEntitlement with one."""
        subscription = await self.repo.get_by_user_id(user_id)
        return entitlement_for(subscription)
