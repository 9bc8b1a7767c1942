"""
Identity Sync

Applies verified Clerk webhook events to the local profile mirror and
removes all of an owner's data when the account is deleted.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.webhook_events import ClerkEventKind
from app.infrastructure.db.models.user_profile import UserProfileIdentity
from app.infrastructure.db.repositories import (
    IdeaRepository,
    ReviewRepository,
    ScriptRepository,
    SubscriptionRepository,
    UserProfileRepository,
    UserSettingsRepository,
)
from app.infrastructure.exceptions import WebhookCorrelationError


logger = logging.getLogger(__name__)


def resolve_primary_email(data: Dict[str, Any]) -> Optional[str]:
    """
    The address flagged as primary, falling back to the first listed.
    """
    addresses: List[Dict[str, Any]] = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")

    for address in addresses:
        if primary_id and address.get("id") == primary_id:
            return address.get("email_address")

    if addresses:
        return addresses[0].get("email_address")
    return None


class IdentitySync:
    """
    Maps one Clerk event onto the profile store.

    All repositories must share one session so a cascade delete is a
    single transaction.
    """

    def __init__(
        self,
        profile_repo: UserProfileRepository,
        idea_repo: IdeaRepository,
        script_repo: ScriptRepository,
        review_repo: ReviewRepository,
        settings_repo: UserSettingsRepository,
        subscription_repo: SubscriptionRepository,
    ):
        self.profile_repo = profile_repo
        self.idea_repo = idea_repo
        self.script_repo = script_repo
        self.review_repo = review_repo
        self.settings_repo = settings_repo
        self.subscription_repo = subscription_repo

    @classmethod
    def from_session(cls, session: AsyncSession) -> "IdentitySync":
        return cls(
            profile_repo=UserProfileRepository(session),
            idea_repo=IdeaRepository(session),
            script_repo=ScriptRepository(session),
            review_repo=ReviewRepository(session),
            settings_repo=UserSettingsRepository(session),
            subscription_repo=SubscriptionRepository(session),
        )

    async def handle(self, event: Dict[str, Any]) -> ClerkEventKind:
        """Dispatch a verified event and return the kind that was handled."""
        event_type = event.get("type", "")
        kind = ClerkEventKind.from_type(event_type)
        data = event.get("data") or {}

        if kind == ClerkEventKind.USER_CREATED:
            await self.handle_user_created(data)
        elif kind == ClerkEventKind.USER_UPDATED:
            await self.handle_user_updated(data)
        elif kind == ClerkEventKind.USER_DELETED:
            await self.handle_user_deleted(data)
        else:
            logger.info(f"Unhandled Clerk event type: {event_type}")

        return kind

    async def handle_user_created(self, data: Dict[str, Any]) -> None:
        user_id = data.get("id")
        email = resolve_primary_email(data)
        if not user_id or not email:
            raise WebhookCorrelationError(
                "No email for new user",
                event_type=ClerkEventKind.USER_CREATED.value,
                missing_fields=["id"] if not user_id else ["email_addresses"],
            )

        await self.profile_repo.upsert_identity(
            user_id,
            UserProfileIdentity(
                first_name=data.get("first_name"),
                last_name=data.get("last_name"),
                email=email,
            ),
        )
        logger.info(f"User created: {user_id} ({email})")

    async def handle_user_updated(self, data: Dict[str, Any]) -> None:
        user_id = data.get("id")
        if not user_id:
            raise WebhookCorrelationError(
                "User update without id",
                event_type=ClerkEventKind.USER_UPDATED.value,
                missing_fields=["id"],
            )

        fields = {
            "first_name": data.get("first_name"),
            "last_name": data.get("last_name"),
        }
        email = resolve_primary_email(data)
        if email:
            fields["email"] = email

        profile = await self.profile_repo.update_identity(user_id, UserProfileIdentity(**fields))
        if profile is None:
            logger.info(f"User updated before profile existed: {user_id}")
        else:
            logger.info(f"User updated: {user_id}")

    async def handle_user_deleted(self, data: Dict[str, Any]) -> None:
        """Delete children before parents: reviews, scripts, ideas, settings, subscriptions, profile."""
        user_id = data.get("id")
        if not user_id:
            raise WebhookCorrelationError(
                "User deletion without id",
                event_type=ClerkEventKind.USER_DELETED.value,
                missing_fields=["id"],
            )

        reviews = await self.review_repo.delete_all_for_user(user_id)
        scripts = await self.script_repo.delete_all_for_user(user_id)
        ideas = await self.idea_repo.delete_all_for_user(user_id)
        await self.settings_repo.delete_all_for_user(user_id)
        await self.subscription_repo.delete_all_for_user(user_id)
        await self.profile_repo.delete_by_user_id(user_id)

        logger.info(
            f"User deleted: {user_id} "
            f"({reviews} reviews, {scripts} scripts, {ideas} ideas)"
        )
