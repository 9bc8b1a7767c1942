"""
Subscription Reconciler

Applies verified Stripe webhook events to the local subscription mirror.

Every handler re-reads the subscription from Stripe instead of trusting
the event body, so redelivered or out-of-order events converge on
Stripe's current state. Handlers either write once or not at all; a
correlation fault raises before any write so the request session rolls
back and Stripe retries.

Critical Events:
- checkout.session.completed: Create/refresh the owner's subscription row
- invoice.payment_succeeded: Refresh status and period end
- customer.subscription.updated: Refresh status, period end, price and plan
- customer.subscription.deleted: Mark canceled (plan and price kept)
- invoice.payment_failed: Mark past_due
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.domain.subscription import SubscriptionStatus, get_plan_by_price_id
from app.domain.webhook_events import StripeEventKind
from app.infrastructure.db.repositories.subscription_repository import SubscriptionRepository
from app.infrastructure.exceptions import WebhookCorrelationError
from app.infrastructure.payments.stripe_service import StripeService


logger = logging.getLogger(__name__)


# =============================================================================
# Payload helpers
# =============================================================================

def _first_item(subscription: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    items = (subscription.get("items") or {}).get("data") or []
    return items[0] if items else None


def _to_datetime(timestamp: Any) -> Optional[datetime]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(int(timestamp), tz=timezone.utc)


def extract_period_end(subscription: Dict[str, Any]) -> Optional[datetime]:
    """
    Current period end of a subscription.

    Newer API versions moved the field onto subscription items.
    """
    timestamp = subscription.get("current_period_end")
    if timestamp is None:
        item = _first_item(subscription)
        if item:
            timestamp = item.get("current_period_end")
    return _to_datetime(timestamp)


def extract_price_id(subscription: Dict[str, Any]) -> Optional[str]:
    item = _first_item(subscription)
    if not item:
        return None
    price = item.get("price")
    if isinstance(price, dict):
        return price.get("id")
    return price


def _as_id(value: Any) -> Optional[str]:
    """Expandable Stripe fields arrive as an id string or an object."""
    if isinstance(value, dict):
        return value.get("id")
    return value or None


def extract_invoice_subscription_id(invoice: Dict[str, Any]) -> Optional[str]:
    subscription_id = _as_id(invoice.get("subscription"))
    if subscription_id:
        return subscription_id

    details = (invoice.get("parent") or {}).get("subscription_details") or {}
    return _as_id(details.get("subscription"))


def _owner_of(subscription: Dict[str, Any]) -> Optional[str]:
    return (subscription.get("metadata") or {}).get("user_id")


# =============================================================================
# Reconciler
# =============================================================================

class SubscriptionReconciler:
    """
    Maps one Stripe event to at most one subscription write.

    Args:
        repo: Subscription repository bound to the request session
        stripe_service: Used to re-fetch subscriptions
    """

    def __init__(self, repo: SubscriptionRepository, stripe_service: StripeService):
        self.repo = repo
        self.stripe_service = stripe_service
        self._handlers = {
            StripeEventKind.CHECKOUT_COMPLETED: self.handle_checkout_completed,
            StripeEventKind.INVOICE_PAYMENT_SUCCEEDED: self.handle_invoice_payment_succeeded,
            StripeEventKind.SUBSCRIPTION_UPDATED: self.handle_subscription_updated,
            StripeEventKind.SUBSCRIPTION_DELETED: self.handle_subscription_deleted,
            StripeEventKind.INVOICE_PAYMENT_FAILED: self.handle_invoice_payment_failed,
        }

    async def handle(self, event: Dict[str, Any]) -> bool:
        """
        Dispatch a verified event.

        Returns:
            True if a row was written, False if the event was ignored
        """
        event_type = event.get("type", "")
        kind = StripeEventKind.from_type(event_type)

        handler = self._handlers.get(kind)
        if handler is None:
            logger.info(f"Ignoring unhandled Stripe event type: {event_type}")
            return False

        obj = (event.get("data") or {}).get("object") or {}
        applied = await handler(obj)
        logger.info(
            f"Stripe event {event.get('id')} ({event_type}): "
            f"{'applied' if applied else 'ignored'}"
        )
        return applied

    # =========================================================================
    # Event Handlers
    # =========================================================================

    async def handle_checkout_completed(self, session: Dict[str, Any]) -> bool:
        """Activate the subscription bought in a completed checkout."""
        if session.get("mode") != "subscription":
            logger.debug(f"Checkout {session.get('id')} is not a subscription checkout")
            return False

        metadata = session.get("metadata") or {}
        user_id = metadata.get("user_id")
        price_id = metadata.get("price_id")
        subscription_id = _as_id(session.get("subscription"))

        missing = [
            name for name, value in (
                ("metadata.user_id", user_id),
                ("metadata.price_id", price_id),
                ("subscription", subscription_id),
            )
            if not value
        ]
        if missing:
            raise WebhookCorrelationError(
                "Checkout session is missing correlation data",
                event_type=StripeEventKind.CHECKOUT_COMPLETED.value,
                missing_fields=missing,
            )

        plan = get_plan_by_price_id(price_id)
        if plan is None:
            logger.warning(f"Checkout for unknown price {price_id}, ignoring")
            return False

        subscription = await self.stripe_service.retrieve_subscription(subscription_id)

        await self.repo.upsert(
            user_id=user_id,
            plan_name=plan.name,
            status=subscription.get("status"),
            stripe_subscription_id=subscription_id,
            stripe_price_id=price_id,
            current_period_end=extract_period_end(subscription),
        )
        logger.info(f"Activated {plan.name} subscription for user {user_id}")
        return True

    async def handle_invoice_payment_succeeded(self, invoice: Dict[str, Any]) -> bool:
        """Extend the tracked subscription after a paid invoice."""
        subscription_id = extract_invoice_subscription_id(invoice)
        if not subscription_id:
            logger.debug(f"Invoice {invoice.get('id')} has no subscription")
            return False

        subscription = await self.stripe_service.retrieve_subscription(subscription_id)
        period_end = self._require_period_end(
            subscription, StripeEventKind.INVOICE_PAYMENT_SUCCEEDED
        )

        existing = await self.repo.get_by_user_and_stripe_id(
            _owner_of(subscription), subscription_id
        )
        if existing is None:
            logger.info(f"Subscription {subscription_id} not tracked yet, ignoring invoice")
            return False

        await self.repo.update_by_stripe_id(
            existing.user_id,
            subscription_id,
            {
                "status": subscription.get("status"),
                "current_period_end": period_end,
            },
        )
        return True

    async def handle_subscription_updated(self, event_subscription: Dict[str, Any]) -> bool:
        """Mirror status, period and price changes (plan switches, renewals)."""
        subscription_id = event_subscription.get("id")
        subscription = await self.stripe_service.retrieve_subscription(subscription_id)
        period_end = self._require_period_end(
            subscription, StripeEventKind.SUBSCRIPTION_UPDATED
        )

        existing = await self.repo.get_by_user_and_stripe_id(
            _owner_of(subscription), subscription_id
        )
        if existing is None:
            logger.info(f"Subscription {subscription_id} not tracked yet, ignoring update")
            return False

        values: Dict[str, Any] = {
            "status": subscription.get("status"),
            "current_period_end": period_end,
        }
        price_id = extract_price_id(subscription)
        if price_id:
            values["stripe_price_id"] = price_id
            plan = get_plan_by_price_id(price_id)
            if plan is not None:
                values["plan_name"] = plan.name

        await self.repo.update_by_stripe_id(existing.user_id, subscription_id, values)
        return True

    async def handle_subscription_deleted(self, subscription: Dict[str, Any]) -> bool:
        """Mark canceled. Plan, price and period end keep their last values."""
        subscription_id = subscription.get("id")

        existing = await self.repo.get_by_user_and_stripe_id(
            _owner_of(subscription), subscription_id
        )
        if existing is None:
            logger.info(f"Deleted subscription {subscription_id} was never tracked")
            return False

        await self.repo.update_by_stripe_id(
            existing.user_id,
            subscription_id,
            {"status": SubscriptionStatus.CANCELED.value},
        )
        logger.info(f"Subscription {subscription_id} canceled for user {existing.user_id}")
        return True

    async def handle_invoice_payment_failed(self, invoice: Dict[str, Any]) -> bool:
        """Mark past_due. The row is found by Stripe id alone."""
        subscription_id = extract_invoice_subscription_id(invoice)
        if not subscription_id:
            return False

        existing = await self.repo.get_by_stripe_subscription_id(subscription_id)
        if existing is None:
            logger.info(f"Payment failed for untracked subscription {subscription_id}")
            return False

        await self.repo.update_by_stripe_id(
            existing.user_id,
            subscription_id,
            {"status": SubscriptionStatus.PAST_DUE.value},
        )
        logger.warning(f"Payment failed for subscription {subscription_id}, set to past_due")
        return True

    @staticmethod
    def _require_period_end(
        subscription: Dict[str, Any],
        kind: StripeEventKind,
    ) -> datetime:
        period_end = extract_period_end(subscription)
        if period_end is None:
            raise WebhookCorrelationError(
                f"Subscription {subscription.get('id')} has no current period end",
                event_type=kind.value,
                missing_fields=["current_period_end"],
            )
        return period_end
