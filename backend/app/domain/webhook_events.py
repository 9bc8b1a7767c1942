"""
Webhook Event Kinds

Closed sets of provider event types this service reacts to. Anything else
maps to UNHANDLED and is acknowledged without effect.
"""

from enum import Enum


class StripeEventKind(str, Enum):
    CHECKOUT_COMPLETED = "checkout.session.completed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    UNHANDLED = "unhandled"

    @classmethod
    def from_type(cls, event_type: str) -> "StripeEventKind":
        try:
            kind = cls(event_type)
        except ValueError:
            return cls.UNHANDLED
        return kind


class ClerkEventKind(str, Enum):
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"
    UNHANDLED = "unhandled"

    @classmethod
    def from_type(cls, event_type: str) -> "ClerkEventKind":
        try:
            kind = cls(event_type)
        except ValueError:
            return cls.UNHANDLED
        return kind
