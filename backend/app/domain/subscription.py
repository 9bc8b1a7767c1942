"""
Subscription Domain Models

Plan table, subscription entity and the entitlement variants used to gate
paid features. Enums, DTOs and domain entities for the billing context.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from app.config.settings import settings


class SubscriptionStatus(str, Enum):
    """Stripe subscription lifecycle status, mirrored locally."""
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    UNPAID = "unpaid"
    PAUSED = "paused"


ACTIVE_STATUSES = frozenset({SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value})


# =============================================================================
# Plan Table (Business Logic)
# =============================================================================

class Plan(BaseModel):
    """A purchasable (or free) tier."""
    id: str
    name: str
    description: str
    price: int  # Whole dollars per month
    stripe_price_id: Optional[str] = None
    rank: int
    features: List[str]


PLANS: List[Plan] = [
    Plan(
        id="free",
        name="Free",
        description="Perfect for getting started with essential features.",
        price=0,
        stripe_price_id=None,
        rank=0,
        features=[
            "Pipeline access",
            "Idea inbox",
            "Script workspace",
        ],
    ),
    Plan(
        id="creator",
        name="Creator",
        description="For serious publishers looking to optimize their script performance.",
        price=12,
        stripe_price_id=settings.stripe_price_id_creator,
        rank=1,
        features=[
            "All Free tier features",
            "Deliverability scoring",
            "Pattern analytics",
            "Script comparison",
            "Teleprompter",
            "Script review",
            "Manual Scheduling",
        ],
    ),
    Plan(
        id="pro",
        name="Pro",
        description="Maximum accountability and control.",
        price=29,
        stripe_price_id=settings.stripe_price_id_pro,
        rank=2,
        features=[
            "All Creator tier features",
            "Draft limits",
            "Friction controls",
        ],
    ),
]


def get_plan_by_price_id(price_id: Optional[str]) -> Optional[Plan]:
    """Resolve a Stripe price to its plan. The free plan has no price."""
    if not price_id:
        return None
    return next((plan for plan in PLANS if plan.stripe_price_id == price_id), None)


def get_plan_by_id(plan_id: str) -> Optional[Plan]:
    return next((plan for plan in PLANS if plan.id == plan_id), None)


def get_plan_by_name(name: str) -> Optional[Plan]:
    return next((plan for plan in PLANS if plan.name == name), None)


def valid_price_ids() -> List[str]:
    return [plan.stripe_price_id for plan in PLANS if plan.stripe_price_id]


# =============================================================================
# Domain Entities
# =============================================================================

class Subscription(BaseModel):
    """Local mirror of the owner's Stripe subscription (at most one per owner)."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    user_id: str
    plan_name: str
    status: str
    stripe_subscription_id: str
    stripe_price_id: str
    current_period_end: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class FreeEntitlement(BaseModel):
    """No subscription row exists for the owner."""
    kind: str = "free"
    plan_name: str = "Free"
    is_paid: bool = False


class PaidEntitlement(BaseModel):
    """
    A subscription row exists. Access is granted on presence alone; the
    status is carried so callers can distinguish active/trialing rows.
    """
    kind: str = "paid"
    plan_name: str
    status: str
    current_period_end: Optional[datetime] = None
    is_paid: bool = True

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


Entitlement = Union[FreeEntitlement, PaidEntitlement]


def entitlement_for(subscription: Optional[Subscription]) -> Entitlement:
    if subscription is None:
        return FreeEntitlement()
    return PaidEntitlement(
        plan_name=subscription.plan_name,
        status=subscription.status,
        current_period_end=subscription.current_period_end,
    )


def has_paid_plan(entitlement: Entitlement) -> bool:
    return isinstance(entitlement, PaidEntitlement)


def is_plan(entitlement: Entitlement, plan_name: str) -> bool:
    return has_paid_plan(entitlement) and entitlement.plan_name == plan_name


# =============================================================================
# Request/Response DTOs
# =============================================================================

class CheckoutRequest(BaseModel):
    """Request DTO for starting a subscription checkout."""
    price_id: str = Field(..., min_length=1, description="Stripe price to subscribe to")


class EntitlementResponse(BaseModel):
    """Response DTO for the caller's current entitlement."""
    kind: str
    plan_name: str
    is_paid: bool
    is_active: bool = Field(description="Whether the subscription is active or trialing")
    status: Optional[str] = None
    current_period_end: Optional[datetime] = None

    @classmethod
    def from_entitlement(cls, entitlement: Entitlement) -> "EntitlementResponse":
        if isinstance(entitlement, PaidEntitlement):
            return cls(
                kind=entitlement.kind,
                plan_name=entitlement.plan_name,
                is_paid=True,
                is_active=entitlement.is_active,
                status=entitlement.status,
                current_period_end=entitlement.current_period_end,
            )
        return cls(kind=entitlement.kind, plan_name=entitlement.plan_name, is_paid=False, is_active=False)


class PlansResponse(BaseModel):
    plans: List[Plan]
