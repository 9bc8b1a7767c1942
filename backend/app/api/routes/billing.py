"""
Billing API Routes

Checkout, customer portal, plan table and entitlement lookup.
Checkout and portal answer with a 303 redirect to the hosted Stripe page.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from app.api.dependencies import CurrentUserDep, EntitlementDep, UserProfileRepoDep
from app.config.settings import get_settings
from app.domain.subscription import (
    PLANS,
    CheckoutRequest,
    EntitlementResponse,
    PlansResponse,
    valid_price_ids,
)
from app.infrastructure.exceptions import ValidationError
from app.infrastructure.payments.stripe_service import (
    StripeService,
    StripeServiceError,
    get_stripe_service,
)


logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Plans & Entitlement
# =============================================================================

@router.get("/billing/plans", response_model=PlansResponse)
async def list_plans():
    """Static plan table, cheapest first."""
    return PlansResponse(plans=sorted(PLANS, key=lambda plan: plan.rank))


@router.get("/billing/entitlement", response_model=EntitlementResponse)
async def get_entitlement(entitlement: EntitlementDep):
    """The caller's current entitlement: free, or paid with plan and status."""
    return EntitlementResponse.from_entitlement(entitlement)


# =============================================================================
# Checkout Endpoints
# =============================================================================

@router.post("/billing/checkout")
async def create_checkout_session(
    request: CheckoutRequest,
    user_id: CurrentUserDep,
    profiles: UserProfileRepoDep,
    stripe_service: StripeService = Depends(get_stripe_service),
):
    """
    Start a subscription checkout for one of the paid plans.

    Creates the owner's Stripe customer on first use and stores it on the
    profile before redirecting to Stripe.
    """
    if request.price_id not in valid_price_ids():
        raise ValidationError("Invalid price ID", details={"price_id": request.price_id})

    settings = get_settings()

    try:
        profile = await profiles.get_by_user_id(user_id)
        customer_id = profile.stripe_customer_id if profile else None

        if not customer_id:
            customer = await stripe_service.create_customer(
                user_id=user_id,
                email=profile.email if profile else None,
            )
            customer_id = customer.id
            await profiles.set_stripe_customer_id(user_id, customer_id)
            # Keep the customer even if the checkout session below fails
            await profiles.session.commit()

        session = await stripe_service.create_checkout_session(
            customer_id=customer_id,
            price_id=request.price_id,
            user_id=user_id,
            success_url=settings.billing_url,
            cancel_url=settings.billing_url,
        )

    except StripeServiceError as e:
        logger.error(f"Stripe error creating checkout: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )

    return RedirectResponse(session.url, status_code=status.HTTP_303_SEE_OTHER)


# =============================================================================
# Portal Endpoints
# =============================================================================

@router.post("/billing/portal")
async def create_portal_session(
    user_id: CurrentUserDep,
    profiles: UserProfileRepoDep,
    stripe_service: StripeService = Depends(get_stripe_service),
):
    """
    Open the Stripe Customer Portal.

    Allows customers to update payment methods, switch or cancel plans,
    and view invoices.
    """
    profile = await profiles.get_by_user_id(user_id)
    if not profile or not profile.stripe_customer_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stripe customer not found."
        )

    try:
        session = await stripe_service.create_portal_session(
            customer_id=profile.stripe_customer_id,
            return_url=get_settings().billing_url,
        )
    except StripeServiceError as e:
        logger.error(f"Stripe error creating portal: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )

    return RedirectResponse(session.url, status_code=status.HTTP_303_SEE_OTHER)
