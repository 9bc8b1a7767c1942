"""
Provider Webhook Handlers

Stripe drives the subscription mirror, Clerk drives the profile mirror.
Both endpoints authenticate the raw body before anything is parsed,
process the event inside the request's database session, and return 500
on handler faults so the provider redelivers (the session rolls back, so
nothing is partially written).
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.dependencies import SessionDep
from app.infrastructure.db.dependencies import SubscriptionRepoDep
from app.infrastructure.identity.clerk_service import (
    ClerkWebhookError,
    ClerkWebhookVerifier,
    get_clerk_verifier,
)
from app.infrastructure.payments.stripe_service import (
    StripeService,
    StripeServiceError,
    get_stripe_service,
)
from app.infrastructure.services.identity_sync import IdentitySync
from app.infrastructure.services.subscription_reconciler import SubscriptionReconciler


logger = logging.getLogger(__name__)

router = APIRouter()

HANDLER_FAILED = "Webhook handler failed"


# =============================================================================
# Dependency Providers
# =============================================================================

async def get_subscription_reconciler(
    repo: SubscriptionRepoDep,
    stripe_service: StripeService = Depends(get_stripe_service),
) -> SubscriptionReconciler:
    return SubscriptionReconciler(repo, stripe_service)


async def get_identity_sync(session: SessionDep) -> IdentitySync:
    return IdentitySync.from_session(session)


# =============================================================================
# Stripe
# =============================================================================

@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    stripe_service: StripeService = Depends(get_stripe_service),
    reconciler: SubscriptionReconciler = Depends(get_subscription_reconciler),
):
    """
    Handle Stripe webhook events.

    Verifies the signature, then reconciles the local subscription mirror.
    Returns 200 to acknowledge receipt (Stripe retries on 4xx/5xx).
    """
    if not stripe_service.webhook_secret:
        logger.error("STRIPE_WEBHOOK_SECRET is not set")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="STRIPE_WEBHOOK_SECRET is not set",
        )

    # Get raw payload and signature
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    if not signature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Stripe signature header",
        )

    # Verify signature
    try:
        stripe_service.verify_webhook_signature(payload, signature)
    except StripeServiceError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook signature verification failed",
        )

    event = json.loads(payload)
    event_type = event.get("type")
    logger.info(f"Processing Stripe event: {event_type} ({event.get('id')})")

    try:
        await reconciler.handle(event)
    except Exception as e:
        logger.error(f"Error processing Stripe webhook {event_type}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=HANDLER_FAILED,
        ) from e

    return {"received": True}


# =============================================================================
# Clerk
# =============================================================================

@router.post("/webhooks/clerk")
async def clerk_webhook(
    request: Request,
    verifier: ClerkWebhookVerifier = Depends(get_clerk_verifier),
    identity_sync: IdentitySync = Depends(get_identity_sync),
):
    """
    Handle Clerk user lifecycle events (Svix-signed).

    user.created / user.updated refresh the profile mirror; user.deleted
    removes every row the owner has.
    """
    if not verifier.is_configured:
        logger.error("CLERK_WEBHOOK_SECRET is not set")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="CLERK_WEBHOOK_SECRET is not set",
        )

    svix_headers = verifier.extract_headers(request.headers)
    if svix_headers is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Svix headers",
        )

    payload = await request.body()

    try:
        event = verifier.verify(payload, svix_headers)
    except ClerkWebhookError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        )

    event_type = event.get("type")
    logger.info(f"Processing Clerk event: {event_type}")

    try:
        await identity_sync.handle(event)
    except Exception as e:
        logger.error(f"Error processing Clerk webhook {event_type}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=HANDLER_FAILED,
        ) from e

    return {"status": "success", "message": "Webhook processed successfully"}
