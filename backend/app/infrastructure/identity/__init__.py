"""
Identity Infrastructure Module

Clerk webhook verification.
"""

from app.infrastructure.identity.clerk_service import (
    ClerkWebhookError,
    ClerkWebhookVerifier,
    get_clerk_verifier,
)

__all__ = ["ClerkWebhookError", "ClerkWebhookVerifier", "get_clerk_verifier"]
