"""
Clerk Webhook Verification

Clerk signs its webhooks with Svix. Verification needs the raw body and the
three svix-* headers; the verified payload is returned as a plain dict.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from svix.webhooks import Webhook, WebhookVerificationError

from app.config.settings import get_settings


logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class ClerkWebhookError(Exception):
    """Raised when a Clerk webhook cannot be authenticated."""
    pass


class ClerkWebhookVerifier:
    """Verifies Svix-signed Clerk webhook deliveries."""

    def __init__(self, secret: Optional[str] = None):
        self._secret = secret if secret is not None else get_settings().clerk_webhook_secret

    @property
    def is_configured(self) -> bool:
        return bool(self._secret)

    @staticmethod
    def extract_headers(headers: Mapping[str, str]) -> Optional[Dict[str, str]]:
        """The three Svix headers, or None if any is missing."""
        values = {name: headers.get(name) for name in SVIX_HEADERS}
        if not all(values.values()):
            return None
        return values

    def verify(self, payload: bytes, svix_headers: Dict[str, str]) -> Dict[str, Any]:
        """
        Verify the signature and return the event payload.

        Raises:
            ClerkWebhookError: Signature or timestamp did not verify
        """
        try:
            return Webhook(self._secret).verify(payload, svix_headers)
        except WebhookVerificationError as e:
            logger.warning(f"Clerk webhook verification failed: {e}")
            raise ClerkWebhookError("Invalid signature") from e


_clerk_verifier_instance: Optional[ClerkWebhookVerifier] = None


def get_clerk_verifier() -> ClerkWebhookVerifier:
    """Get or create the Clerk webhook verifier singleton."""
    global _clerk_verifier_instance

    if _clerk_verifier_instance is None:
        _clerk_verifier_instance = ClerkWebhookVerifier()

    return _clerk_verifier_instance
