"""
API Dependencies

FastAPI dependency injection for authentication, entitlement gates and
request-scoped services.

Security: Clerk session tokens are verified cryptographically against the
Clerk JWKS endpoint (RS256). Never decode without verification.
"""

import logging
from typing import Annotated, Callable, Optional

import jwt
from jwt import PyJWKClient
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config.settings import get_settings
from app.domain.pipeline import PipelineService
from app.domain.subscription import Entitlement, has_paid_plan, is_plan
from app.infrastructure.db.dependencies import (
    SessionDep,
    ScriptRepoDep,
    SubscriptionRepoDep,
)
from app.infrastructure.services.entitlement_service import EntitlementService


logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

UPGRADE_REQUIRED = "Upgrade required"

# Cached JWKS client, avoids re-fetching keys on every request.
# PyJWKClient caches keys internally and refreshes ~every 10 min.
_jwks_client: Optional[PyJWKClient] = None


def _get_jwks_client() -> PyJWKClient:
    """Return a singleton PyJWKClient for the Clerk JWKS endpoint."""
    global _jwks_client
    if _jwks_client is None:
        settings = get_settings()
        if not settings.clerk_jwks_url:
            raise jwt.exceptions.PyJWKClientError("CLERK_JWKS_URL is not set")
        _jwks_client = PyJWKClient(settings.clerk_jwks_url, cache_keys=True)
    return _jwks_client


def _decode_with_jwks(token: str, issuer: Optional[str]) -> dict:
    """Verify a Clerk session JWT (RS256). Issuer is checked when configured."""
    client = _get_jwks_client()
    signing_key = client.get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        issuer=issuer,
        options={
            "require": ["exp", "sub"],
            "verify_aud": False,
        },
    )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Extract and verify the Clerk user id from the bearer token.

    Returns:
        Authenticated user ID (``sub`` claim).

    Raises:
        HTTPException 401: token missing, expired, or invalid.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    settings = get_settings()

    try:
        payload = _decode_with_jwks(credentials.credentials, settings.clerk_issuer)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except (jwt.exceptions.PyJWKClientError, jwt.InvalidTokenError) as e:
        logger.warning("JWT verification failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or unverifiable token",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user ID",
        )

    return user_id


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]


# =============================================================================
# Services
# =============================================================================

async def get_entitlement_service(repo: SubscriptionRepoDep) -> EntitlementService:
    return EntitlementService(repo)


async def get_pipeline_service(repo: ScriptRepoDep) -> PipelineService:
    return PipelineService(repo)


PipelineServiceDep = Annotated[PipelineService, Depends(get_pipeline_service)]


async def get_entitlement(
    user_id: CurrentUserDep,
    service: EntitlementService = Depends(get_entitlement_service),
) -> Entitlement:
    """The caller's current entitlement variant."""
    return await service.get_entitlement(user_id)


EntitlementDep = Annotated[Entitlement, Depends(get_entitlement)]


# =============================================================================
# Feature gates
# =============================================================================

async def require_paid_plan(entitlement: EntitlementDep) -> Entitlement:
    """Any subscription row unlocks paid features."""
    if not has_paid_plan(entitlement):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=UPGRADE_REQUIRED,
        )
    return entitlement


def require_plan(plan_name: str) -> Callable:
    """Dependency factory gating on an exact plan name."""

    async def _require_plan(entitlement: EntitlementDep) -> Entitlement:
        if not is_plan(entitlement, plan_name):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=UPGRADE_REQUIRED,
            )
        return entitlement

    return _require_plan


# =============================================================================
# Re-export DB dependencies for a single import source
# Routers should import from api.dependencies, not db.dependencies directly.
# =============================================================================
from app.infrastructure.db.dependencies import (  # noqa: E402, F401
    IdeaRepoDep,
    ReviewRepoDep,
    UserSettingsRepoDep,
    UserProfileRepoDep,
)
