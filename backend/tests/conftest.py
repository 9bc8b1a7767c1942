"""
Test configuration and fixtures for ScriptFlow.

Provides shared fixtures for unit and route tests. Route tests never touch
a database: repositories and providers are swapped through
app.dependency_overrides.
"""

import pytest
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from app.domain.readiness import ScriptSnapshot
from app.domain.subscription import FreeEntitlement, PaidEntitlement
from app.infrastructure.db.models import Script


TEST_USER_ID = "user_2test"


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Get the FastAPI application with a clean override table."""
    from app.main import app
    app.dependency_overrides.clear()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Get synchronous test client."""
    return TestClient(app)


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Get async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_id():
    return TEST_USER_ID


@pytest.fixture
def authed_app(app, user_id):
    """App with the bearer-token check replaced by a fixed user."""
    from app.api.dependencies import get_current_user_id

    app.dependency_overrides[get_current_user_id] = lambda: user_id
    return app


@pytest.fixture
def authed_client(authed_app):
    return TestClient(authed_app)


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_script_repo(authed_app):
    """Script repository mock wired into every route that asks for one."""
    from app.infrastructure.db.dependencies import get_script_repository

    repo = AsyncMock()
    authed_app.dependency_overrides[get_script_repository] = lambda: repo
    return repo


@pytest.fixture
def mock_idea_repo(authed_app):
    from app.infrastructure.db.dependencies import get_idea_repository

    repo = AsyncMock()
    authed_app.dependency_overrides[get_idea_repository] = lambda: repo
    return repo


@pytest.fixture
def mock_settings_repo(authed_app):
    from app.infrastructure.db.dependencies import get_user_settings_repository

    repo = AsyncMock()
    authed_app.dependency_overrides[get_user_settings_repository] = lambda: repo
    return repo


@pytest.fixture
def mock_profile_repo(authed_app):
    from app.infrastructure.db.dependencies import get_user_profile_repository

    repo = AsyncMock()
    authed_app.dependency_overrides[get_user_profile_repository] = lambda: repo
    return repo


@pytest.fixture
def mock_stripe_service(app):
    """Stripe service mock for billing and webhook routes."""
    from app.infrastructure.payments.stripe_service import get_stripe_service

    service = MagicMock()
    service.webhook_secret = "whsec_test"
    service.create_customer = AsyncMock()
    service.create_checkout_session = AsyncMock()
    service.create_portal_session = AsyncMock()
    service.retrieve_subscription = AsyncMock()
    app.dependency_overrides[get_stripe_service] = lambda: service
    return service


@pytest.fixture
def set_entitlement(authed_app):
    """Pin the caller's entitlement: None for free, else a plan name."""
    from app.api.dependencies import get_entitlement

    def _set(plan_name=None, status="active"):
        if plan_name is None:
            entitlement = FreeEntitlement()
        else:
            entitlement = PaidEntitlement(plan_name=plan_name, status=status)
        authed_app.dependency_overrides[get_entitlement] = lambda: entitlement
        return entitlement

    return _set


# =============================================================================
# Sample Data Fixtures
# =============================================================================

def make_script(**overrides) -> Script:
    """A persisted-looking Script row."""
    now = datetime.now(timezone.utc)
    values = {
        "id": 1,
        "user_id": TEST_USER_ID,
        "title": "Why my first video flopped",
        "stage": "editing",
        "hook_type": "question",
        "target_length_minutes": 10,
        "words_per_minute": 150,
        "hook_content": "Ever wondered why nobody watched?",
        "outline_content": "",
        "script_content": "",
        "notes_content": "",
        "checklist_intro": True,
        "checklist_body": True,
        "checklist_cta": True,
        "attachments": [],
        "versions": [],
        "last_edited": now,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return Script(**values)


@pytest.fixture
def ready_snapshot():
    """A script that passes every readiness rule."""
    return ScriptSnapshot(
        hook_type="story",
        target_length_minutes=8,
        words_per_minute=150,
        script_content="Short body. [ACTION: cut to b-roll]",
        checklist_intro=True,
        checklist_body=True,
        checklist_cta=True,
    )


@pytest.fixture
def empty_snapshot():
    """Nothing classified, nothing checked, no content."""
    return ScriptSnapshot(
        hook_type="",
        target_length_minutes=0,
        script_content="",
        checklist_intro=False,
        checklist_body=False,
        checklist_cta=False,
    )


@pytest.fixture
def script_factory():
    return make_script
