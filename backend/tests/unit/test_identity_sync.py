"""
Unit tests for the Clerk identity sync.
"""

from unittest.mock import AsyncMock

import pytest

from app.domain.webhook_events import ClerkEventKind
from app.infrastructure.exceptions import WebhookCorrelationError
from app.infrastructure.services.identity_sync import IdentitySync, resolve_primary_email


def clerk_user(**overrides):
    data = {
        "id": "user_2abc",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "primary_email_address_id": "idn_2",
        "email_addresses": [
            {"id": "idn_1", "email_address": "old@example.com"},
            {"id": "idn_2", "email_address": "ada@example.com"},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def repos():
    return {
        "profile_repo": AsyncMock(),
        "idea_repo": AsyncMock(),
        "script_repo": AsyncMock(),
        "review_repo": AsyncMock(),
        "settings_repo": AsyncMock(),
        "subscription_repo": AsyncMock(),
    }


@pytest.fixture
def sync(repos):
    return IdentitySync(**repos)


class TestResolvePrimaryEmail:

    def test_prefers_flagged_primary(self):
        assert resolve_primary_email(clerk_user()) == "ada@example.com"

    def test_falls_back_to_first_address(self):
        data = clerk_user(primary_email_address_id="idn_missing")

        assert resolve_primary_email(data) == "old@example.com"

    def test_no_addresses(self):
        assert resolve_primary_email(clerk_user(email_addresses=[])) is None


class TestUserCreated:

    @pytest.mark.asyncio
    async def test_upserts_identity(self, sync, repos):
        kind = await sync.handle({"type": "user.created", "data": clerk_user()})

        assert kind == ClerkEventKind.USER_CREATED
        user_id, identity = repos["profile_repo"].upsert_identity.await_args.args
        assert user_id == "user_2abc"
        assert identity.email == "ada@example.com"
        assert identity.first_name == "Ada"
        assert identity.last_name == "Lovelace"

    @pytest.mark.asyncio
    async def test_without_email_is_a_fault(self, sync, repos):
        with pytest.raises(WebhookCorrelationError, match="No email for new user"):
            await sync.handle({"type": "user.created", "data": clerk_user(email_addresses=[])})

        repos["profile_repo"].upsert_identity.assert_not_awaited()


class TestUserUpdated:

    @pytest.mark.asyncio
    async def test_updates_names_and_email(self, sync, repos):
        await sync.handle({"type": "user.updated", "data": clerk_user(first_name="Augusta")})

        user_id, identity = repos["profile_repo"].update_identity.await_args.args
        assert user_id == "user_2abc"
        assert identity.first_name == "Augusta"
        assert identity.email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_missing_email_leaves_stored_email_alone(self, sync, repos):
        await sync.handle({"type": "user.updated", "data": clerk_user(email_addresses=[])})

        _, identity = repos["profile_repo"].update_identity.await_args.args
        assert "email" not in identity.model_fields_set

    @pytest.mark.asyncio
    async def test_unknown_profile_is_not_an_error(self, sync, repos):
        repos["profile_repo"].update_identity.return_value = None

        kind = await sync.handle({"type": "user.updated", "data": clerk_user()})

        assert kind == ClerkEventKind.USER_UPDATED


class TestUserDeleted:

    @pytest.mark.asyncio
    async def test_deletes_children_before_profile(self, sync, repos):
        calls = []

        def recorder(name):
            def _record(user_id):
                calls.append((name, user_id))
                return 0
            return _record

        repos["review_repo"].delete_all_for_user.side_effect = recorder("reviews")
        repos["script_repo"].delete_all_for_user.side_effect = recorder("scripts")
        repos["idea_repo"].delete_all_for_user.side_effect = recorder("ideas")
        repos["settings_repo"].delete_all_for_user.side_effect = recorder("settings")
        repos["subscription_repo"].delete_all_for_user.side_effect = recorder("subscriptions")
        repos["profile_repo"].delete_by_user_id.side_effect = recorder("profile")

        await sync.handle({"type": "user.deleted", "data": {"id": "user_2abc", "deleted": True}})

        assert calls == [
            ("reviews", "user_2abc"),
            ("scripts", "user_2abc"),
            ("ideas", "user_2abc"),
            ("settings", "user_2abc"),
            ("subscriptions", "user_2abc"),
            ("profile", "user_2abc"),
        ]

    @pytest.mark.asyncio
    async def test_without_id_is_a_fault(self, sync, repos):
        with pytest.raises(WebhookCorrelationError):
            await sync.handle({"type": "user.deleted", "data": {"deleted": True}})

        repos["profile_repo"].delete_by_user_id.assert_not_awaited()


class TestUnhandled:

    @pytest.mark.asyncio
    async def test_other_events_are_ignored(self, sync, repos):
        kind = await sync.handle({"type": "session.created", "data": {"id": "sess_1"}})

        assert kind == ClerkEventKind.UNHANDLED
        for repo in repos.values():
            assert repo.mock_calls == []
