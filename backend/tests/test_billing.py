"""
Integration Tests for Billing Routes

Checkout and portal redirects, plan table and entitlement lookup, with
Stripe and the profile repository mocked.
"""

import pytest
from unittest.mock import MagicMock

from app.config.settings import settings
from app.infrastructure.db.models import UserProfile
from app.infrastructure.payments.stripe_service import StripeServiceError


CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_123"
PORTAL_URL = "https://billing.stripe.com/p/session/test_123"


def profile(user_id, customer_id=None):
    return UserProfile(
        id=1,
        user_id=user_id,
        email="ada@example.com",
        stripe_customer_id=customer_id,
    )


class TestPlansAndEntitlement:

    def test_plans_listed_cheapest_first(self, client):
        response = client.get("/api/billing/plans")

        assert response.status_code == 200
        plans = response.json()["plans"]
        assert [plan["name"] for plan in plans] == ["Free", "Creator", "Pro"]
        assert plans[0]["stripe_price_id"] is None

    def test_entitlement_requires_auth(self, client):
        response = client.get("/api/billing/entitlement")

        assert response.status_code == 401

    def test_free_entitlement(self, authed_client, set_entitlement):
        set_entitlement(None)

        response = authed_client.get("/api/billing/entitlement")

        assert response.status_code == 200
        assert response.json()["kind"] == "free"
        assert response.json()["is_paid"] is False

    def test_canceled_entitlement_is_paid_but_inactive(self, authed_client, set_entitlement):
        set_entitlement("Creator", status="canceled")

        body = authed_client.get("/api/billing/entitlement").json()

        assert body["kind"] == "paid"
        assert body["plan_name"] == "Creator"
        assert body["is_paid"] is True
        assert body["is_active"] is False


class TestCheckout:

    @pytest.fixture
    def checkout_session(self, mock_stripe_service):
        mock_stripe_service.create_checkout_session.return_value = MagicMock(url=CHECKOUT_URL)
        return mock_stripe_service

    def test_invalid_price_rejected(self, authed_client, mock_profile_repo, checkout_session):
        response = authed_client.post(
            "/api/billing/checkout",
            json={"price_id": "price_unknown"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid price ID"
        checkout_session.create_checkout_session.assert_not_awaited()

    def test_first_checkout_creates_and_stores_customer(
        self, authed_client, user_id, mock_profile_repo, checkout_session
    ):
        mock_profile_repo.get_by_user_id.return_value = profile(user_id)
        checkout_session.create_customer.return_value = MagicMock(id="cus_new")

        response = authed_client.post(
            "/api/billing/checkout",
            json={"price_id": settings.stripe_price_id_creator},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == CHECKOUT_URL
        checkout_session.create_customer.assert_awaited_once_with(
            user_id=user_id, email="ada@example.com"
        )
        mock_profile_repo.set_stripe_customer_id.assert_awaited_once_with(user_id, "cus_new")
        kwargs = checkout_session.create_checkout_session.await_args.kwargs
        assert kwargs["customer_id"] == "cus_new"
        assert kwargs["price_id"] == settings.stripe_price_id_creator
        assert kwargs["user_id"] == user_id
        assert kwargs["success_url"] == settings.billing_url

    def test_existing_customer_is_reused(
        self, authed_client, user_id, mock_profile_repo, checkout_session
    ):
        mock_profile_repo.get_by_user_id.return_value = profile(user_id, "cus_existing")

        response = authed_client.post(
            "/api/billing/checkout",
            json={"price_id": settings.stripe_price_id_pro},
            follow_redirects=False,
        )

        assert response.status_code == 303
        checkout_session.create_customer.assert_not_awaited()
        mock_profile_repo.set_stripe_customer_id.assert_not_awaited()
        mock_profile_repo.session.commit.assert_not_awaited()

    def test_stripe_failure_is_bad_gateway(
        self, authed_client, user_id, mock_profile_repo, checkout_session
    ):
        mock_profile_repo.get_by_user_id.return_value = profile(user_id, "cus_existing")
        checkout_session.create_checkout_session.side_effect = StripeServiceError("card_declined")

        response = authed_client.post(
            "/api/billing/checkout",
            json={"price_id": settings.stripe_price_id_pro},
            follow_redirects=False,
        )

        assert response.status_code == 502

    def test_new_customer_kept_when_checkout_fails(
        self, authed_client, user_id, mock_profile_repo, checkout_session
    ):
        mock_profile_repo.get_by_user_id.return_value = profile(user_id)
        checkout_session.create_customer.return_value = MagicMock(id="cus_new")
        checkout_session.create_checkout_session.side_effect = StripeServiceError("api_error")

        response = authed_client.post(
            "/api/billing/checkout",
            json={"price_id": settings.stripe_price_id_creator},
            follow_redirects=False,
        )

        assert response.status_code == 502
        mock_profile_repo.set_stripe_customer_id.assert_awaited_once_with(user_id, "cus_new")
        mock_profile_repo.session.commit.assert_awaited_once()


class TestPortal:

    def test_no_customer_is_not_found(self, authed_client, mock_profile_repo, mock_stripe_service):
        mock_profile_repo.get_by_user_id.return_value = None

        response = authed_client.post("/api/billing/portal", follow_redirects=False)

        assert response.status_code == 404
        assert response.json()["detail"] == "Stripe customer not found."
        mock_stripe_service.create_portal_session.assert_not_awaited()

    def test_portal_redirects(self, authed_client, user_id, mock_profile_repo, mock_stripe_service):
        mock_profile_repo.get_by_user_id.return_value = profile(user_id, "cus_existing")
        mock_stripe_service.create_portal_session.return_value = MagicMock(url=PORTAL_URL)

        response = authed_client.post("/api/billing/portal", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == PORTAL_URL
        mock_stripe_service.create_portal_session.assert_awaited_once_with(
            customer_id="cus_existing",
            return_url=settings.billing_url,
        )
