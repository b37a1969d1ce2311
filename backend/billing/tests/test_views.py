# billing/tests/test_views.py
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from billing.exceptions import BillingGatewayError
from ledger.tests.factories import ProUserFactory, TransactionFactory, UserFactory


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def auth_client(user):
    api_client = APIClient()
    api_client.force_authenticate(user=user)
    return api_client


@pytest.mark.django_db
class TestSubscriptionView:
    def test_requires_authentication(self):
        response = APIClient().get(reverse("subscription"))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unconfigured_billing_falls_back_to_stored_plan(self):
        api_client = APIClient()
        api_client.force_authenticate(user=ProUserFactory())

        response = api_client.get(reverse("subscription"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["plan_type"] == "pro"
        assert response.data["is_loading"] is False
        assert "STRIPE_SECRET_KEY" in response.data["error"]

    @patch("billing.gateway.StripeGateway.check_subscription")
    def test_resolved_status(self, check_subscription, auth_client):
        check_subscription.return_value = {
            "subscribed": True,
            "plan_type": "pro",
            "plan_expiry_date": "2024-02-01T00:00:00+00:00",
        }

        response = auth_client.get(reverse("subscription"), {"refresh": "true"})

        assert response.data == {
            "subscribed": True,
            "plan_type": "pro",
            "plan_expiry_date": "2024-02-01T00:00:00+00:00",
            "is_loading": False,
            "error": None,
        }


@pytest.mark.django_db
class TestCheckoutViews:
    def test_checkout_without_stripe_key_is_503(self, auth_client):
        response = auth_client.post(reverse("checkout"))
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    @patch("billing.gateway.StripeGateway.create_checkout")
    def test_checkout_returns_url(self, create_checkout, auth_client, user):
        create_checkout.return_value = {"url": "https://checkout.stripe.com/c/pay/cs_1"}

        response = auth_client.post(reverse("checkout"), HTTP_ORIGIN="https://evil.example.com")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data == {"url": "https://checkout.stripe.com/c/pay/cs_1"}
        create_checkout.assert_called_once_with(user, "http://localhost:5173")

    @patch("billing.gateway.StripeGateway.create_checkout", side_effect=BillingGatewayError("declined"))
    def test_checkout_gateway_error_is_502(self, create_checkout, auth_client):
        response = auth_client.post(reverse("checkout"))
        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.data["detail"].code == "billing_gateway_error"

    def test_portal_without_customer(self, auth_client):
        response = auth_client.post(reverse("customer-portal"))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "error" in response.data

    def test_checkout_return(self, auth_client):
        response = auth_client.post(
            reverse("checkout-return"), {"location": "/dashboard?checkout=success"}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"location": "/dashboard", "checkout": "success"}

    def test_checkout_return_requires_location(self, auth_client):
        response = auth_client.post(reverse("checkout-return"), {}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestUsageLimitsView:
    def test_free_limits(self, auth_client, user):
        TransactionFactory.create_batch(2, user=user)

        response = auth_client.get(reverse("usage-limits"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            "plan_type": "free",
            "limits": {
                "transactions": {"count": 2, "limit": 5, "can_create": True},
                "clients": {"count": 0, "limit": 5, "can_create": True},
            },
        }

    def test_pro_limits_are_unbounded(self):
        api_client = APIClient()
        api_client.force_authenticate(user=ProUserFactory())

        response = api_client.get(reverse("usage-limits"))

        assert response.data["limits"]["transactions"] == {
            "count": 0,
            "limit": None,
            "can_create": True,
        }
