# billing/tests/test_subscription_service.py
from unittest.mock import Mock, patch

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import DatabaseError
from django.test import RequestFactory

from billing.exceptions import BillingGatewayError
from billing.plans import PlanType
from billing.services import SubscriptionService, reset_registry
from billing.services.subscription_service import _registry, status_cache_key
from ledger.tests.factories import ProUserFactory, UserFactory

User = get_user_model()

PRO_PAYLOAD = {"subscribed": True, "plan_type": "pro", "plan_expiry_date": "2024-02-01T00:00:00+00:00"}
FREE_PAYLOAD = {"subscribed": False, "plan_type": "free", "plan_expiry_date": None}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway():
    gateway = Mock()
    gateway.check_subscription.return_value = PRO_PAYLOAD
    return gateway


@pytest.fixture
def service(gateway, clock):
    return SubscriptionService(gateway=gateway, clock=clock)


@pytest.mark.django_db
class TestGetStatus:
    def test_resolves_and_syncs_profile(self, service, gateway):
        user = UserFactory(email="ana@example.com")

        status = service.get_status(user)

        assert status.plan_type == "pro"
        gateway.check_subscription.assert_called_once_with("ana@example.com")
        user.refresh_from_db()
        assert user.plan_type == PlanType.PRO
        assert user.plan_expiry_date.isoformat() == "2024-02-01T00:00:00+00:00"

    def test_status_is_cached_until_stale(self, service, gateway, clock):
        user = UserFactory()

        service.get_status(user)
        service.get_status(user)
        assert gateway.check_subscription.call_count == 1

        clock.now += 300
        service.get_status(user)
        assert gateway.check_subscription.call_count == 2

    def test_forced_refresh(self, service, gateway):
        user = UserFactory()
        service.get_status(user)
        service.get_status(user, refresh=True)
        assert gateway.check_subscription.call_count == 2

    def test_gateway_failure_falls_back_to_stored_plan(self, service, gateway):
        user = ProUserFactory()
        gateway.check_subscription.side_effect = BillingGatewayError("timeout")

        status = service.get_status(user)

        assert status.plan_type == "pro"
        assert status.error == "timeout"
        assert service.plan_for(user) == PlanType.PRO

    def test_downgrade_is_mirrored(self, service, gateway):
        user = ProUserFactory()
        gateway.check_subscription.return_value = FREE_PAYLOAD

        assert service.plan_for(user) == PlanType.FREE
        user.refresh_from_db()
        assert user.plan_type == PlanType.FREE

    def test_forget_drops_cached_state(self, service, gateway):
        user = UserFactory()
        service.get_status(user)

        service.forget(user)
        service.get_status(user)

        assert gateway.check_subscription.call_count == 2

    def test_changed_email_is_a_new_identity(self, service, gateway):
        user = UserFactory(email="old@example.com")
        service.get_status(user)

        user.email = "new@example.com"
        service.get_status(user)

        assert [call.args[0] for call in gateway.check_subscription.call_args_list] == [
            "old@example.com",
            "new@example.com",
        ]

    def test_checkout_return_triggers_delayed_refresh(self, service, gateway, clock):
        user = UserFactory()
        service.get_status(user)

        result = service.handle_checkout_return(user, "/dashboard?checkout=success")
        assert result == {"location": "/dashboard", "checkout": "success"}

        clock.now += 1
        service.get_status(user)
        assert gateway.check_subscription.call_count == 1

        clock.now += 1
        service.get_status(user)
        assert gateway.check_subscription.call_count == 2


@pytest.mark.django_db
class TestReadsDuringLookup:
    def test_first_lookup_in_flight_answers_profile_plan(self, service, gateway):
        user = ProUserFactory()
        seen = []

        def lookup(email):
            inner = service.get_status(user)
            stored = User.objects.get(pk=user.pk).plan_type
            seen.append((inner.plan_type, inner.is_loading, stored))
            return PRO_PAYLOAD

        gateway.check_subscription.side_effect = lookup

        status = service.get_status(user)

        assert seen == [("pro", True, "pro")]
        assert status.plan_type == "pro"
        assert service.plan_for(user) == PlanType.PRO

    def test_stale_refresh_in_flight_keeps_last_confirmed_value(self, service, gateway, clock):
        user = ProUserFactory()
        service.get_status(user)
        clock.now += 300
        seen = []

        def lookup(email):
            inner = service.get_status(user)
            seen.append((inner.plan_type, inner.is_loading))
            return FREE_PAYLOAD

        gateway.check_subscription.side_effect = lookup

        status = service.get_status(user)

        assert seen == [("pro", True)]
        assert status.plan_type == "free"
        user.refresh_from_db()
        assert user.plan_type == PlanType.FREE

    def test_failed_fallback_lookup_does_not_block_later_refreshes(self, service, gateway):
        user = ProUserFactory()
        gateway.check_subscription.side_effect = BillingGatewayError("timeout")

        with patch.object(SubscriptionService, "_fallback_plan", side_effect=DatabaseError("down")):
            status = service.get_status(user)

        assert status.plan_type == "free"
        assert status.error == "timeout"
        assert status.is_loading is False
        user.refresh_from_db()
        assert user.plan_type == PlanType.PRO

        gateway.check_subscription.side_effect = None
        status = service.get_status(user, refresh=True)

        assert status.plan_type == "pro"
        assert status.error is None
        assert gateway.check_subscription.call_count == 2


@pytest.mark.django_db
class TestSharedStatus:
    def test_new_resolver_starts_from_cached_payload(self, service, gateway, clock):
        user = UserFactory()
        service.get_status(user)

        reset_registry()
        status = SubscriptionService(gateway=gateway, clock=clock).get_status(user)

        assert status.plan_type == "pro"
        assert gateway.check_subscription.call_count == 1

    def test_cached_payload_of_another_email_is_ignored(self, service, gateway):
        user = UserFactory(email="old@example.com")
        service.get_status(user)
        reset_registry()

        user.email = "new@example.com"
        service.get_status(user)

        assert gateway.check_subscription.call_count == 2

    def test_failed_lookup_is_not_shared(self, service, gateway):
        user = UserFactory()
        gateway.check_subscription.side_effect = BillingGatewayError("timeout")
        service.get_status(user)

        assert cache.get(status_cache_key(user.id)) is None

    def test_checkout_success_drops_cached_payload(self, service):
        user = UserFactory()
        service.get_status(user)
        assert cache.get(status_cache_key(user.id)) is not None

        service.handle_checkout_return(user, "/dashboard?checkout=success")

        assert cache.get(status_cache_key(user.id)) is None

    def test_registry_keeps_most_recent_users(self, service, settings):
        settings.SALDUS_SUBSCRIPTION_REGISTRY_SIZE = 2
        first, second, third = UserFactory.create_batch(3)

        for user in (first, second, third):
            service.get_status(user)

        assert list(_registry) == [second.id, third.id]


class TestResolveOrigin:
    @pytest.fixture(autouse=True)
    def frontend_settings(self, settings):
        settings.FRONTEND_URL = "https://app.saldus.com"
        settings.CORS_ALLOWED_ORIGINS = ["http://localhost:5173"]
        self.factory = RequestFactory()

    def test_allowed_origin_is_used(self):
        request = self.factory.post("/", HTTP_ORIGIN="http://localhost:5173")
        assert SubscriptionService.resolve_origin(request) == "http://localhost:5173"

    def test_unknown_origin_falls_back_to_frontend(self):
        request = self.factory.post("/", HTTP_ORIGIN="https://evil.example.com")
        assert SubscriptionService.resolve_origin(request) == "https://app.saldus.com"

    def test_missing_origin(self):
        assert SubscriptionService.resolve_origin(self.factory.post("/")) == "https://app.saldus.com"
