# ledger/tests/unit/test_service_exception_handler.py

from unittest.mock import Mock, patch

import pytest
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

from billing.exceptions import (
    BillingConfigurationError,
    BillingGatewayError,
    BillingGatewayFailure,
    BillingUnavailable,
)
from ledger.analytics.usage import WeeklyLimit
from ledger.exceptions import WeeklyLimitExceeded, WeeklyLimitReached
from ledger.mixins.service_exception_handler import ServiceExceptionHandlerMixin


class MockService:
    """A mock service to simulate different exception scenarios."""

    def method_success(self, value):
        return value

    def method_drf_validation_error(self):
        raise DRFValidationError("DRF validation error")

    def method_django_validation_error(self):
        raise DjangoValidationError({"amount": "Amount must be greater than zero"})

    def method_weekly_limit(self):
        raise WeeklyLimitExceeded("transactions", WeeklyLimit(5, 5, False))

    def method_python_permission_error(self):
        raise PermissionError("Goals are available on the Pro plan only")

    def method_not_found(self):
        raise ObjectDoesNotExist("missing")

    def method_billing_configuration(self):
        raise BillingConfigurationError("STRIPE_SECRET_KEY is not set")

    def method_billing_gateway(self):
        raise BillingGatewayError("card declined")

    def method_generic_exception(self):
        raise Exception("Generic service error")


class TestServiceExceptionHandlerMixin:
    """Tests for ServiceExceptionHandlerMixin."""

    def setup_method(self, method):
        self.mixin_instance = ServiceExceptionHandlerMixin()
        self.mixin_instance.request = Mock()
        self.mixin_instance.request.user = Mock(id=1)
        self.mock_service = MockService()

    def test_success_passes_arguments(self):
        assert self.mixin_instance.handle_service_call(self.mock_service.method_success, "ok") == "ok"

    def test_drf_validation_error_is_reraised(self):
        with pytest.raises(DRFValidationError, match="DRF validation error"):
            self.mixin_instance.handle_service_call(self.mock_service.method_drf_validation_error)

    @patch("ledger.mixins.service_exception_handler.logger")
    def test_django_validation_error_is_translated(self, mock_logger):
        with pytest.raises(DRFValidationError) as exc_info:
            self.mixin_instance.handle_service_call(self.mock_service.method_django_validation_error)

        assert "amount" in exc_info.value.detail
        extra = mock_logger.warning.call_args.kwargs["extra"]
        assert extra["action"] == "service_validation_error_django"
        assert extra["service_name"] == "MockService"
        assert extra["method_name"] == "method_django_validation_error"

    def test_weekly_limit_becomes_403_with_code(self):
        with pytest.raises(WeeklyLimitReached) as exc_info:
            self.mixin_instance.handle_service_call(self.mock_service.method_weekly_limit)

        assert exc_info.value.status_code == 403
        assert exc_info.value.get_codes() == "weekly_limit_reached"

    def test_permission_error_becomes_permission_denied(self):
        with pytest.raises(DRFPermissionDenied, match="Pro plan only"):
            self.mixin_instance.handle_service_call(self.mock_service.method_python_permission_error)

    def test_object_does_not_exist_becomes_not_found(self):
        with pytest.raises(NotFound):
            self.mixin_instance.handle_service_call(self.mock_service.method_not_found)

    def test_billing_errors(self):
        with pytest.raises(BillingUnavailable):
            self.mixin_instance.handle_service_call(self.mock_service.method_billing_configuration)
        with pytest.raises(BillingGatewayFailure) as exc_info:
            self.mixin_instance.handle_service_call(self.mock_service.method_billing_gateway)
        assert exc_info.value.status_code == 502

    @patch("ledger.mixins.service_exception_handler.logger")
    def test_generic_exception_hides_details(self, mock_logger):
        with pytest.raises(APIException) as exc_info:
            self.mixin_instance.handle_service_call(self.mock_service.method_generic_exception)

        assert "Generic service error" not in str(exc_info.value.detail)
        assert exc_info.value.get_codes() == "service_error"
        assert mock_logger.error.call_args.kwargs["extra"]["severity"] == "critical"
