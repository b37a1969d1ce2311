"""
Service exception handler mixin.

Provides unified exception handling for service layer operations with
structured logging and DRF exception propagation.
"""

import logging

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

from ..exceptions import WeeklyLimitExceeded, WeeklyLimitReached

logger = logging.getLogger(__name__)


class ServiceExceptionHandlerMixin:
    """
    Mixin for handling service layer exceptions in views.

    Translation:
    - Django ``ValidationError`` -> DRF ``ValidationError`` (400)
    - ``WeeklyLimitExceeded`` -> ``WeeklyLimitReached`` (403, ``weekly_limit_reached``)
    - ``PermissionError`` -> DRF ``PermissionDenied`` (403)
    - ``ObjectDoesNotExist`` -> ``NotFound`` (404)
    - ``BillingConfigurationError`` -> 503, ``BillingGatewayError`` -> 502
    - anything else -> generic ``APIException`` without internal details

    Usage:
        result = self.handle_service_call(
            self.transaction_service.create_transaction, request.user, data, plan
        )
    """

    def handle_service_call(self, service_call, *args, **kwargs):
        """
        Execute service call with exception translation and logging.

        Args:
            service_call: Service method to execute
            *args: Positional arguments for service call
            **kwargs: Keyword arguments for service call

        Returns:
            Any: Result from service call
        """
        service_name = getattr(service_call, "__self__", self).__class__.__name__
        method_name = getattr(service_call, "__name__", str(service_call))
        request = getattr(self, "request", None)
        user_id = getattr(getattr(request, "user", None), "id", None) if request else None

        log_context = {
            "service_name": service_name,
            "method_name": method_name,
            "user_id": user_id,
            "component": "ServiceExceptionHandlerMixin",
        }

        try:
            return service_call(*args, **kwargs)

        except (DRFValidationError, DRFPermissionDenied):
            raise

        except DjangoValidationError as e:
            error_messages = e.message_dict if hasattr(e, "error_dict") else e.messages
            logger.warning(
                "Service validation error (Django)",
                extra={
                    **log_context,
                    "error_messages": error_messages,
                    "action": "service_validation_error_django",
                    "severity": "medium",
                },
            )
            raise DRFValidationError(error_messages)

        except WeeklyLimitExceeded as e:
            logger.info(
                "Weekly creation limit reached",
                extra={
                    **log_context,
                    "resource_type": e.resource_type,
                    "count": e.limit_state.count,
                    "limit": e.limit_state.limit,
                    "action": "weekly_limit_reached",
                },
            )
            raise WeeklyLimitReached()

        except PermissionError as e:
            logger.warning(
                "Service permission denied (Python)",
                extra={
                    **log_context,
                    "error_message": str(e),
                    "action": "service_permission_denied_python",
                    "severity": "high",
                },
            )
            raise DRFPermissionDenied(str(e))

        except ObjectDoesNotExist as e:
            logger.info(
                "Service object not found",
                extra={
                    **log_context,
                    "error_message": str(e),
                    "action": "service_not_found",
                },
            )
            raise NotFound()

        except BillingConfigurationError as e:
            logger.error(
                "Billing is not configured",
                extra={
                    **log_context,
                    "error_message": str(e),
                    "action": "billing_not_configured",
                    "severity": "high",
                },
            )
            raise BillingUnavailable()

        except BillingGatewayError as e:
            logger.error(
                "Payment processor request failed",
                extra={
                    **log_context,
                    "error_message": str(e),
                    "action": "billing_gateway_error",
                    "severity": "high",
                },
            )
            raise BillingGatewayFailure()

        except APIException:
            raise

        except Exception as e:
            logger.error(
                "Service operation failed unexpectedly",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "service_unexpected_error",
                    "severity": "critical",
                },
                exc_info=True,
            )
            # Generic error to prevent information leakage
            raise APIException(detail="Service operation failed", code="service_error")
