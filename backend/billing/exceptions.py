"""
Billing exceptions and their API counterparts.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class BillingError(Exception):
    """Base class for payment processor failures."""


class BillingConfigurationError(BillingError):
    """Stripe credentials or price are not configured."""


class BillingGatewayError(BillingError):
    """Stripe rejected the request or could not be reached."""


class BillingUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Billing is not configured."
    default_code = "billing_unavailable"


class BillingGatewayFailure(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "The payment processor could not complete the request."
    default_code = "billing_gateway_error"
