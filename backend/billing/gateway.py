"""
Stripe gateway: subscription lookup, checkout and customer portal.

Every call passes the API key explicitly, so nothing mutates the global
``stripe`` configuration.
"""

import logging
from datetime import datetime, timezone

import stripe
from django.conf import settings

from .exceptions import BillingConfigurationError, BillingGatewayError
from .plans import PlanType
from .resolver import CHECKOUT_CANCELLED, CHECKOUT_PARAM, CHECKOUT_SUCCESS

logger = logging.getLogger(__name__)

PAYMENT_METHOD_TYPES = ["card", "boleto"]


def _period_end(subscription):
    """Current period end as ISO text; newer API versions keep it on the items."""
    end = subscription.get("current_period_end")
    if end is None:
        items = subscription.get("items") or {}
        data = items.get("data") or []
        if data:
            end = data[0].get("current_period_end")
    if end is None:
        return None
    return datetime.fromtimestamp(end, tz=timezone.utc).isoformat()


class StripeGateway:
    """
    Thin wrapper over the Stripe SDK.

    Raises:
        BillingConfigurationError: Missing secret key or price
        BillingGatewayError: Any Stripe error
    """

    def __init__(self, api_key=None, price_id=None, api_version=None):
        self.api_key = settings.STRIPE_SECRET_KEY if api_key is None else api_key
        self.price_id = settings.STRIPE_PRICE_ID if price_id is None else price_id
        self.api_version = api_version or getattr(settings, "STRIPE_API_VERSION", None)

    def _options(self):
        if not self.api_key:
            raise BillingConfigurationError("STRIPE_SECRET_KEY is not set")
        options = {"api_key": self.api_key}
        if self.api_version:
            options["stripe_version"] = self.api_version
        return options

    def _call(self, operation, func, **params):
        try:
            return func(**params, **self._options())
        except stripe.StripeError as e:
            logger.error(
                "Stripe request failed",
                extra={
                    "operation": operation,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "stripe_request_failed",
                    "component": "StripeGateway",
                    "severity": "high",
                },
            )
            raise BillingGatewayError(str(e)) from e

    def find_customer_id(self, email):
        customers = self._call("customer_lookup", stripe.Customer.list, email=email, limit=1)
        if customers.data:
            return customers.data[0].id
        return None

    def check_subscription(self, email):
        """
        Subscription state of the customer with this e-mail.

        Returns:
            dict: ``{"subscribed", "plan_type", "plan_expiry_date"}``
        """
        customer_id = self.find_customer_id(email)
        if customer_id is None:
            return {"subscribed": False, "plan_type": PlanType.FREE.value, "plan_expiry_date": None}

        subscriptions = self._call(
            "subscription_lookup",
            stripe.Subscription.list,
            customer=customer_id,
            status="active",
            limit=1,
        )
        if not subscriptions.data:
            return {"subscribed": False, "plan_type": PlanType.FREE.value, "plan_expiry_date": None}

        return {
            "subscribed": True,
            "plan_type": PlanType.PRO.value,
            "plan_expiry_date": _period_end(subscriptions.data[0]),
        }

    def find_or_create_customer(self, user):
        """
        Stripe customer id of the user, created on first checkout.

        The id is stored on the user.
        """
        customer_id = user.stripe_customer_id or self.find_customer_id(user.email)

        if customer_id is None:
            customer = self._call(
                "customer_create",
                stripe.Customer.create,
                email=user.email,
                name=user.full_name or None,
                metadata={"user_id": str(user.id)},
            )
            customer_id = customer.id
            logger.info(
                "Stripe customer created",
                extra={
                    "user_id": user.id,
                    "action": "stripe_customer_created",
                    "component": "StripeGateway",
                },
            )

        if user.stripe_customer_id != customer_id:
            user.stripe_customer_id = customer_id
            user.save(update_fields=["stripe_customer_id"])

        return customer_id

    def create_checkout(self, user, origin):
        """
        Subscription checkout session for the monthly Pro price.

        Returns:
            dict: ``{"url": str}``
        """
        if not self.price_id:
            raise BillingConfigurationError("STRIPE_PRICE_ID is not set")

        customer_id = self.find_or_create_customer(user)
        session = self._call(
            "checkout_create",
            stripe.checkout.Session.create,
            customer=customer_id,
            line_items=[{"price": self.price_id, "quantity": 1}],
            mode="subscription",
            payment_method_types=PAYMENT_METHOD_TYPES,
            allow_promotion_codes=True,
            success_url=f"{origin}/dashboard?{CHECKOUT_PARAM}={CHECKOUT_SUCCESS}",
            cancel_url=f"{origin}/dashboard?{CHECKOUT_PARAM}={CHECKOUT_CANCELLED}",
            metadata={"user_id": str(user.id)},
        )

        logger.info(
            "Checkout session created",
            extra={
                "user_id": user.id,
                "action": "checkout_created",
                "component": "StripeGateway",
            },
        )
        return {"url": session.url}

    def customer_portal(self, user, origin):
        """
        Billing portal session for an existing customer.

        Returns:
            dict: ``{"url": str}``, or ``{"error": str}`` when the user never
            checked out
        """
        if not user.stripe_customer_id:
            return {"error": "No Stripe customer found for this user"}

        session = self._call(
            "portal_create",
            stripe.billing_portal.Session.create,
            customer=user.stripe_customer_id,
            return_url=f"{origin}/settings",
        )
        return {"url": session.url}
