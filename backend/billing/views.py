"""
Billing API views.

Subscription status, checkout and portal sessions, the checkout return
hook and the weekly usage counters.
"""

import logging

from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.mixins import ServiceExceptionHandlerMixin
from ledger.services import UsageService

from .services import SubscriptionService

# Get structured logger for this module
logger = logging.getLogger(__name__)


class CheckoutReturnSerializer(serializers.Serializer):
    location = serializers.CharField(max_length=2048)


class BillingBaseView(APIView, ServiceExceptionHandlerMixin):
    permission_classes = [IsAuthenticated]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.subscription_service = SubscriptionService()


class SubscriptionView(BillingBaseView):
    """
    Resolved subscription status.

    ``?refresh=true`` forces a new lookup at the payment processor.
    """

    def get(self, request):
        refresh = request.query_params.get("refresh") == "true"
        result = self.handle_service_call(
            self.subscription_service.get_status, request.user, refresh=refresh
        )
        return Response(result.as_dict())


class CheckoutView(BillingBaseView):
    """Start a subscription checkout and return its URL."""

    def post(self, request):
        origin = self.subscription_service.resolve_origin(request)
        result = self.handle_service_call(
            self.subscription_service.create_checkout, request.user, origin
        )
        return Response(result, status=status.HTTP_201_CREATED)


class CustomerPortalView(BillingBaseView):
    """Open the billing portal of an existing customer."""

    def post(self, request):
        origin = self.subscription_service.resolve_origin(request)
        result = self.handle_service_call(
            self.subscription_service.open_customer_portal, request.user, origin
        )
        if "error" in result:
            return Response(result, status=status.HTTP_400_BAD_REQUEST)
        return Response(result)


class CheckoutReturnView(BillingBaseView):
    """
    Called by the frontend after the processor redirects back.

    Returns the location without the checkout marker; a successful
    checkout schedules one extra status refresh.
    """

    def post(self, request):
        serializer = CheckoutReturnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.handle_service_call(
            self.subscription_service.handle_checkout_return,
            request.user,
            serializer.validated_data["location"],
        )
        return Response(result)


class UsageLimitsView(BillingBaseView):
    """Weekly creation counters of every limited resource."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.usage_service = UsageService()

    def get(self, request):
        plan = self.subscription_service.plan_for(request.user)
        result = self.handle_service_call(self.usage_service.all_limits, request.user, plan)
        return Response({"plan_type": plan.value, "limits": result})
