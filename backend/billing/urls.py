"""
URL configuration for billing endpoints.
"""

import logging

from django.urls import path

from . import views

# Get structured logger for this module
logger = logging.getLogger(__name__)

urlpatterns = [
    path("subscription/", views.SubscriptionView.as_view(), name="subscription"),
    path("checkout/", views.CheckoutView.as_view(), name="checkout"),
    path("checkout-return/", views.CheckoutReturnView.as_view(), name="checkout-return"),
    path("portal/", views.CustomerPortalView.as_view(), name="customer-portal"),
    path("limits/", views.UsageLimitsView.as_view(), name="usage-limits"),
]

logger.info(
    "Billing API URLs configured successfully",
    extra={
        "total_routes": len(urlpatterns),
        "action": "url_configuration_loaded",
        "component": "urls",
    },
)
