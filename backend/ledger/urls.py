"""
URL configuration for the ledger API.

RESTful routes for clients, transactions and goals plus the report and
dashboard endpoints.
"""

import logging

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

# Get structured logger for this module
logger = logging.getLogger(__name__)

# Initialize DefaultRouter for RESTful API endpoints
router = DefaultRouter()

# Transaction management endpoints (includes transactions/export/)
router.register(r"transactions", views.TransactionViewSet, basename="transaction")

# Client management endpoints
router.register(r"clients", views.ClientViewSet, basename="client")

# Goal endpoints (includes goals/progress/), pro plan only
router.register(r"goals", views.GoalViewSet, basename="goal")

urlpatterns = [
    # Include all router-generated URLs
    path("", include(router.urls)),
    path("reports/", views.ReportView.as_view(), name="reports"),
    path("dashboard/", views.DashboardView.as_view(), name="dashboard"),
]

# Log URL configuration on startup
custom_endpoints_count = len(urlpatterns) - 1  # Subtract the include route
logger.info(
    "Ledger API URLs configured successfully",
    extra={
        "total_routes": len(router.urls) + custom_endpoints_count,
        "viewset_endpoints": len(router.registry),
        "custom_endpoints": custom_endpoints_count,
        "action": "url_configuration_loaded",
        "component": "urls",
    },
)
