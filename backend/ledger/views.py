"""
API views for the Saldus ledger.

Thin viewsets for clients, transactions and goals plus the report and
dashboard endpoints. Business rules live in the services; every service
call goes through ``ServiceExceptionHandlerMixin``.
"""

import logging

from django.http import HttpResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from billing.permissions import IsProPlan
from billing.services import SubscriptionService

from .exceptions import NothingToExport
from .mixins.service_exception_handler import ServiceExceptionHandlerMixin
from .serializers import ClientSerializer, GoalSerializer, TransactionSerializer
from .services import (
    ClientService,
    DashboardService,
    ExportService,
    GoalService,
    ReportService,
    TransactionService,
)

# Get structured logger for this module
logger = logging.getLogger(__name__)


class PlanContextMixin:
    """Resolves the requesting user's plan once per request."""

    def get_plan(self):
        if getattr(self, "_plan", None) is None:
            self._plan = SubscriptionService().plan_for(self.request.user)
        return self._plan


# -------------------------------------------------------------------
# TRANSACTIONS
# -------------------------------------------------------------------


class TransactionViewSet(PlanContextMixin, viewsets.ModelViewSet, ServiceExceptionHandlerMixin):
    """
    Transaction CRUD, search and CSV export.

    Query parameters: ``search`` (description, category or client name)
    and ``type`` (``income`` / ``expense``).
    """

    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.transaction_service = TransactionService()

    def get_queryset(self):
        params = self.request.query_params
        return TransactionService.list_transactions(
            self.request.user,
            search=params.get("search"),
            transaction_type=params.get("type"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.handle_service_call(
            self.transaction_service.create_transaction,
            self.request.user,
            dict(serializer.validated_data),
            self.get_plan(),
        )

    def perform_update(self, serializer):
        serializer.instance = self.handle_service_call(
            TransactionService.update_transaction,
            serializer.instance,
            dict(serializer.validated_data),
        )

    def perform_destroy(self, instance):
        self.handle_service_call(TransactionService.delete_transaction, instance)

    @action(detail=False, methods=["get"])
    def export(self, request):
        """
        Download the filtered transactions as CSV.

        Returns 400 when there is nothing to export.
        """
        try:
            content = ExportService.export_csv(self.get_queryset())
        except NothingToExport as e:
            logger.info(
                "Export requested without transactions",
                extra={
                    "user_id": request.user.id,
                    "action": "export_empty",
                    "component": "TransactionViewSet",
                },
            )
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{ExportService.filename()}"'
        return response


# -------------------------------------------------------------------
# CLIENTS
# -------------------------------------------------------------------


class ClientViewSet(PlanContextMixin, viewsets.ModelViewSet, ServiceExceptionHandlerMixin):
    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.client_service = ClientService()

    def get_queryset(self):
        return ClientService.list_clients(
            self.request.user, search=self.request.query_params.get("search")
        )

    def perform_create(self, serializer):
        serializer.instance = self.handle_service_call(
            self.client_service.create_client,
            self.request.user,
            dict(serializer.validated_data),
            self.get_plan(),
        )

    def perform_update(self, serializer):
        serializer.instance = self.handle_service_call(
            ClientService.update_client, serializer.instance, dict(serializer.validated_data)
        )

    def perform_destroy(self, instance):
        self.handle_service_call(ClientService.delete_client, instance)


# -------------------------------------------------------------------
# GOALS (PRO)
# -------------------------------------------------------------------


class GoalViewSet(PlanContextMixin, viewsets.ModelViewSet, ServiceExceptionHandlerMixin):
    """
    Goal CRUD and progress evaluation, pro plan only.
    """

    serializer_class = GoalSerializer
    permission_classes = [IsAuthenticated]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.goal_service = GoalService()

    def get_permissions(self):
        return [IsAuthenticated(), IsProPlan()]

    def get_queryset(self):
        return self.handle_service_call(
            self.goal_service.list_goals, self.request.user, self.get_plan()
        )

    def perform_create(self, serializer):
        serializer.instance = self.handle_service_call(
            self.goal_service.create_goal,
            self.request.user,
            dict(serializer.validated_data),
            self.get_plan(),
        )

    def perform_update(self, serializer):
        serializer.instance = self.handle_service_call(
            self.goal_service.update_goal,
            serializer.instance,
            dict(serializer.validated_data),
            self.get_plan(),
        )

    def perform_destroy(self, instance):
        self.handle_service_call(self.goal_service.delete_goal, instance, self.get_plan())

    @action(detail=False, methods=["get"])
    def progress(self, request):
        """Monthly stats, per-goal progress and recommendations."""
        result = self.handle_service_call(
            self.goal_service.progress, request.user, self.get_plan()
        )
        return Response(result)


# -------------------------------------------------------------------
# REPORTS AND DASHBOARD
# -------------------------------------------------------------------


class ReportView(PlanContextMixin, APIView, ServiceExceptionHandlerMixin):
    """
    Aggregated report for the plan's window.

    ``?refresh=true`` skips the cache.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        refresh = request.query_params.get("refresh") == "true"
        result = self.handle_service_call(
            ReportService.get_report, request.user, self.get_plan(), refresh=refresh
        )
        return Response(result)


class DashboardView(PlanContextMixin, APIView, ServiceExceptionHandlerMixin):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        result = self.handle_service_call(
            DashboardService().build, request.user, self.get_plan()
        )
        result["recent_transactions"] = TransactionSerializer(
            result["recent_transactions"], many=True, context={"request": request}
        ).data
        return Response(result)
