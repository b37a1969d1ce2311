# ledger/services/__init__.py
from .client_service import ClientService
from .dashboard_service import DashboardService
from .export_service import ExportService
from .goal_service import GoalService
from .report_service import ReportService
from .transaction_service import TransactionService
from .usage_service import UsageService

__all__ = [
    "ClientService",
    "DashboardService",
    "ExportService",
    "GoalService",
    "ReportService",
    "TransactionService",
    "UsageService",
]
