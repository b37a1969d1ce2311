"""
Dashboard summary for the current month.
"""

import logging

from django.utils import timezone

from ..analytics.goals import monthly_stats
from ..analytics.records import EXPENSE, INCOME, in_accumulation_order
from .transaction_service import TransactionService
from .usage_service import TRANSACTIONS, UsageService

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 5


class DashboardService:
    """Builds the landing page summary."""

    def __init__(self, usage_service=None):
        self.usage_service = usage_service or UsageService()

    def build(self, user, plan_type, today=None):
        """
        Current month totals, recent activity and scheduled amounts.

        Receivables and payables are income and expense dated after today.

        Args:
            user: Owner
            plan_type: Resolved plan
            today (date): Reference date, defaults to the local date

        Returns:
            dict: Summary payload; ``recent_transactions`` holds model instances
        """
        today = today or timezone.localdate()
        records = TransactionService.records_for(user)
        stats = monthly_stats(records, today)

        receivable = 0.0
        payable = 0.0
        for record in in_accumulation_order(records):
            if record.date <= today:
                continue
            if record.type == INCOME:
                receivable += float(record.amount)
            elif record.type == EXPENSE:
                payable += float(record.amount)

        recent = list(
            TransactionService.list_transactions(user)[:RECENT_TRANSACTIONS]
        )

        return {
            "plan_type": str(plan_type),
            "month_income": stats.total_income,
            "month_expense": stats.total_expense,
            "balance": stats.total_profit,
            "accounts_receivable": receivable,
            "accounts_payable": payable,
            "recent_transactions": recent,
            "weekly_limit": self.usage_service.can_create(user, TRANSACTIONS, plan_type).as_dict(),
        }
