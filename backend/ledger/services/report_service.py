"""
Report service with per-user caching.

Reports are cached per user, plan and day. Transaction signals drop the
entry whenever the user's data changes, and callers can force a rebuild.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from billing.plans import PlanType, normalize_plan

from ..analytics.reports import build_report
from .transaction_service import TransactionService

# Get structured logger for this module
logger = logging.getLogger(__name__)


class ReportService:
    """
    Builds and caches aggregation reports.
    """

    @staticmethod
    def _cache_key(user_id, plan, today):
        return f"report_{user_id}_{plan}_{today.isoformat()}"

    @staticmethod
    def get_report(user, plan_type, refresh=False, today=None):
        """
        Report for a user.

        Args:
            user: Transaction owner
            plan_type: Resolved plan
            refresh (bool): Skip the cache and rebuild
            today (date): Reference date, defaults to the local date

        Returns:
            dict: See ``ledger.analytics.reports.build_report``
        """
        today = today or timezone.localdate()
        plan = normalize_plan(plan_type)
        cache_key = ReportService._cache_key(user.id, plan.value, today)

        if not refresh:
            cached = cache.get(cache_key)
            if cached is not None:
                logger.debug(
                    "Report cache hit",
                    extra={
                        "user_id": user.id,
                        "plan_type": plan.value,
                        "action": "report_cache_hit",
                        "component": "ReportService",
                    },
                )
                return cached

        report = build_report(TransactionService.records_for(user), today, plan)
        cache.set(cache_key, report, getattr(settings, "SALDUS_REPORT_CACHE_SECONDS", 300))

        logger.info(
            "Report built",
            extra={
                "user_id": user.id,
                "plan_type": plan.value,
                "refresh": refresh,
                "action": "report_built",
                "component": "ReportService",
            },
        )
        return report

    @staticmethod
    def invalidate(user_id, today=None):
        """Drop today's cached reports of a user for every plan."""
        today = today or timezone.localdate()
        cache.delete_many(
            [ReportService._cache_key(user_id, plan.value, today) for plan in PlanType]
        )
        logger.debug(
            "Report cache invalidated",
            extra={
                "user_id": user_id,
                "action": "report_cache_invalidated",
                "component": "ReportService",
            },
        )
