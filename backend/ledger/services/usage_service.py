"""
Weekly creation quota enforcement for the free plan.

The count is recomputed from the database on every check. The last
successful evaluation per user and resource is remembered in the cache so
a failing count query can fall back to it; with nothing remembered, free
users are refused (fail closed).
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError
from django.db import transaction as db_transaction
from django.utils import timezone

from ..analytics.usage import WINDOW, WeeklyLimit, weekly_limit, window_start
from ..exceptions import WeeklyLimitExceeded
from ..models import Client, Transaction

# Get structured logger for this module
logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
CLIENTS = "clients"

RESOURCE_MODELS = {
    TRANSACTIONS: Transaction,
    CLIENTS: Client,
}


class UsageService:
    """
    Service evaluating and enforcing the weekly creation quota.
    """

    def __init__(self, now=None):
        self.now = now or timezone.now

    @property
    def limit(self):
        return getattr(settings, "SALDUS_FREE_WEEKLY_LIMIT", 5)

    @staticmethod
    def _cache_key(user_id, resource_type):
        return f"usage_limit_{resource_type}_{user_id}"

    def _count_query(self, user, resource_type):
        model = RESOURCE_MODELS[resource_type]
        return model.objects.filter(
            user=user, created_at__gte=window_start(self.now())
        ).count()

    def count_recent(self, user, resource_type):
        """
        Resources of the type created by the user in the rolling window.

        The query runs in its own savepoint so a failure leaves an
        enclosing transaction usable.
        """
        with db_transaction.atomic():
            return self._count_query(user, resource_type)

    def can_create(self, user, resource_type, plan_type):
        """
        Evaluate the quota for one resource type.

        Args:
            user: Resource owner
            resource_type (str): ``transactions`` or ``clients``
            plan_type: Resolved plan; pro never touches the database

        Returns:
            WeeklyLimit: count, limit (None when unbounded) and can_create
        """
        if resource_type not in RESOURCE_MODELS:
            raise ValueError(f"Unknown resource type: {resource_type}")

        cache_key = self._cache_key(user.id, resource_type)

        try:
            result = weekly_limit(
                plan_type, lambda: self.count_recent(user, resource_type), limit=self.limit
            )
        except DatabaseError as e:
            last_known = cache.get(cache_key)
            logger.error(
                "Weekly usage count failed",
                extra={
                    "user_id": user.id,
                    "resource_type": resource_type,
                    "error_message": str(e),
                    "has_last_known": last_known is not None,
                    "action": "usage_count_failed",
                    "component": "UsageService",
                    "severity": "high",
                },
            )
            if last_known is not None:
                return WeeklyLimit(**last_known)
            return WeeklyLimit(count=self.limit, limit=self.limit, can_create=False)

        if result.limit is not None:
            cache.set(cache_key, result.as_dict(), int(WINDOW.total_seconds()))

        logger.debug(
            "Weekly usage evaluated",
            extra={
                "user_id": user.id,
                "resource_type": resource_type,
                "count": result.count,
                "limit": result.limit,
                "can_create": result.can_create,
                "action": "usage_evaluated",
                "component": "UsageService",
            },
        )
        return result

    def ensure_can_create(self, user, resource_type, plan_type):
        """
        Raise before an insert when the quota is used up.

        Raises:
            WeeklyLimitExceeded: The free plan reached its weekly cap
        """
        result = self.can_create(user, resource_type, plan_type)
        if not result.can_create:
            raise WeeklyLimitExceeded(resource_type, result)
        return result

    def all_limits(self, user, plan_type):
        return {
            resource_type: self.can_create(user, resource_type, plan_type).as_dict()
            for resource_type in RESOURCE_MODELS
        }
