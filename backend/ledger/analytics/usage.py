"""
Weekly creation quota for the free plan.
"""

from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Callable, Optional

from billing.plans import PlanType, normalize_plan

FREE_WEEKLY_LIMIT = 5
WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class WeeklyLimit:
    count: int
    limit: Optional[int]  # None means unbounded
    can_create: bool

    def as_dict(self):
        return asdict(self)


UNBOUNDED = WeeklyLimit(count=0, limit=None, can_create=True)


def window_start(now):
    """Rolling window: wall-clock ``now - 7 days``, not a calendar week."""
    return now - WINDOW


def weekly_limit(plan_type, count_recent: Callable[[], int], limit: int = FREE_WEEKLY_LIMIT) -> WeeklyLimit:
    """
    Evaluate the quota.

    Args:
        plan_type: Resolved plan of the user
        count_recent: Returns how many resources were created in the window;
            only called for the free plan
        limit: Free plan cap

    Returns:
        WeeklyLimit: ``can_create`` is ``count < limit``
    """
    if normalize_plan(plan_type) == PlanType.PRO:
        return UNBOUNDED

    count = count_recent()
    return WeeklyLimit(count=count, limit=limit, can_create=count < limit)
