"""
Ledger domain exceptions and their API counterparts.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class WeeklyLimitExceeded(PermissionError):
    """The free plan's weekly creation quota is used up."""

    def __init__(self, resource_type, limit_state):
        self.resource_type = resource_type
        self.limit_state = limit_state
        super().__init__(
            f"Weekly limit of {limit_state.limit} {resource_type} reached for the free plan"
        )


class WeeklyLimitReached(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Weekly creation limit reached. Upgrade to Pro for unlimited usage."
    default_code = "weekly_limit_reached"


class NothingToExport(Exception):
    pass
