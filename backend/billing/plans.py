"""
Plan vocabulary shared by users, ledger and billing.
"""

from django.db import models


class PlanType(models.TextChoices):
    FREE = "free", "Free"
    PRO = "pro", "Pro"


# Months of history shown in reports per plan
REPORT_MONTHS = {
    PlanType.FREE: 6,
    PlanType.PRO: 12,
}


def normalize_plan(value):
    """
    Coerce any plan value coming from storage or the payment processor.

    Args:
        value: Raw plan value (str, PlanType or None)

    Returns:
        PlanType: PRO only for an explicit "pro", otherwise FREE
    """
    if value is not None and str(value).lower() == PlanType.PRO:
        return PlanType.PRO
    return PlanType.FREE
