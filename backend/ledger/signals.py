"""
Signal handlers keeping cached reports in step with transactions.
"""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Transaction
from .services.report_service import ReportService

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Transaction)
@receiver(post_delete, sender=Transaction)
def invalidate_user_reports(sender, instance, **kwargs):
    """Drop the owner's cached reports after any transaction change."""
    ReportService.invalidate(instance.user_id)

    logger.debug(
        "Reports invalidated after transaction change",
        extra={
            "user_id": instance.user_id,
            "transaction_id": instance.id,
            "created": kwargs.get("created"),
            "action": "report_invalidation_signal",
            "component": "signals",
        },
    )
