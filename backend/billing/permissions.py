# permissions.py
import logging

from rest_framework import permissions

from .plans import PlanType
from .services import SubscriptionService

logger = logging.getLogger(__name__)


class IsProPlan(permissions.BasePermission):
    """
    Grants access only to users whose resolved plan is pro.

    The plan comes from the subscription resolver, so a processor outage
    falls back to the plan stored on the profile.
    """

    message = "This feature is available on the Pro plan only."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        plan = SubscriptionService().plan_for(request.user)
        if plan != PlanType.PRO:
            logger.info(
                "Pro feature access denied",
                extra={
                    "user_id": request.user.id,
                    "view": view.__class__.__name__,
                    "action": "pro_access_denied",
                    "component": "IsProPlan",
                },
            )
            return False
        return True
