"""
Service for pro-tier goals and their evaluation.
"""

import logging

from django.utils import timezone

from billing.plans import PlanType, normalize_plan

from ..analytics.goals import evaluate
from ..models import Goal
from .transaction_service import TransactionService

logger = logging.getLogger(__name__)


class GoalService:
    """
    Service for goal CRUD and progress.

    Every operation requires the pro plan.
    """

    @staticmethod
    def _require_pro(user, plan_type):
        if normalize_plan(plan_type) != PlanType.PRO:
            logger.info(
                "Goal access refused for free plan",
                extra={
                    "user_id": user.id,
                    "action": "goal_access_denied",
                    "component": "GoalService",
                },
            )
            raise PermissionError("Goals are available on the Pro plan only")

    def list_goals(self, user, plan_type):
        self._require_pro(user, plan_type)
        return Goal.objects.filter(user=user).order_by("-created_at")

    def create_goal(self, user, data, plan_type):
        self._require_pro(user, plan_type)

        goal = Goal(user=user, **data)
        goal.full_clean()
        goal.save()

        logger.info(
            "Goal created",
            extra={
                "user_id": user.id,
                "goal_id": goal.id,
                "goal_type": goal.type,
                "action": "goal_created",
                "component": "GoalService",
            },
        )
        return goal

    def update_goal(self, goal, data, plan_type):
        self._require_pro(goal.user, plan_type)
        for field, value in data.items():
            setattr(goal, field, value)
        goal.full_clean()
        goal.save()
        return goal

    def delete_goal(self, goal, plan_type):
        self._require_pro(goal.user, plan_type)
        goal.delete()

    def progress(self, user, plan_type, today=None):
        """
        Monthly stats, per-goal progress and recommendations.

        Args:
            user: Goal owner
            plan_type: Resolved plan
            today (date): Reference date, defaults to the local date

        Returns:
            dict: ``{"stats", "goals", "recommendations"}``
        """
        self._require_pro(user, plan_type)
        today = today or timezone.localdate()

        goals = list(Goal.objects.filter(user=user).order_by("-created_at"))
        result = evaluate(goals, TransactionService.records_for(user), today)

        logger.debug(
            "Goal progress evaluated",
            extra={
                "user_id": user.id,
                "goal_count": len(goals),
                "recommendation_count": len(result["recommendations"]),
                "action": "goal_progress_evaluated",
                "component": "GoalService",
            },
        )
        return result
