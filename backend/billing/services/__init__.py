# billing/services/__init__.py
from .subscription_service import SubscriptionService, reset_registry

__all__ = ["SubscriptionService", "reset_registry"]
