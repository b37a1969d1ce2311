from .profile_service import ProfileService
from .recovery_service import RecoveryService, SecuritySetupService

__all__ = ["ProfileService", "RecoveryService", "SecuritySetupService"]
