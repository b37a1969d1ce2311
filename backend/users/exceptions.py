"""
Domain exceptions raised by the users services.
"""


class RecoveryError(Exception):
    """Base class for security-question recovery failures."""


class AccountNotFound(RecoveryError):
    pass


class RecoveryNotConfigured(RecoveryError):
    """The account has no valid question or not enough decoy answers."""


class RecoveryBlocked(RecoveryError):
    """A failed attempt happened within the cool-down window."""

    def __init__(self, blocked_until):
        self.blocked_until = blocked_until
        super().__init__(f"Recovery blocked until {blocked_until.isoformat()}")


class IncorrectAnswer(RecoveryError):
    def __init__(self, blocked_until):
        self.blocked_until = blocked_until
        super().__init__("Incorrect answer")
