"""
Profile management: settings updates and account deletion.
"""

import logging

from django.db import transaction

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "full_name",
    "phone",
    "company_name",
    "commercial_phone",
    "address",
)


class ProfileService:
    """Service for the authenticated user's own profile."""

    @staticmethod
    def update_profile(user, data):
        """
        Update editable profile fields.

        Unknown keys are ignored; plan and billing fields are never
        writable from here.

        Args:
            user: Profile owner
            data (dict): Validated field values

        Returns:
            CustomUser: Updated user
        """
        changed = []
        for field in EDITABLE_FIELDS:
            if field in data:
                setattr(user, field, (data[field] or "").strip())
                changed.append(field)

        if changed:
            user.save(update_fields=changed)

        logger.info(
            "Profile updated",
            extra={
                "user_id": user.id,
                "fields": changed,
                "action": "profile_updated",
                "component": "ProfileService",
            },
        )
        return user

    @staticmethod
    @transaction.atomic
    def delete_account(user):
        """
        Permanently delete the account and everything it owns.

        Transactions, clients, goals, decoy answers and recovery attempts
        cascade with the user row.
        """
        user_id = user.id
        user.delete()

        logger.warning(
            "Account deleted",
            extra={
                "user_id": user_id,
                "action": "account_deleted",
                "component": "ProfileService",
                "severity": "medium",
            },
        )
