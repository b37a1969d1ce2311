"""
Custom adapter for the allauth account system.

E-mail links point at the frontend instead of server-rendered pages, and
generated usernames are derived from the e-mail.
"""

import logging

from allauth.account.adapter import DefaultAccountAdapter
from django.conf import settings

logger = logging.getLogger(__name__)


class CustomAccountAdapter(DefaultAccountAdapter):
    """
    Account adapter suited to a REST API with a separate frontend.
    """

    def get_email_confirmation_url(self, request, emailconfirmation):
        """
        Build the confirmation link opened by the frontend.

        Args:
            request: The HTTP request object
            emailconfirmation: Confirmation carrying the key

        Returns:
            str: ``<FRONTEND_URL>/confirm-email/<key>``
        """
        url = f"{settings.FRONTEND_URL}/confirm-email/{emailconfirmation.key}"
        logger.debug(
            "Email confirmation URL generated",
            extra={
                "action": "email_confirmation_url",
                "component": "CustomAccountAdapter",
            },
        )
        return url

    def respond_email_confirmation_sent(self, request, emailaddress):
        logger.info(
            "Email confirmation sent",
            extra={
                "user_id": emailaddress.user.id if emailaddress.user else None,
                "action": "email_confirmation_sent",
                "component": "CustomAccountAdapter",
            },
        )
        return super().respond_email_confirmation_sent(request, emailaddress)

    def populate_username(self, request, user):
        """
        Derive the username from the e-mail when none was submitted.
        """
        if not user.username and user.email:
            user.username = self.generate_unique_username([user.email, "user"])
        return super().populate_username(request, user)
