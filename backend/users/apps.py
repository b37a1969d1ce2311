"""
Django AppConfig for the users application.
"""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """
    Configuration class for the users application.
    """

    # Use BigAutoField as default for primary keys
    default_auto_field = "django.db.models.BigAutoField"

    # Application name (Python path)
    name = "users"
