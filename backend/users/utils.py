"""
Utility functions for user authentication and security.

This module provides custom functions for the Axes security package
to identify login attempts by account and to answer lockouts with JSON.
"""

from django.http import JsonResponse
from rest_framework import status


def get_axes_username(request, credentials):
    """
    Custom username callable for AXES_USERNAME_CALLABLE.

    Args:
        request: The HTTP request object
        credentials (dict): Dictionary containing authentication credentials

    Returns:
        str or None: The username if present, otherwise the lower-cased e-mail
    """
    if not credentials:
        return None

    email = credentials.get("email")
    return credentials.get("username") or (email.strip().lower() if email else None)


def custom_lockout_response(request, credentials, *args, **kwargs):
    """
    JSON response returned by Axes when an account gets locked.

    Returns:
        JsonResponse: Lockout message with 403 status
    """
    return JsonResponse(
        {"detail": "Account temporarily locked due to too many failed login attempts."},
        status=status.HTTP_403_FORBIDDEN,
    )
