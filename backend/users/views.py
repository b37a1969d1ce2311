"""
Views for session handling, profile settings and password recovery.

This module provides the JWT logout endpoint, the authenticated user's
profile and security-question settings, and the anonymous
security-question recovery flow.
"""

import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from django.views import View
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from billing.services import SubscriptionService

from .exceptions import (
    AccountNotFound,
    IncorrectAnswer,
    RecoveryBlocked,
    RecoveryNotConfigured,
)
from .serializers import (
    ProfileSerializer,
    RecoveryAnswerSerializer,
    RecoveryQuestionSerializer,
    SecurityQuestionSerializer,
)
from .services import ProfileService, RecoveryService, SecuritySetupService

# Get logger for this module
logger = logging.getLogger(__name__)


class LogoutView(APIView):
    """
    Logout view that blacklists refresh tokens.

    Always answers with success so the endpoint reveals nothing about
    token validity.
    """

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        """
        Blacklist the submitted refresh token when it is well formed.

        Args:
            request: The HTTP request object containing refresh token

        Returns:
            Response: Success response regardless of blacklisting outcome
        """
        refresh_token = request.data.get("refresh", "")

        if refresh_token and isinstance(refresh_token, str) and "." in refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
                logger.info(
                    "Refresh token blacklisted",
                    extra={"action": "logout_blacklist", "component": "LogoutView"},
                )
            except TokenError as e:
                # Expired or already blacklisted tokens are acceptable here
                logger.warning(
                    "Token blacklisting failed",
                    extra={
                        "error_message": str(e),
                        "action": "logout_blacklist_failed",
                        "component": "LogoutView",
                    },
                )

        if request.user and request.user.is_authenticated:
            SubscriptionService().forget(request.user)

        return Response({"detail": "Successfully logged out."}, status=status.HTTP_200_OK)


class ProfileView(APIView):
    """
    Authenticated user's own profile.

    GET returns the profile, PATCH updates the editable business fields,
    DELETE removes the account with all its data.
    """

    def get(self, request):
        return Response(ProfileSerializer(request.user).data)

    def patch(self, request):
        serializer = ProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = ProfileService.update_profile(request.user, serializer.validated_data)
        return Response(ProfileSerializer(user).data)

    def delete(self, request):
        SubscriptionService().forget(request.user)
        ProfileService.delete_account(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SecurityQuestionView(APIView):
    """Set or replace the security question used for password recovery."""

    def put(self, request):
        serializer = SecurityQuestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = SecuritySetupService.save(
            request.user,
            serializer.validated_data["question"],
            serializer.validated_data["answer"],
            serializer.validated_data["fake_answers"],
        )
        return Response(ProfileSerializer(user).data)


class RecoveryBaseView(APIView):
    """
    Shared handling for the anonymous recovery endpoints.

    Recovery exceptions are translated into specific status codes:
    unknown account 404, cool-down 429, misconfigured account 400,
    wrong answer 400 with the new ``blocked_until``.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "recovery"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.recovery_service = RecoveryService()

    def run(self, func, *args):
        try:
            return Response(func(*args))
        except AccountNotFound:
            return Response(
                {"detail": "No user was found with this e-mail."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except RecoveryBlocked as e:
            return Response(
                {
                    "detail": "You answered incorrectly recently. Try again later.",
                    "blocked_until": e.blocked_until.isoformat(),
                },
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        except IncorrectAnswer as e:
            return Response(
                {
                    "detail": "Incorrect answer. Try again in 1 hour.",
                    "blocked_until": e.blocked_until.isoformat(),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        except RecoveryNotConfigured as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)


class RecoveryQuestionView(RecoveryBaseView):
    """POST {email} -> {question, options}"""

    def post(self, request):
        serializer = RecoveryQuestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self.run(self.recovery_service.get_challenge, serializer.validated_data["email"])


class RecoveryAnswerView(RecoveryBaseView):
    """POST {email, answer} -> reset e-mail sent"""

    def post(self, request):
        serializer = RecoveryAnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self.run(
            self.recovery_service.submit_answer,
            serializer.validated_data["email"],
            serializer.validated_data["answer"],
        )


class PasswordResetConfirmRedirectView(View):
    """
    Target of reset links built by dj-rest-auth; forwards to the frontend
    form that posts uid/token to the reset confirm endpoint.
    """

    def get(self, request, uidb64, token):
        return HttpResponseRedirect(
            f"{settings.FRONTEND_URL}/reset-password?uid={uidb64}&token={token}"
        )
