"""
Serializers for authentication, profile settings and password recovery.

This module provides the e-mail login serializer integrated with Axes,
the registration serializer that captures the business profile, and the
serializers behind profile settings and security-question recovery.
"""

import logging

from axes.models import AccessAttempt
from dj_rest_auth.registration.serializers import RegisterSerializer
from dj_rest_auth.serializers import LoginSerializer
from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied

from .services.recovery_service import SECURITY_QUESTIONS, normalize_answer

# Get structured logger for this module
logger = logging.getLogger(__name__)
User = get_user_model()


class CustomLoginSerializer(LoginSerializer):
    """
    E-mail login serializer.

    Resolves the account by e-mail (case-insensitive), refuses accounts
    locked by Axes and authenticates against the resolved username.
    """

    username = None
    email = serializers.EmailField(help_text="E-mail address used to log in")
    password = serializers.CharField(
        write_only=True, help_text="User password for authentication"
    )

    def _check_account_lockout(self, username: str) -> None:
        """
        Refuse authentication when Axes recorded too many failures.

        Args:
            username (str): Resolved username of the account

        Raises:
            PermissionDenied: If account is temporarily locked
        """
        attempt = (
            AccessAttempt.objects.filter(username=username)
            .order_by("-failures_since_start")
            .first()
        )
        lockout_limit = getattr(settings, "AXES_FAILURE_LIMIT", 5)

        if attempt and attempt.failures_since_start >= lockout_limit:
            logger.warning(
                "Account lockout triggered - denying authentication",
                extra={
                    "username": username,
                    "failure_count": attempt.failures_since_start,
                    "lockout_limit": lockout_limit,
                    "action": "account_lockout_enforced",
                    "component": "CustomLoginSerializer",
                    "severity": "high",
                },
            )
            raise PermissionDenied(
                {
                    "detail": "Too many login attempts. Account temporarily locked.",
                    "locked": True,
                }
            )

    def validate(self, attrs: dict) -> dict:
        """
        Validate e-mail and password and attach the authenticated user.
        """
        email = (attrs.get("email") or "").strip()
        password = attrs.get("password")
        request = self.context.get("request")

        logger.info(
            "Login validation process initiated",
            extra={
                "action": "login_validation_start",
                "component": "CustomLoginSerializer",
                "has_email": bool(email),
                "has_password": bool(password),
            },
        )

        if not email or not password:
            raise serializers.ValidationError(
                {"non_field_errors": "E-mail and password are required."}
            )

        user_obj = User.objects.filter(email__iexact=email).first()
        if user_obj is None:
            logger.warning(
                "Authentication failed - email not found in system",
                extra={
                    "action": "authentication_failure",
                    "component": "CustomLoginSerializer",
                    "reason": "email_not_found",
                },
            )
            raise AuthenticationFailed("Invalid e-mail or password.")

        self._check_account_lockout(user_obj.username)

        user = authenticate(request=request, username=user_obj.username, password=password)
        if not user:
            logger.warning(
                "Authentication failed - invalid credentials",
                extra={
                    "user_id": user_obj.id,
                    "action": "authentication_failure",
                    "component": "CustomLoginSerializer",
                    "reason": "invalid_credentials",
                    "severity": "medium",
                },
            )
            raise AuthenticationFailed("Invalid e-mail or password.")

        logger.info(
            "Authentication successful",
            extra={
                "user_id": user.id,
                "action": "authentication_success",
                "component": "CustomLoginSerializer",
            },
        )
        attrs["user"] = user
        return attrs


class SaldusRegisterSerializer(RegisterSerializer):
    """
    Registration serializer capturing the business profile on signup.
    """

    username = None
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    company_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)

    def get_cleaned_data(self):
        data = super().get_cleaned_data()
        data.update(
            {
                "full_name": self.validated_data.get("full_name", ""),
                "company_name": self.validated_data.get("company_name", ""),
                "phone": self.validated_data.get("phone", ""),
            }
        )
        return data

    def custom_signup(self, request, user):
        user.email = user.email.lower()
        user.full_name = self.validated_data.get("full_name", "").strip()
        user.company_name = self.validated_data.get("company_name", "").strip()
        user.phone = self.validated_data.get("phone", "").strip()
        user.save()

        logger.info(
            "New account registered",
            extra={
                "user_id": user.id,
                "action": "registration_success",
                "component": "SaldusRegisterSerializer",
            },
        )


class ProfileSerializer(serializers.ModelSerializer):
    """
    Profile representation used by dj-rest-auth user details and /me.

    Plan and billing fields are read-only; they change only through billing.
    """

    has_security_question = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "email",
            "username",
            "full_name",
            "phone",
            "company_name",
            "commercial_phone",
            "address",
            "plan_type",
            "plan_expiry_date",
            "security_question",
            "has_security_question",
        )
        read_only_fields = (
            "id",
            "email",
            "username",
            "plan_type",
            "plan_expiry_date",
            "security_question",
        )


class SecurityQuestionSerializer(serializers.Serializer):
    """Security question, real answer and exactly three decoys."""

    question = serializers.ChoiceField(choices=SECURITY_QUESTIONS)
    answer = serializers.CharField(max_length=255)
    fake_answers = serializers.ListField(
        child=serializers.CharField(max_length=255),
        min_length=3,
        max_length=3,
    )

    def validate(self, attrs):
        answer = normalize_answer(attrs["answer"])
        fakes = [normalize_answer(fake) for fake in attrs["fake_answers"]]

        if not answer or not all(fakes):
            raise serializers.ValidationError("Answers cannot be blank.")
        if answer in fakes:
            raise serializers.ValidationError(
                {"fake_answers": "Fake answers must differ from the real answer."}
            )
        if len(set(fakes)) != len(fakes):
            raise serializers.ValidationError(
                {"fake_answers": "Fake answers must be different from each other."}
            )
        return attrs


class RecoveryQuestionSerializer(serializers.Serializer):
    email = serializers.EmailField()


class RecoveryAnswerSerializer(serializers.Serializer):
    email = serializers.EmailField()
    answer = serializers.CharField(max_length=255)
