"""
User models for Saldus.

This module defines the CustomUser model (stored in the ``profiles`` table),
which carries the business profile, the locally known plan and the
security-question recovery data, plus the FakeAnswer and SecurityAttempt
records used by security-question password recovery.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from billing.plans import PlanType


class CustomUser(AbstractUser):
    """
    Custom user model extending Django's AbstractUser.

    E-mail is the login identifier; the username is generated on signup.
    ``plan_type`` and ``plan_expiry_date`` mirror the last subscription state
    resolved from the payment processor and serve as the fallback plan when
    the processor cannot be reached.
    """

    # Email field - unique and required for all users
    email = models.EmailField(
        unique=True,
        blank=False,
        help_text="User's unique email address, used to log in",
    )

    # Username field - optional, generated on signup
    username = models.CharField(
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        help_text="Optional username, generated from the e-mail on signup",
    )

    # ------------------------------------------------------------------
    # BUSINESS PROFILE
    # ------------------------------------------------------------------

    full_name = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    company_name = models.CharField(max_length=255, blank=True, default="")
    commercial_phone = models.CharField(max_length=30, blank=True, default="")
    address = models.CharField(max_length=500, blank=True, default="")

    # ------------------------------------------------------------------
    # PLAN
    # ------------------------------------------------------------------

    plan_type = models.CharField(
        max_length=10,
        choices=PlanType.choices,
        default=PlanType.FREE,
        help_text="Last known plan, used as fallback when billing is unreachable",
    )
    plan_expiry_date = models.DateTimeField(null=True, blank=True)
    stripe_customer_id = models.CharField(max_length=255, blank=True, default="")

    # ------------------------------------------------------------------
    # SECURITY QUESTION
    # ------------------------------------------------------------------

    security_question = models.CharField(max_length=255, blank=True, default="")
    # Stored trimmed and lower-cased
    security_answer = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "profiles"

    def __str__(self):
        """
        String representation of the user model.

        Returns:
            str: The full name if available, otherwise the e-mail
        """
        return self.full_name or self.email

    @property
    def is_pro(self):
        """True when the locally known plan is pro."""
        return self.plan_type == PlanType.PRO

    @property
    def has_security_question(self):
        return bool(self.security_question and self.security_answer)


class FakeAnswer(models.Model):
    """Decoy option shown next to the real answer during recovery."""

    user = models.ForeignKey(
        CustomUser, on_delete=models.CASCADE, related_name="fake_answers"
    )
    answer = models.CharField(max_length=255)

    class Meta:
        db_table = "fake_answers"
        ordering = ["id"]

    def __str__(self):
        return f"{self.user_id}: {self.answer}"


class SecurityAttempt(models.Model):
    """One answer submitted during security-question recovery."""

    user = models.ForeignKey(
        CustomUser, on_delete=models.CASCADE, related_name="security_attempts"
    )
    successful = models.BooleanField(default=False)
    attempt_time = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "security_attempts"
        ordering = ["-attempt_time"]

    def __str__(self):
        outcome = "success" if self.successful else "failure"
        return f"{self.user_id} {outcome} at {self.attempt_time:%Y-%m-%d %H:%M}"
