"""
Security-question password recovery.

Flow:
1. ``get_challenge(email)`` returns the stored question with the real answer
   shuffled among the three decoys.
2. ``submit_answer(email, answer)`` records an attempt. A correct answer
   e-mails a password-reset link; a wrong one blocks further attempts for
   ``RECOVERY_COOLDOWN_SECONDS``.

A password is never set directly by this service.
"""

import logging
import random
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode

from ..exceptions import (
    AccountNotFound,
    IncorrectAnswer,
    RecoveryBlocked,
    RecoveryNotConfigured,
)
from ..models import FakeAnswer, SecurityAttempt

logger = logging.getLogger(__name__)
User = get_user_model()

SECURITY_QUESTIONS = [
    "Qual foi o nome do seu primeiro animal de estimação?",
    "Qual é o nome da cidade onde você nasceu?",
    "Qual é o nome de solteiro da sua mãe?",
    "Qual foi o seu primeiro emprego?",
    "Qual é o nome da última escola onde você estudou?",
]

REQUIRED_FAKE_ANSWERS = 3


def normalize_answer(value):
    """Answers are compared and stored trimmed and lower-cased."""
    return (value or "").strip().lower()


class RecoveryService:
    """
    Service for security-question based password recovery.

    ``rng`` and ``now`` are injectable so option order and cool-down checks
    are deterministic under test.
    """

    def __init__(self, rng=None, now=None):
        self.rng = rng or random.SystemRandom()
        self.now = now or timezone.now

    @property
    def cooldown(self):
        return timedelta(seconds=getattr(settings, "RECOVERY_COOLDOWN_SECONDS", 3600))

    def _get_user(self, email):
        normalized = normalize_answer(email)
        try:
            return User.objects.get(email__iexact=normalized, is_active=True)
        except User.DoesNotExist:
            logger.warning(
                "Recovery requested for unknown e-mail",
                extra={
                    "action": "recovery_unknown_email",
                    "component": "RecoveryService",
                    "severity": "medium",
                },
            )
            raise AccountNotFound("No account found for this e-mail")

    def blocked_until(self, user):
        """
        Return the end of the cool-down if the latest failed attempt is recent.

        Args:
            user: Account being recovered

        Returns:
            datetime or None: When the next attempt is allowed, None if allowed now
        """
        last_failure = (
            SecurityAttempt.objects.filter(user=user, successful=False)
            .order_by("-attempt_time")
            .first()
        )
        if last_failure is None:
            return None

        unblock_at = last_failure.attempt_time + self.cooldown
        if self.now() < unblock_at:
            return unblock_at
        return None

    def _ensure_not_blocked(self, user):
        unblock_at = self.blocked_until(user)
        if unblock_at is not None:
            logger.info(
                "Recovery attempt during cool-down rejected",
                extra={
                    "user_id": user.id,
                    "blocked_until": unblock_at.isoformat(),
                    "action": "recovery_blocked",
                    "component": "RecoveryService",
                },
            )
            raise RecoveryBlocked(unblock_at)

    def get_challenge(self, email):
        """
        Build the multiple-choice challenge for an account.

        Args:
            email (str): Account e-mail

        Returns:
            dict: ``{"question": str, "options": [str, ...]}`` with four shuffled options

        Raises:
            AccountNotFound: No active account for the e-mail
            RecoveryBlocked: A wrong answer was given within the cool-down
            RecoveryNotConfigured: Question invalid or fewer than three decoys
        """
        user = self._get_user(email)
        self._ensure_not_blocked(user)

        if user.security_question not in SECURITY_QUESTIONS or not user.security_answer:
            logger.warning(
                "Recovery requested for account without a valid question",
                extra={
                    "user_id": user.id,
                    "action": "recovery_not_configured",
                    "component": "RecoveryService",
                },
            )
            raise RecoveryNotConfigured("Invalid security question registered for this account")

        fake_answers = list(
            FakeAnswer.objects.filter(user=user).values_list("answer", flat=True)[
                :REQUIRED_FAKE_ANSWERS
            ]
        )
        if len(fake_answers) < REQUIRED_FAKE_ANSWERS:
            raise RecoveryNotConfigured("Answer options could not be loaded for this account")

        options = [user.security_answer, *fake_answers]
        self.rng.shuffle(options)

        logger.info(
            "Recovery challenge issued",
            extra={
                "user_id": user.id,
                "action": "recovery_challenge_issued",
                "component": "RecoveryService",
            },
        )
        return {"question": user.security_question, "options": options}

    def submit_answer(self, email, answer):
        """
        Check an answer and send the reset e-mail when correct.

        Args:
            email (str): Account e-mail
            answer (str): Chosen option

        Returns:
            dict: ``{"detail": str}`` confirming the e-mail was sent

        Raises:
            AccountNotFound: No active account for the e-mail
            RecoveryBlocked: A wrong answer was given within the cool-down
            IncorrectAnswer: Wrong answer; carries the new ``blocked_until``
        """
        user = self._get_user(email)
        self._ensure_not_blocked(user)

        if not user.security_answer or normalize_answer(answer) != normalize_answer(
            user.security_answer
        ):
            attempt = SecurityAttempt.objects.create(
                user=user, successful=False, attempt_time=self.now()
            )
            logger.warning(
                "Incorrect security answer",
                extra={
                    "user_id": user.id,
                    "action": "recovery_answer_incorrect",
                    "component": "RecoveryService",
                    "severity": "medium",
                },
            )
            raise IncorrectAnswer(attempt.attempt_time + self.cooldown)

        SecurityAttempt.objects.create(user=user, successful=True, attempt_time=self.now())
        self.send_reset_email(user)

        logger.info(
            "Security answer accepted, reset e-mail sent",
            extra={
                "user_id": user.id,
                "action": "recovery_answer_correct",
                "component": "RecoveryService",
            },
        )
        return {"detail": "A password reset link was sent to your e-mail."}

    def send_reset_email(self, user):
        """
        E-mail a reset link that the frontend posts back to the
        dj-rest-auth password reset confirm endpoint.
        """
        uid = urlsafe_base64_encode(force_bytes(user.pk))
        token = default_token_generator.make_token(user)
        link = f"{settings.FRONTEND_URL}/reset-password?uid={uid}&token={token}"

        send_mail(
            subject="Saldus - redefinição de senha",
            message=(
                "Recebemos um pedido de redefinição de senha para sua conta.\n\n"
                f"Use o link abaixo para criar uma nova senha:\n{link}\n"
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
        )


class SecuritySetupService:
    """Stores the security question, its answer and the three decoys."""

    @staticmethod
    @transaction.atomic
    def save(user, question, answer, fake_answers):
        """
        Replace the user's security question setup.

        Args:
            user: Account owner
            question (str): One of SECURITY_QUESTIONS
            answer (str): Real answer
            fake_answers (list[str]): Exactly three decoys

        Returns:
            CustomUser: Updated user
        """
        user.security_question = question
        user.security_answer = normalize_answer(answer)
        user.save(update_fields=["security_question", "security_answer"])

        FakeAnswer.objects.filter(user=user).delete()
        FakeAnswer.objects.bulk_create(
            [FakeAnswer(user=user, answer=normalize_answer(fake)) for fake in fake_answers]
        )

        logger.info(
            "Security question updated",
            extra={
                "user_id": user.id,
                "action": "security_question_updated",
                "component": "SecuritySetupService",
            },
        )
        return user
