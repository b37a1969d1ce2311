"""
Database models for the Saldus ledger.

This module defines clients, income/expense transactions and the
pro-tier financial goals evaluated against monthly aggregates.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

# Get structured logger for this module
logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# CLIENTS
# -------------------------------------------------------------------
# Customers a transaction can optionally be attributed to


class Client(models.Model):
    """
    Client of the user's business.

    Deleting a client keeps its transactions; they simply lose the link.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="clients"
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "clients"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="idx_client_user_created"),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        """Validate required client data."""
        super().clean()

        if not (self.name or "").strip():
            logger.warning(
                "Client validation failed - empty name",
                extra={
                    "client_id": self.id if self.id else "new",
                    "action": "client_validation_failed",
                    "component": "Client",
                    "severity": "low",
                },
            )
            raise ValidationError({"name": "Client name is required"})


# -------------------------------------------------------------------
# TRANSACTIONS
# -------------------------------------------------------------------
# Income and expense records, the input of every aggregation


class Transaction(models.Model):
    """
    Financial transaction record.

    Amounts are always positive; ``type`` carries the direction.
    ``category`` is free text.
    """

    INCOME = "income"
    EXPENSE = "expense"
    TRANSACTION_TYPES = [
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="transactions"
    )
    client = models.ForeignKey(
        Client,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    type = models.CharField(max_length=10, choices=TRANSACTION_TYPES)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    category = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "transactions"
        indexes = [
            models.Index(fields=["user", "date"], name="idx_tx_user_date"),
            models.Index(fields=["user", "created_at"], name="idx_tx_user_created"),
            models.Index(fields=["user", "type"], name="idx_tx_user_type"),
        ]
        ordering = ["-date", "-created_at"]

    def __str__(self):
        return f"{self.type} {self.amount} on {self.date}"

    def clean(self):
        """Validate amount and client ownership."""
        super().clean()

        if self.amount is not None and self.amount <= 0:
            logger.warning(
                "Transaction validation failed - non-positive amount",
                extra={
                    "transaction_id": self.id if self.id else "new",
                    "amount": float(self.amount),
                    "action": "transaction_validation_failed",
                    "component": "Transaction",
                    "severity": "medium",
                },
            )
            raise ValidationError({"amount": "Amount must be greater than zero"})

        if self.client_id and self.client.user_id != self.user_id:
            logger.warning(
                "Transaction validation failed - client belongs to another user",
                extra={
                    "transaction_id": self.id if self.id else "new",
                    "client_id": self.client_id,
                    "action": "transaction_validation_failed",
                    "component": "Transaction",
                    "severity": "high",
                },
            )
            raise ValidationError({"client": "Client not found"})


# -------------------------------------------------------------------
# GOALS
# -------------------------------------------------------------------
# Pro-tier targets compared against the current month's aggregates


class Goal(models.Model):
    """
    Financial goal.

    ``category`` only applies to expense goals and is cleared for the
    other types. ``current_amount`` is informational; progress is always
    recomputed from transactions.
    """

    INCOME = "income"
    EXPENSE = "expense"
    PROFIT = "profit"
    GOAL_TYPES = [
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
        (PROFIT, "Profit"),
    ]

    MONTHLY = "monthly"
    YEARLY = "yearly"
    PERIODS = [
        (MONTHLY, "Monthly"),
        (YEARLY, "Yearly"),
    ]

    DEFAULT_DESCRIPTIONS = {
        INCOME: "Income goal",
        EXPENSE: "Expense goal",
        PROFIT: "Profit goal",
    }

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="goals"
    )
    type = models.CharField(max_length=10, choices=GOAL_TYPES)
    category = models.CharField(max_length=100, blank=True, default="")
    target_amount = models.DecimalField(max_digits=14, decimal_places=2)
    current_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    period = models.CharField(max_length=10, choices=PERIODS, default=MONTHLY)
    description = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "goals"
        ordering = ["-created_at"]

    def __str__(self):
        return self.description or self.DEFAULT_DESCRIPTIONS.get(self.type, "Goal")

    def save(self, *args, **kwargs):
        if self.type != self.EXPENSE:
            self.category = ""
        if not (self.description or "").strip():
            self.description = self.DEFAULT_DESCRIPTIONS.get(self.type, "")
        super().save(*args, **kwargs)

    def clean(self):
        """Validate goal target."""
        super().clean()

        if self.target_amount is not None and self.target_amount <= 0:
            logger.warning(
                "Goal validation failed - non-positive target",
                extra={
                    "goal_id": self.id if self.id else "new",
                    "target_amount": float(self.target_amount),
                    "action": "goal_validation_failed",
                    "component": "Goal",
                    "severity": "medium",
                },
            )
            raise ValidationError({"target_amount": "Target amount must be greater than zero"})
