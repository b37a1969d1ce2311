"""
Service for transaction operations with error handling and logging.

This module provides the TransactionService class for listing, searching,
creating, updating and deleting a user's transactions. Creation goes
through the weekly quota check first; edits and deletions are never limited.
"""

import logging

from django.db import transaction as db_transaction
from django.db.models import Q

from ..analytics.records import RECORD_FIELDS, TransactionRecord
from ..models import Transaction
from .usage_service import TRANSACTIONS, UsageService

# Get structured logger for this module
logger = logging.getLogger(__name__)


class TransactionService:
    """
    Service for handling a user's transactions.
    """

    def __init__(self, usage_service=None):
        self.usage_service = usage_service or UsageService()

    @staticmethod
    def list_transactions(user, search=None, transaction_type=None):
        """
        Transactions of a user, newest first.

        Args:
            user: Owner
            search (str): Case-insensitive match on description, category or client name
            transaction_type (str): Optional ``income`` / ``expense`` filter

        Returns:
            QuerySet: Filtered transactions with their client
        """
        queryset = Transaction.objects.filter(user=user).select_related("client")

        if transaction_type in (Transaction.INCOME, Transaction.EXPENSE):
            queryset = queryset.filter(type=transaction_type)

        search = (search or "").strip()
        if search:
            queryset = queryset.filter(
                Q(description__icontains=search)
                | Q(category__icontains=search)
                | Q(client__name__icontains=search)
            )

        return queryset.order_by("-date", "-created_at")

    @staticmethod
    def records_for(user):
        """Every transaction of the user as plain analytics records."""
        rows = Transaction.objects.filter(user=user).values(*RECORD_FIELDS)
        return [TransactionRecord.from_values(row) for row in rows]

    def create_transaction(self, user, data, plan_type):
        """
        Create a transaction after the weekly quota check.

        Args:
            user: Owner
            data (dict): Validated serializer data
            plan_type: Resolved plan of the user

        Returns:
            Transaction: Created instance

        Raises:
            WeeklyLimitExceeded: Free plan cap reached; nothing is inserted
            ValidationError: Invalid amount or foreign client
        """
        self.usage_service.ensure_can_create(user, TRANSACTIONS, plan_type)

        with db_transaction.atomic():
            instance = Transaction(user=user, **data)
            instance.full_clean()
            instance.save()

        logger.info(
            "Transaction created",
            extra={
                "user_id": user.id,
                "transaction_id": instance.id,
                "transaction_type": instance.type,
                "action": "transaction_created",
                "component": "TransactionService",
            },
        )
        return instance

    @staticmethod
    @db_transaction.atomic
    def update_transaction(instance, data):
        for field, value in data.items():
            setattr(instance, field, value)
        instance.full_clean()
        instance.save()

        logger.info(
            "Transaction updated",
            extra={
                "user_id": instance.user_id,
                "transaction_id": instance.id,
                "fields": list(data.keys()),
                "action": "transaction_updated",
                "component": "TransactionService",
            },
        )
        return instance

    @staticmethod
    def delete_transaction(instance):
        transaction_id = instance.id
        user_id = instance.user_id
        instance.delete()

        logger.info(
            "Transaction deleted",
            extra={
                "user_id": user_id,
                "transaction_id": transaction_id,
                "action": "transaction_deleted",
                "component": "TransactionService",
            },
        )
