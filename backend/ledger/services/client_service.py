"""
Service for client operations.
"""

import logging

from django.db import transaction as db_transaction

from ..models import Client
from .usage_service import CLIENTS, UsageService

logger = logging.getLogger(__name__)


class ClientService:
    """
    Service for handling a user's clients.

    Creation is subject to the weekly quota; deleting a client keeps its
    transactions and only clears their link.
    """

    def __init__(self, usage_service=None):
        self.usage_service = usage_service or UsageService()

    @staticmethod
    def list_clients(user, search=None):
        queryset = Client.objects.filter(user=user)
        search = (search or "").strip()
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset.order_by("name")

    def create_client(self, user, data, plan_type):
        """
        Create a client after the weekly quota check.

        Raises:
            WeeklyLimitExceeded: Free plan cap reached; nothing is inserted
        """
        self.usage_service.ensure_can_create(user, CLIENTS, plan_type)

        with db_transaction.atomic():
            client = Client(user=user, **data)
            client.full_clean()
            client.save()

        logger.info(
            "Client created",
            extra={
                "user_id": user.id,
                "client_id": client.id,
                "action": "client_created",
                "component": "ClientService",
            },
        )
        return client

    @staticmethod
    def update_client(client, data):
        for field, value in data.items():
            setattr(client, field, value)
        client.full_clean()
        client.save()
        return client

    @staticmethod
    def delete_client(client):
        client_id = client.id
        user_id = client.user_id
        client.delete()

        logger.info(
            "Client deleted",
            extra={
                "user_id": user_id,
                "client_id": client_id,
                "action": "client_deleted",
                "component": "ClientService",
            },
        )
