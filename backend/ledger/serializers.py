"""
Serializers for clients, transactions and goals.

Validation of ownership happens here; creation and updates are delegated
to the services by the views.
"""

import logging

from rest_framework import serializers

from .models import Client, Goal, Transaction

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# CLIENT SERIALIZER
# -------------------------------------------------------------------


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ["id", "name", "email", "phone", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Client name is required")
        return value


# -------------------------------------------------------------------
# TRANSACTION SERIALIZER
# -------------------------------------------------------------------


class TransactionSerializer(serializers.ModelSerializer):
    """
    Transaction serializer.

    ``client`` only accepts clients of the requesting user; ``client_name``
    is returned for display.
    """

    client = serializers.PrimaryKeyRelatedField(
        queryset=Client.objects.none(), required=False, allow_null=True
    )
    client_name = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "type",
            "amount",
            "category",
            "description",
            "date",
            "client",
            "client_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Restrict selectable clients to the requesting user
        request = self.context.get("request")
        if request and getattr(request, "user", None) and request.user.is_authenticated:
            self.fields["client"].queryset = Client.objects.filter(user=request.user)

    def get_client_name(self, obj):
        return obj.client.name if obj.client_id else None

    def validate_amount(self, value):
        if value <= 0:
            logger.warning(
                "Transaction amount validation failed",
                extra={
                    "amount": float(value),
                    "action": "transaction_amount_validation_failed",
                    "component": "TransactionSerializer",
                    "severity": "low",
                },
            )
            raise serializers.ValidationError("Amount must be greater than zero")
        return value


# -------------------------------------------------------------------
# GOAL SERIALIZER
# -------------------------------------------------------------------


class GoalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Goal
        fields = [
            "id",
            "type",
            "category",
            "target_amount",
            "current_amount",
            "period",
            "description",
            "created_at",
        ]
        read_only_fields = ["id", "current_amount", "created_at"]

    def validate_target_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Target amount must be greater than zero")
        return value

    def validate(self, attrs):
        goal_type = attrs.get("type", getattr(self.instance, "type", None))
        if goal_type != Goal.EXPENSE:
            attrs["category"] = ""
        return attrs
