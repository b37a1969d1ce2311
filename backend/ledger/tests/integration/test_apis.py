# ledger/tests/integration/test_apis.py
from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from ledger.models import Goal, Transaction
from ledger.tests.factories import ClientFactory, GoalFactory, TransactionFactory


def transaction_payload(**overrides):
    payload = {
        "type": "income",
        "amount": "250.00",
        "category": "Vendas",
        "description": "Venda balcão",
        "date": timezone.localdate().isoformat(),
    }
    payload.update(overrides)
    return payload


# =============================================================================
# AUTHENTICATION
# =============================================================================


@pytest.mark.django_db
def test_endpoints_require_authentication(api_client):
    for name in ("transaction-list", "client-list", "reports", "dashboard"):
        response = api_client.get(reverse(name))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TRANSACTIONS
# =============================================================================


@pytest.mark.django_db
class TestTransactionAPI:
    def test_create_and_list(self, free_client, user):
        response = free_client.post(reverse("transaction-list"), transaction_payload(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["amount"] == "250.00"
        assert response.data["client_name"] is None

        listing = free_client.get(reverse("transaction-list"))
        assert listing.status_code == status.HTTP_200_OK
        assert [item["id"] for item in listing.data] == [response.data["id"]]

    def test_free_plan_blocked_after_five_creations(self, free_client, user):
        TransactionFactory.create_batch(5, user=user)

        response = free_client.post(reverse("transaction-list"), transaction_payload(), format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["detail"].code == "weekly_limit_reached"
        assert Transaction.objects.filter(user=user).count() == 5

    def test_pro_plan_is_not_limited(self, pro_client, pro_user):
        TransactionFactory.create_batch(5, user=pro_user)

        response = pro_client.post(reverse("transaction-list"), transaction_payload(), format="json")
        assert response.status_code == status.HTTP_201_CREATED

    def test_old_creations_do_not_count(self, free_client, user):
        for transaction in TransactionFactory.create_batch(5, user=user):
            Transaction.objects.filter(pk=transaction.pk).update(
                created_at=timezone.now() - timedelta(days=8)
            )

        response = free_client.post(reverse("transaction-list"), transaction_payload(), format="json")
        assert response.status_code == status.HTTP_201_CREATED

    def test_client_of_other_user_is_rejected(self, free_client, other_user):
        foreign = ClientFactory(user=other_user)

        response = free_client.post(
            reverse("transaction-list"), transaction_payload(client=foreign.id), format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "client" in response.data

    def test_client_name_is_returned(self, free_client, user):
        client = ClientFactory(user=user, name="Padaria Central")

        response = free_client.post(
            reverse("transaction-list"), transaction_payload(client=client.id), format="json"
        )
        assert response.data["client_name"] == "Padaria Central"

    def test_non_positive_amount_is_rejected(self, free_client):
        response = free_client.post(
            reverse("transaction-list"), transaction_payload(amount="0"), format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_users_transactions_are_invisible(self, free_client, other_user):
        foreign = TransactionFactory(user=other_user)

        assert free_client.get(reverse("transaction-list")).data == []
        response = free_client.get(reverse("transaction-detail", args=[foreign.id]))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_search_and_type_filters(self, free_client, user):
        TransactionFactory(user=user, description="Bolo de cenoura", type="income")
        TransactionFactory(user=user, description="Farinha", category="Insumos", type="expense")

        response = free_client.get(reverse("transaction-list"), {"search": "bolo"})
        assert [item["description"] for item in response.data] == ["Bolo de cenoura"]

        response = free_client.get(reverse("transaction-list"), {"type": "expense"})
        assert [item["description"] for item in response.data] == ["Farinha"]

    def test_update_and_delete(self, free_client, user):
        transaction = TransactionFactory(user=user)

        response = free_client.patch(
            reverse("transaction-detail", args=[transaction.id]), {"amount": "75.50"}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data["amount"] == "75.50"

        response = free_client.delete(reverse("transaction-detail", args=[transaction.id]))
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Transaction.objects.filter(pk=transaction.id).exists()

    def test_export_csv(self, free_client, user):
        TransactionFactory(user=user, description="Venda", amount=Decimal("10.00"))

        response = free_client.get(reverse("transaction-export"))

        assert response.status_code == status.HTTP_200_OK
        assert response["Content-Type"].startswith("text/csv")
        assert "Relatorio_Movimentacoes_" in response["Content-Disposition"]
        body = response.content.decode("utf-8")
        assert body.startswith("\ufeffsep=;\n")
        assert ";;;;Total de Receitas;10.00;" in body

    def test_export_without_transactions(self, free_client):
        response = free_client.get(reverse("transaction-export"))
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# CLIENTS
# =============================================================================


@pytest.mark.django_db
class TestClientAPI:
    def test_create_client(self, free_client, user):
        response = free_client.post(
            reverse("client-list"), {"name": "  Oficina Silva ", "phone": "11 99999-0000"}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["name"] == "Oficina Silva"
        assert user.clients.count() == 1

    def test_client_quota(self, free_client, user):
        ClientFactory.create_batch(5, user=user)
        response = free_client.post(reverse("client-list"), {"name": "Sexto"}, format="json")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_clients_are_scoped(self, free_client, user, other_user):
        ClientFactory(user=user, name="Meu cliente")
        ClientFactory(user=other_user, name="Outro")

        response = free_client.get(reverse("client-list"))
        assert [item["name"] for item in response.data] == ["Meu cliente"]


# =============================================================================
# GOALS
# =============================================================================


@pytest.mark.django_db
class TestGoalAPI:
    def test_free_plan_is_refused(self, free_client):
        assert free_client.get(reverse("goal-list")).status_code == status.HTTP_403_FORBIDDEN
        response = free_client.post(
            reverse("goal-list"), {"type": "income", "target_amount": "1000.00"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_pro_plan_creates_goal(self, pro_client, pro_user):
        response = pro_client.post(
            reverse("goal-list"),
            {"type": "income", "target_amount": "1000.00", "category": "ignored"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["description"] == "Income goal"
        assert response.data["category"] == ""
        assert Goal.objects.filter(user=pro_user).count() == 1

    def test_progress(self, pro_client, pro_user):
        today = timezone.localdate()
        TransactionFactory(user=pro_user, type="income", amount=Decimal("1500.00"), date=today)
        TransactionFactory(user=pro_user, type="expense", amount=Decimal("1000.00"), date=today)
        goal = GoalFactory(user=pro_user, type=Goal.PROFIT, target_amount=Decimal("1000.00"))

        response = pro_client.get(reverse("goal-progress"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["goals"][0]["goal_id"] == goal.id
        assert response.data["goals"][0]["percentage"] == 50
        assert response.data["goals"][0]["status"] == "on_track"
        assert len(response.data["recommendations"]) >= 1


# =============================================================================
# REPORTS AND DASHBOARD
# =============================================================================


@pytest.mark.django_db
class TestReportAndDashboardAPI:
    def test_free_report(self, free_client, user):
        TransactionFactory(user=user, type="expense", category="Aluguel", amount=Decimal("40.00"))

        response = free_client.get(reverse("reports"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["plan_type"] == "free"
        assert len(response.data["monthly"]) == 6
        assert response.data["monthly_pro"] == []
        assert response.data["categories"] == [{"category": "Aluguel", "value": 40.0}]

    def test_pro_report(self, pro_client):
        response = pro_client.get(reverse("reports"), {"refresh": "true"})

        assert response.data["plan_type"] == "pro"
        assert len(response.data["monthly_pro"]) == 12
        assert len(response.data["top_months"]) == 3

    def test_dashboard(self, free_client, user):
        today = timezone.localdate()
        TransactionFactory(user=user, type="income", amount=Decimal("300.00"), date=today)
        TransactionFactory(user=user, type="expense", amount=Decimal("100.00"), date=today)
        TransactionFactory(
            user=user, type="income", amount=Decimal("50.00"), date=today + timedelta(days=40)
        )

        response = free_client.get(reverse("dashboard"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["month_income"] == 300
        assert response.data["month_expense"] == 100
        assert response.data["balance"] == 200
        assert response.data["accounts_receivable"] == 50
        assert response.data["accounts_payable"] == 0
        assert len(response.data["recent_transactions"]) == 3
        assert response.data["weekly_limit"] == {"count": 3, "limit": 5, "can_create": True}
