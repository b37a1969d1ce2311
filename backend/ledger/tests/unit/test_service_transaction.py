# ledger/tests/unit/test_service_transaction.py
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from billing.plans import PlanType
from ledger.exceptions import WeeklyLimitExceeded
from ledger.models import Client, Transaction
from ledger.services import ClientService, ReportService, TransactionService
from ledger.tests.factories import ClientFactory, TransactionFactory


@pytest.mark.django_db
class TestTransactionService:
    def setup_method(self, method):
        self.service = TransactionService()

    def test_list_is_scoped_and_ordered(self, user, other_user):
        older = TransactionFactory(user=user, date=date(2024, 1, 1))
        newer = TransactionFactory(user=user, date=date(2024, 2, 1))
        TransactionFactory(user=other_user)

        assert list(TransactionService.list_transactions(user)) == [newer, older]

    def test_search_matches_description_category_and_client(self, user):
        client = ClientFactory(user=user, name="Padaria Central")
        by_description = TransactionFactory(user=user, description="Venda de bolo")
        by_category = TransactionFactory(user=user, category="BOLOS")
        by_client = TransactionFactory(user=user, client=client, description="x", category="y")
        TransactionFactory(user=user, description="Aluguel", category="Fixos")

        result = set(TransactionService.list_transactions(user, search="bol"))
        assert result == {by_description, by_category}

        result = set(TransactionService.list_transactions(user, search="central"))
        assert result == {by_client}

    def test_type_filter(self, user):
        TransactionFactory(user=user, type=Transaction.INCOME)
        expense = TransactionFactory(user=user, type=Transaction.EXPENSE)

        assert list(TransactionService.list_transactions(user, transaction_type="expense")) == [expense]
        assert TransactionService.list_transactions(user, transaction_type="bogus").count() == 2

    def test_create_checks_quota_first(self, user):
        TransactionFactory.create_batch(5, user=user)
        data = {"type": "income", "amount": Decimal("10.00"), "date": date(2024, 1, 1)}

        with pytest.raises(WeeklyLimitExceeded):
            self.service.create_transaction(user, data, PlanType.FREE)
        assert Transaction.objects.filter(user=user).count() == 5

    def test_create_for_pro_ignores_quota(self, pro_user):
        TransactionFactory.create_batch(5, user=pro_user)
        data = {"type": "expense", "amount": Decimal("10.00"), "date": date(2024, 1, 1)}

        instance = self.service.create_transaction(pro_user, data, PlanType.PRO)
        assert instance.pk is not None
        assert instance.user == pro_user

    def test_create_rejects_non_positive_amount(self, user):
        data = {"type": "income", "amount": Decimal("0"), "date": date(2024, 1, 1)}
        with pytest.raises(ValidationError):
            self.service.create_transaction(user, data, PlanType.FREE)

    def test_create_rejects_foreign_client(self, user, other_user):
        foreign = ClientFactory(user=other_user)
        data = {
            "type": "income",
            "amount": Decimal("10.00"),
            "date": date(2024, 1, 1),
            "client": foreign,
        }
        with pytest.raises(ValidationError):
            self.service.create_transaction(user, data, PlanType.FREE)

    def test_update_is_not_limited(self, user):
        transactions = TransactionFactory.create_batch(5, user=user)
        updated = TransactionService.update_transaction(transactions[0], {"amount": Decimal("42.00")})
        assert updated.amount == Decimal("42.00")

    def test_records_for(self, user):
        TransactionFactory(user=user, amount=Decimal("12.34"), category="")
        records = TransactionService.records_for(user)
        assert len(records) == 1
        assert records[0].amount == Decimal("12.34")
        assert records[0].category == ""


@pytest.mark.django_db
class TestClientService:
    def test_create_respects_quota(self, user):
        ClientFactory.create_batch(5, user=user)
        with pytest.raises(WeeklyLimitExceeded):
            ClientService().create_client(user, {"name": "Novo"}, PlanType.FREE)

    def test_delete_keeps_transactions(self, user):
        client = ClientFactory(user=user)
        transaction = TransactionFactory(user=user, client=client)

        ClientService.delete_client(client)

        transaction.refresh_from_db()
        assert transaction.client is None
        assert not Client.objects.filter(pk=client.pk).exists()

    def test_search(self, user):
        ClientFactory(user=user, name="Mercado Bom Preço")
        ClientFactory(user=user, name="Oficina")
        assert [c.name for c in ClientService.list_clients(user, search="mercado")] == [
            "Mercado Bom Preço"
        ]


@pytest.mark.django_db
class TestReportService:
    def test_cached_until_transactions_change(self, user):
        today = timezone.localdate()
        TransactionFactory(user=user, amount=Decimal("100.00"), date=today)

        first = ReportService.get_report(user, PlanType.FREE)
        assert first["monthly"][-1]["income"] == 100

        # Signal drops the cached report
        TransactionFactory(user=user, amount=Decimal("50.00"), date=today)
        second = ReportService.get_report(user, PlanType.FREE)
        assert second["monthly"][-1]["income"] == 150

    def test_cache_hit_returns_previous_result(self, user):
        today = timezone.localdate()
        TransactionFactory(user=user, amount=Decimal("100.00"), date=today)
        first = ReportService.get_report(user, PlanType.FREE)

        # Bypass signals to prove the cache is used
        Transaction.objects.filter(user=user).update(amount=Decimal("1.00"))
        assert ReportService.get_report(user, PlanType.FREE) == first
        assert ReportService.get_report(user, PlanType.FREE, refresh=True)["monthly"][-1]["income"] == 1

    def test_plan_selects_report_shape(self, user):
        assert len(ReportService.get_report(user, PlanType.PRO)["monthly_pro"]) == 12
        assert ReportService.get_report(user, PlanType.FREE)["monthly_pro"] == []

    def test_previous_month_is_not_current(self, user):
        today = timezone.localdate()
        TransactionFactory(user=user, date=today.replace(day=1) - timedelta(days=1))
        report = ReportService.get_report(user, PlanType.FREE)
        assert report["monthly"][-1]["income"] == 0
        assert report["monthly"][-2]["income"] == 100
