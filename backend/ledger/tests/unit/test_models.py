# ledger/tests/unit/test_models.py
from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from ledger.models import Goal, Transaction
from ledger.tests.factories import ClientFactory, GoalFactory, TransactionFactory


@pytest.mark.django_db
class TestTransactionModel:
    def test_amount_must_be_positive(self, user):
        transaction = Transaction(user=user, type="income", amount=Decimal("-1"), date=date(2024, 1, 1))
        with pytest.raises(ValidationError) as exc_info:
            transaction.full_clean()
        assert "amount" in exc_info.value.message_dict

    def test_client_must_belong_to_user(self, user, other_user):
        transaction = Transaction(
            user=user,
            client=ClientFactory(user=other_user),
            type="income",
            amount=Decimal("10"),
            date=date(2024, 1, 1),
        )
        with pytest.raises(ValidationError) as exc_info:
            transaction.full_clean()
        assert "client" in exc_info.value.message_dict

    def test_default_ordering_newest_first(self, user):
        old = TransactionFactory(user=user, date=date(2023, 5, 1))
        new = TransactionFactory(user=user, date=date(2024, 5, 1))
        assert list(Transaction.objects.filter(user=user)) == [new, old]


@pytest.mark.django_db
class TestGoalModel:
    def test_category_only_kept_for_expense_goals(self, pro_user):
        income_goal = GoalFactory(user=pro_user, type=Goal.INCOME, category="Vendas")
        expense_goal = GoalFactory(user=pro_user, type=Goal.EXPENSE, category="Aluguel")

        assert income_goal.category == ""
        assert expense_goal.category == "Aluguel"

    def test_default_description(self, pro_user):
        goal = GoalFactory(user=pro_user, type=Goal.PROFIT, description="")
        assert goal.description == "Profit goal"
        assert str(goal) == "Profit goal"

    def test_target_must_be_positive(self, pro_user):
        goal = Goal(user=pro_user, type=Goal.INCOME, target_amount=Decimal("0"))
        with pytest.raises(ValidationError):
            goal.full_clean()


@pytest.mark.django_db
class TestClientModel:
    def test_blank_name_is_rejected(self, user):
        client = ClientFactory.build(user=user, name="   ")
        with pytest.raises(ValidationError):
            client.full_clean()
