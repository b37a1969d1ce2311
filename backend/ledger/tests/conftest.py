# ledger/tests/conftest.py
import pytest
from rest_framework.test import APIClient

from .factories import ProUserFactory, UserFactory


@pytest.fixture
def user(db):
    return UserFactory(email="free@example.com")


@pytest.fixture
def pro_user(db):
    return ProUserFactory(email="pro@example.com")


@pytest.fixture
def other_user(db):
    return UserFactory(email="other@example.com")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def free_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def pro_client(api_client, pro_user):
    api_client.force_authenticate(user=pro_user)
    return api_client
