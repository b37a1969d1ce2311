# conftest.py
import pytest
from django.core.cache import cache

from billing.services import reset_registry


@pytest.fixture(autouse=True)
def clean_process_state():
    """Cached reports, usage counters and subscription resolvers never leak between tests."""
    cache.clear()
    reset_registry()
    yield
    reset_registry()
    cache.clear()
