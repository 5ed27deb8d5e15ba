"""Shared test configuration for the prompthub repository.

Provides:
- Quiet structured logging during test runs
- Settings cache isolation between tests
"""

import pytest

from prompthub_common import configure_logging, get_settings


def pytest_configure(config):
    """Configure structlog once for the whole session."""
    configure_logging(level="WARNING", json_output=False)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Tests that touch get_settings() never see another test's environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
