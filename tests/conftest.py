"""Root conftest: shared pytest markers and logging isolation.

Markers
-------
unit        fast, no I/O, pure logic
integration requires a live Capture API (set PROCESSPOSTER_TEST_LIVE=1)
"""

from __future__ import annotations

import pytest
import structlog


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, no I/O tests")
    config.addinivalue_line("markers", "integration: requires a live Capture API")


@pytest.fixture(autouse=True, scope="session")
def _uncached_loggers():
    """Module loggers resolve the structlog config on every call during tests."""
    structlog.configure(cache_logger_on_first_use=False)
