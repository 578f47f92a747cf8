"""Shared test fixtures."""
import os

os.environ.setdefault("USE_MOCK_API", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, UTC

import pytest

from case_manager.context import build_context, no_delay
from case_manager.factory import build_services
from case_manager.logging_config import setup_structured_logging

# Configure before any module logger is first used and cached
setup_structured_logging()

FIXED_NOW = datetime(2024, 12, 8, 9, 30, 15, 250000, tzinfo=UTC)


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def context(fixed_clock):
    """Seeded context with zero latency."""
    return build_context(clock=fixed_clock, delay=no_delay)


@pytest.fixture
def empty_context(fixed_clock):
    """Context with empty stores and no counters."""
    return build_context(seed=False, clock=fixed_clock, delay=no_delay)


@pytest.fixture
def services(context):
    """Mock-mode services over the seeded context."""
    return build_services(mock=True, context=context, bcrypt_rounds=4)


@pytest.fixture
def empty_services(empty_context):
    """Mock-mode services over empty stores."""
    return build_services(mock=True, context=empty_context, bcrypt_rounds=4)
