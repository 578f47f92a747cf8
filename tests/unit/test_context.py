"""Tests for the application context and the factory's mode selection."""
import importlib

import pytest

from case_manager import config
from case_manager.backends import MockBackend, RemoteBackend
from case_manager.context import build_context, no_delay
from case_manager.factory import build_services
from case_manager.http_client import ApiClient


def test_seeded_context_loads_stores_and_counters():
    context = build_context(delay=no_delay)

    assert len(context.store("appointment")) == 6
    assert len(context.store("case")) == 5
    assert context.allocator.peek("appointment") == 6
    assert context.allocator.peek("case") == 5


def test_unseeded_context_has_empty_stores_and_no_counters():
    context = build_context(seed=False, delay=no_delay)

    assert len(context.store("appointment")) == 0
    assert not context.allocator.is_seeded("appointment")


def test_contexts_are_isolated():
    first = build_context(delay=no_delay)
    second = build_context(delay=no_delay)

    first.store("case").clear()
    first.allocator.allocate("case")

    assert len(second.store("case")) == 5
    assert second.allocator.peek("case") == 5


def test_reset_single_type():
    context = build_context(delay=no_delay)

    context.reset("case")

    assert len(context.store("case")) == 0
    assert context.allocator.allocate("case") == 1
    assert len(context.store("appointment")) == 6


def test_reset_everything():
    context = build_context(delay=no_delay)

    context.reset()

    assert all(len(store) == 0 for store in context.stores.values())
    assert context.allocator.peek("appointment") == 0


@pytest.mark.asyncio
async def test_services_after_reset_start_from_one(context, services):
    context.reset("appointment")

    created = await services.appointments.create({"title": "First again"})

    assert created["id"] == 1


def test_factory_mock_mode_uses_mock_backends(context):
    services = build_services(mock=True, context=context, bcrypt_rounds=4)

    assert services.mock is True
    assert isinstance(services.appointments.backend, MockBackend)
    assert isinstance(services.cases.backend, MockBackend)
    assert services.context is context


def test_factory_live_mode_uses_remote_backends():
    client = ApiClient(base_url="http://example.test/api")

    services = build_services(mock=False, client=client)

    assert services.mock is False
    assert isinstance(services.clients.backend, RemoteBackend)
    assert services.cases.backend.client is client


def test_factory_defaults_to_configured_mode(monkeypatch):
    monkeypatch.setattr(config, "USE_MOCK_API", False)

    services = build_services()

    assert isinstance(services.appointments.backend, RemoteBackend)


class TestModeSwitch:
    """USE_MOCK_API parsing: mock unless explicitly 'false'."""

    @pytest.fixture
    def reload_config(self, monkeypatch):
        def _reload(value):
            if value is None:
                monkeypatch.delenv("USE_MOCK_API", raising=False)
            else:
                monkeypatch.setenv("USE_MOCK_API", value)
            return importlib.reload(config)

        yield _reload
        monkeypatch.undo()
        importlib.reload(config)

    @pytest.mark.parametrize("value,expected", [
        (None, True),
        ("", True),
        ("true", True),
        ("yes", True),
        ("0", True),
        ("false", False),
        ("FALSE", False),
        (" False ", False),
    ])
    def test_parsing(self, reload_config, value, expected):
        assert reload_config(value).is_mock_mode() is expected
