"""Root pytest configuration for all tests."""

import pytest

from src.pipeline.context import RelayContext
from src.settings.models import RelayConfig
from tests.helpers.fakes import FakeBackend, InMemoryDocumentStore


@pytest.fixture
def store():
    """Empty in-memory vault."""
    return InMemoryDocumentStore()


@pytest.fixture
def backend():
    """Backend that uploads successfully and has no remote images."""
    return FakeBackend()


@pytest.fixture
def notices():
    """List collecting user-facing notices."""
    return []


@pytest.fixture
def make_context(store, backend, notices):
    """Build a RelayContext over the in-memory store and fake backend."""
    def _make(**config_values):
        return RelayContext(
            config=RelayConfig(**config_values),
            store=store,
            backend=backend,
            notify=notices.append,
        )
    return _make
