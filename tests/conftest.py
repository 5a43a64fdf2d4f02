"""
Shared pytest fixtures for entity access layer tests.
"""

import pytest

from entitystore.accessor import CollectionAccessor
from entitystore.stores.memory_store import MemoryStore
from tests.fakes import CodedError, FailingStore


@pytest.fixture
def store():
    """Provide an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def accessor(store):
    """Provide an accessor over the in-memory store."""
    return CollectionAccessor(store)


@pytest.fixture
def failing_store():
    """Provide a store that fails every call with a coded error."""
    return FailingStore(CodedError(503, "backend unavailable"))


@pytest.fixture
def failing_accessor(failing_store):
    """Provide an accessor over a store that always fails."""
    return CollectionAccessor(failing_store)


@pytest.fixture
def game_names():
    """Provide unsorted game names."""
    return ["Go", "Chess", "Backgammon", "Poker", "Bridge", "Checkers", "Shogi"]
