"""
Pytest configuration and shared fixtures for MDB_INDEXES tests.

This module provides:
- Mock Motor database and collection fixtures
- Index document factories
- Metrics and logging context isolation
"""

from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from mdb_indexes.indexes import IndexKeyType, IndexSpec, NamespacedIndex
from mdb_indexes.observability import clear_correlation_id, clear_index_context
from mdb_indexes.observability.metrics import get_metrics_collector

# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_mock_collection(name: str) -> MagicMock:
    """Create a mock Motor collection with empty cursors."""
    collection = MagicMock()
    collection.name = name
    collection.find = MagicMock(return_value=MagicMock(to_list=AsyncMock(return_value=[])))
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="test_id"))
    collection.list_indexes = MagicMock(
        return_value=MagicMock(to_list=AsyncMock(return_value=[]))
    )
    return collection


class MockDatabase:
    """
    Stand-in for AsyncIOMotorDatabase.

    Collections are created on first access and cached, so a test can
    configure `db["users"]` before the code under test looks it up.
    """

    def __init__(self, name: str = "test_db") -> None:
        self.name = name
        self.command = AsyncMock(return_value={"ok": 1.0})
        self.list_collection_names = AsyncMock(return_value=[])
        self.collections: Dict[str, MagicMock] = {}

    def __getitem__(self, name: str) -> MagicMock:
        if name not in self.collections:
            self.collections[name] = make_mock_collection(name)
        return self.collections[name]

    def set_indexes(self, collection_name: str, docs: List[Dict[str, Any]]) -> None:
        self[collection_name].list_indexes.return_value.to_list.return_value = docs


@pytest.fixture
def mock_database() -> MockDatabase:
    """Create a mock MongoDB database named `test_db`."""
    return MockDatabase("test_db")


# ============================================================================
# INDEX FIXTURES
# ============================================================================


@pytest.fixture
def compound_index() -> IndexSpec:
    """Index on a ascending then b descending (default name `a_1_b_-1`)."""
    return IndexSpec(key=(("a", IndexKeyType.ASCENDING), ("b", IndexKeyType.DESCENDING)))


@pytest.fixture
def users_email_index() -> NamespacedIndex:
    """Unique email index of `test_db.users`."""
    return NamespacedIndex(
        "test_db.users",
        IndexSpec(key=(("email", IndexKeyType.ASCENDING),), unique=True),
    )


@pytest.fixture
def id_index_doc() -> Dict[str, Any]:
    """The `_id_` index as reported by listIndexes."""
    return {"v": 2, "key": {"_id": 1}, "name": "_id_"}


# ============================================================================
# ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def reset_observability():
    """Reset global metrics and logging context around each test."""
    get_metrics_collector().reset()
    clear_index_context()
    clear_correlation_id()
    yield
    get_metrics_collector().reset()
    clear_index_context()
    clear_correlation_id()
