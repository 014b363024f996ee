"""
Index manager contracts.

`IndexManager` manages the indexes of a whole database and
`CollectionIndexManager` those of a single collection. Both come in a legacy
flavour (index documents in `system.indexes`) and a modern one (index
commands); `mdb_indexes.core.selector` picks one from the server's wire
version.

All operations are coroutines. Managers only hold immutable configuration
(database handle, collection name, backend), so concurrent calls on one
manager are safe.

`ensure` is not atomic: it lists the current indexes and then creates the
missing one. A concurrent creator racing between both steps can make the
server reject the second creation, or make both callers get True.

This module is part of MDB_INDEXES.
"""

import warnings
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, List, Mapping, Union

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..constants import NAMESPACE_SEPARATOR
from .types import IndexSpec, NamespacedIndex, WriteOutcome


class IndexBackend(str, Enum):
    """Strategy used to read and write index metadata."""

    LEGACY = "legacy"
    MODERN = "modern"


def dropped_count(reply: Mapping[str, Any]) -> int:
    """Index count reported by a `dropIndexes` reply (`nIndexesWas`)."""
    return int(reply.get("nIndexesWas", 0))


class IndexManager(ABC):
    """Indexes manager at database level."""

    backend: ClassVar[IndexBackend]

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self._database

    @property
    def db_name(self) -> str:
        return self._database.name

    @property
    def namespace(self) -> str:
        """Database name; the namespace prefix shared by all its indexes."""
        return self._database.name

    @abstractmethod
    async def list(self) -> List[NamespacedIndex]:
        """Lists all the indexes of this database."""

    @abstractmethod
    async def ensure(self, ns_index: NamespacedIndex) -> bool:
        """
        Creates the given index only if it does not exist yet.

        Building an index can be long and can block the database depending
        on its options and on the data to index.

        Returns:
            True if the index was created, False if it already existed
        """

    @abstractmethod
    async def create(self, ns_index: NamespacedIndex) -> WriteOutcome:
        """Creates the given index, without checking whether it exists."""

    @abstractmethod
    async def drop_index(self, collection_name: str, index_name: str) -> int:
        """
        Drops the named index of the given collection.

        Returns:
            The index count reported by the server
        """

    @abstractmethod
    async def drop_all(self, collection_name: str) -> int:
        """Drops all the indexes of the given collection except `_id_`."""

    @abstractmethod
    def on_collection(self, name: str) -> "CollectionIndexManager":
        """Gets a manager for the given collection."""

    async def drop(
        self, target: Union[NamespacedIndex, str], index_name: str | None = None
    ) -> int:
        """
        Drops an index.

        Either `drop(collection_name, index_name)` or `drop(ns_index)`; the
        latter drops `ns_index.index.effective_name` from
        `ns_index.collection_name`.
        """
        if isinstance(target, NamespacedIndex):
            if index_name is not None:
                raise TypeError("index_name cannot be combined with a NamespacedIndex")
            return await self.drop_index(target.collection_name, target.index.effective_name)
        if index_name is None:
            raise TypeError("drop() needs an index name along with the collection name")
        return await self.drop_index(target, index_name)

    async def delete(
        self, target: Union[NamespacedIndex, str], index_name: str | None = None
    ) -> int:
        """Deprecated alias of `drop`."""
        warnings.warn("delete() is deprecated, use drop()", DeprecationWarning, stacklevel=2)
        return await self.drop(target, index_name)


class CollectionIndexManager(ABC):
    """Indexes manager scoped to one collection."""

    backend: ClassVar[IndexBackend]

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str) -> None:
        self._database = database
        self._collection_name = collection_name

    @property
    def db_name(self) -> str:
        return self._database.name

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def namespace(self) -> str:
        return f"{self._database.name}{NAMESPACE_SEPARATOR}{self._collection_name}"

    @abstractmethod
    async def list(self) -> List[IndexSpec]:
        """Returns the indexes of this collection."""

    @abstractmethod
    async def ensure(self, index: IndexSpec) -> bool:
        """
        Creates the given index only if it does not exist on this collection.

        Returns:
            True if the index was created, False if it already existed
        """

    @abstractmethod
    async def create(self, index: IndexSpec) -> WriteOutcome:
        """Creates the given index, without checking whether it exists."""

    @abstractmethod
    async def drop_index(self, index_name: str) -> int:
        """
        Drops the named index of this collection.

        Returns:
            The index count reported by the server
        """

    @abstractmethod
    async def drop_all(self) -> int:
        """Drops all the indexes of this collection except `_id_`."""

    def _index_name(self, index: Union[str, IndexSpec, NamespacedIndex]) -> str:
        if isinstance(index, str):
            return index
        if isinstance(index, NamespacedIndex):
            if index.namespace != self.namespace:
                raise ValueError(
                    f"Index namespace '{index.namespace}' does not match "
                    f"collection '{self.namespace}'"
                )
            return index.index.effective_name
        return index.effective_name

    async def drop(self, index: Union[str, IndexSpec, NamespacedIndex]) -> int:
        """
        Drops an index of this collection by name.

        An `IndexSpec` or a `NamespacedIndex` of this collection can be given
        instead of the name; its effective name is used.
        """
        return await self.drop_index(self._index_name(index))

    async def delete(self, index: Union[str, IndexSpec, NamespacedIndex]) -> int:
        """Deprecated alias of `drop`."""
        warnings.warn("delete() is deprecated, use drop()", DeprecationWarning, stacklevel=2)
        return await self.drop(index)
