"""
Legacy index managers.

For servers older than MongoDB 3.0, which expose index metadata as plain
documents of the `system.indexes` collection of each database. Indexes are
listed with a query and created with an insert; dropping still goes through
the `dropIndexes` command, there is no document-delete path.

This module is part of MDB_INDEXES.
"""

import logging
from typing import List

import bson
from bson.raw_bson import RawBSONDocument
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..constants import (
    DROP_ALL_INDEXES,
    FIELD_NAME,
    FIELD_NAMESPACE,
    SYSTEM_INDEXES_COLLECTION,
)
from ..observability import timed_index_operation
from .base import CollectionIndexManager, IndexBackend, IndexManager, dropped_count
from .codec import decode_namespaced_index, encode_namespaced_index
from .types import IndexSpec, NamespacedIndex, WriteOutcome

logger = logging.getLogger(__name__)


class LegacyIndexManager(IndexManager):
    """
    Manages the indexes of a MongoDB 2.x database through `system.indexes`.
    """

    backend = IndexBackend.LEGACY

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        super().__init__(database)
        self._collection = database[SYSTEM_INDEXES_COLLECTION]

    @timed_index_operation("indexes.list")
    async def list(self) -> List[NamespacedIndex]:
        """
        Lists all the indexes of this database.

        Raises:
            IndexDecodeError: If any metadata document is malformed
        """
        docs = await self._collection.find({}).to_list(None)
        return [decode_namespaced_index(doc) for doc in docs]

    @timed_index_operation("indexes.ensure")
    async def ensure(self, ns_index: NamespacedIndex) -> bool:
        query = {
            FIELD_NAMESPACE: ns_index.namespace,
            FIELD_NAME: ns_index.index.effective_name,
        }
        existing = await self._collection.find_one(query)
        if existing is not None:
            logger.debug(
                f"Index '{ns_index.index.effective_name}' already exists on "
                f"'{ns_index.namespace}'."
            )
            return False

        await self.create(ns_index)
        return True

    @timed_index_operation("indexes.create")
    async def create(self, ns_index: NamespacedIndex) -> WriteOutcome:
        """
        Inserts the index document into `system.indexes`.

        The document is sent pre-encoded so the driver does not add an `_id`
        to it.

        Raises:
            EmptyKeyError: If the index has no key field (nothing is inserted)
        """
        doc = encode_namespaced_index(ns_index)
        result = await self._collection.insert_one(RawBSONDocument(bson.encode(doc)))
        logger.info(f"Created index '{doc[FIELD_NAME]}' on '{ns_index.namespace}'.")
        return result

    @timed_index_operation("indexes.drop")
    async def drop_index(self, collection_name: str, index_name: str) -> int:
        reply = await self._database.command("dropIndexes", collection_name, index=index_name)
        logger.info(f"Dropped index '{index_name}' of '{self.db_name}.{collection_name}'.")
        return dropped_count(reply)

    async def drop_all(self, collection_name: str) -> int:
        return await self.drop_index(collection_name, DROP_ALL_INDEXES)

    def on_collection(self, name: str) -> "LegacyCollectionIndexManager":
        return LegacyCollectionIndexManager(self._database, name, self)


class LegacyCollectionIndexManager(CollectionIndexManager):
    """
    Collection view over a `LegacyIndexManager`.

    Every operation is the database-level one applied to this namespace.
    """

    backend = IndexBackend.LEGACY

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        collection_name: str,
        legacy: LegacyIndexManager | None = None,
    ) -> None:
        super().__init__(database, collection_name)
        self._legacy = legacy or LegacyIndexManager(database)

    async def list(self) -> List[IndexSpec]:
        namespace = self.namespace
        return [
            ns_index.index
            for ns_index in await self._legacy.list()
            if ns_index.namespace == namespace
        ]

    async def ensure(self, index: IndexSpec) -> bool:
        return await self._legacy.ensure(NamespacedIndex(self.namespace, index))

    async def create(self, index: IndexSpec) -> WriteOutcome:
        return await self._legacy.create(NamespacedIndex(self.namespace, index))

    async def drop_index(self, index_name: str) -> int:
        return await self._legacy.drop_index(self.collection_name, index_name)

    async def drop_all(self) -> int:
        return await self._legacy.drop_all(self.collection_name)
