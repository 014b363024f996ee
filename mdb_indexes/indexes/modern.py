"""
Command based index managers.

For MongoDB 3.0 and later, where indexes are managed with the
`listIndexes`, `createIndexes` and `dropIndexes` commands. The database
manager delegates every operation to per-collection managers; its `list`
walks the collections one after the other.

This module is part of MDB_INDEXES.
"""

import logging
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import OperationFailure

from ..constants import DROP_ALL_INDEXES, NAMESPACE_NOT_FOUND_CODE
from ..observability import timed_index_operation
from .base import CollectionIndexManager, IndexBackend, IndexManager, dropped_count
from .codec import decode_index, encode_index
from .helpers import keys_match
from .types import IndexSpec, NamespacedIndex, WriteOutcome

logger = logging.getLogger(__name__)


class ModernIndexManager(IndexManager):
    """Manages the indexes of a MongoDB 3.x+ database."""

    backend = IndexBackend.MODERN

    @timed_index_operation("indexes.list")
    async def list(self) -> List[NamespacedIndex]:
        """
        Lists the indexes of every collection, in collection-name order.

        A failure on any collection fails the whole listing.
        """
        collection_names = await self._database.list_collection_names()
        indexes: List[NamespacedIndex] = []
        for collection_name in collection_names:
            collection_indexes = await self.on_collection(collection_name).list()
            indexes.extend(
                NamespacedIndex.for_collection(self.db_name, collection_name, index)
                for index in collection_indexes
            )
        return indexes

    async def ensure(self, ns_index: NamespacedIndex) -> bool:
        return await self.on_collection(ns_index.collection_name).ensure(ns_index.index)

    async def create(self, ns_index: NamespacedIndex) -> WriteOutcome:
        return await self.on_collection(ns_index.collection_name).create(ns_index.index)

    async def drop_index(self, collection_name: str, index_name: str) -> int:
        return await self.on_collection(collection_name).drop_index(index_name)

    async def drop_all(self, collection_name: str) -> int:
        return await self.on_collection(collection_name).drop_all()

    def on_collection(self, name: str) -> "ModernCollectionIndexManager":
        return ModernCollectionIndexManager(self._database, name)


class ModernCollectionIndexManager(CollectionIndexManager):
    """Manages the indexes of one collection with index commands."""

    backend = IndexBackend.MODERN

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str) -> None:
        super().__init__(database, collection_name)
        self._collection = database[collection_name]

    @timed_index_operation("indexes.list")
    async def list(self) -> List[IndexSpec]:
        """
        Lists the indexes of this collection with `listIndexes`.

        A collection (or database) that does not exist has no indexes.

        Raises:
            IndexDecodeError: If any index document is malformed
        """
        try:
            docs = await self._collection.list_indexes().to_list(None)
        except OperationFailure as e:
            if e.code == NAMESPACE_NOT_FOUND_CODE:
                logger.debug(f"Namespace '{self.namespace}' not found; no indexes.")
                return []
            raise
        return [decode_index(doc) for doc in docs]

    @timed_index_operation("indexes.ensure")
    async def ensure(self, index: IndexSpec) -> bool:
        existing = await self.list()
        if any(keys_match(current.key, index.key) for current in existing):
            logger.debug(
                f"An index on {[field for field, _ in index.key]} already exists on "
                f"'{self.namespace}'."
            )
            return False

        await self.create(index)
        return True

    @timed_index_operation("indexes.create")
    async def create(self, index: IndexSpec) -> WriteOutcome:
        """
        Creates the index with `createIndexes`.

        Raises:
            EmptyKeyError: If the index has no key field (no command is sent)
        """
        doc = encode_index(index)
        reply = await self._database.command(
            "createIndexes", self.collection_name, indexes=[doc]
        )
        logger.info(f"Created index '{index.effective_name}' on '{self.namespace}'.")
        return reply

    @timed_index_operation("indexes.drop")
    async def drop_index(self, index_name: str) -> int:
        reply = await self._database.command(
            "dropIndexes", self.collection_name, index=index_name
        )
        logger.info(f"Dropped index '{index_name}' of '{self.namespace}'.")
        return dropped_count(reply)

    async def drop_all(self) -> int:
        return await self.drop_index(DROP_ALL_INDEXES)
