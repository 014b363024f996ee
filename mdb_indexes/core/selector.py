"""
Backend selection.

The index backend is chosen once, when a manager is built, from the
maximum wire version negotiated with the server: servers speaking the
index commands get the modern backend, older servers (or servers that did
not report a version) get the legacy one.

This module is part of MDB_INDEXES.
"""

import logging
from typing import Any, Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config import IndexSettings
from ..constants import BACKEND_LEGACY, BACKEND_MODERN
from ..indexes import (
    CollectionIndexManager,
    IndexBackend,
    IndexManager,
    LegacyCollectionIndexManager,
    LegacyIndexManager,
    ModernCollectionIndexManager,
    ModernIndexManager,
)

logger = logging.getLogger(__name__)


def read_max_wire_version(hello_reply: Mapping[str, Any]) -> int | None:
    """Extract `maxWireVersion` from a handshake reply, None when not reported."""
    value = hello_reply.get("maxWireVersion")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return int(value)


async def fetch_max_wire_version(database: AsyncIOMotorDatabase) -> int | None:
    """
    Ask the server for its maximum wire version.

    Uses `isMaster`, which every server generation understands. Network
    and command failures propagate.
    """
    reply = await database.command("isMaster")
    return read_max_wire_version(reply)


class BackendSelector:
    """
    Picks the index backend for a connection.

    An explicit `backend` setting ("legacy" or "modern") wins; with "auto"
    the wire version decides.
    """

    def __init__(self, settings: IndexSettings | None = None) -> None:
        self._settings = settings or IndexSettings()

    @property
    def settings(self) -> IndexSettings:
        return self._settings

    def select(self, max_wire_version: int | None) -> IndexBackend:
        """
        Select the backend for the given wire version.

        Args:
            max_wire_version: Negotiated maximum wire version, None if unknown

        Returns:
            IndexBackend.MODERN when the version supports index commands,
            IndexBackend.LEGACY otherwise (including an unknown version)
        """
        if self._settings.backend == BACKEND_LEGACY:
            return IndexBackend.LEGACY
        if self._settings.backend == BACKEND_MODERN:
            return IndexBackend.MODERN

        if max_wire_version is None:
            logger.debug("Server wire version unknown; using the legacy index backend.")
            return IndexBackend.LEGACY
        if max_wire_version >= self._settings.command_indexes_min_wire_version:
            return IndexBackend.MODERN
        return IndexBackend.LEGACY

    def index_manager(
        self, database: AsyncIOMotorDatabase, max_wire_version: int | None
    ) -> IndexManager:
        """Build the database-level manager matching the wire version."""
        if self.select(max_wire_version) is IndexBackend.MODERN:
            return ModernIndexManager(database)
        return LegacyIndexManager(database)

    def collection_index_manager(
        self,
        database: AsyncIOMotorDatabase,
        collection_name: str,
        max_wire_version: int | None,
    ) -> CollectionIndexManager:
        """Build the collection-level manager matching the wire version."""
        if self.select(max_wire_version) is IndexBackend.MODERN:
            return ModernCollectionIndexManager(database, collection_name)
        return LegacyCollectionIndexManager(database, collection_name)


def select_backend(
    max_wire_version: int | None, settings: IndexSettings | None = None
) -> IndexBackend:
    return BackendSelector(settings).select(max_wire_version)


def index_manager(
    database: AsyncIOMotorDatabase,
    max_wire_version: int | None = None,
    settings: IndexSettings | None = None,
) -> IndexManager:
    """Returns an indexes manager for the given database."""
    return BackendSelector(settings).index_manager(database, max_wire_version)


def collection_index_manager(
    database: AsyncIOMotorDatabase,
    collection_name: str,
    max_wire_version: int | None = None,
    settings: IndexSettings | None = None,
) -> CollectionIndexManager:
    """Returns an indexes manager for the given collection."""
    return BackendSelector(settings).collection_index_manager(
        database, collection_name, max_wire_version
    )


async def get_index_manager(
    database: AsyncIOMotorDatabase, settings: IndexSettings | None = None
) -> IndexManager:
    """Returns an indexes manager for the given database, probing its wire version."""
    selector = BackendSelector(settings)
    max_wire_version = None
    if selector.settings.backend not in (BACKEND_LEGACY, BACKEND_MODERN):
        max_wire_version = await fetch_max_wire_version(database)
    return selector.index_manager(database, max_wire_version)


async def get_collection_index_manager(
    database: AsyncIOMotorDatabase,
    collection_name: str,
    settings: IndexSettings | None = None,
) -> CollectionIndexManager:
    """Returns an indexes manager for the given collection, probing its wire version."""
    selector = BackendSelector(settings)
    max_wire_version = None
    if selector.settings.backend not in (BACKEND_LEGACY, BACKEND_MODERN):
        max_wire_version = await fetch_max_wire_version(database)
    return selector.collection_index_manager(database, collection_name, max_wire_version)
