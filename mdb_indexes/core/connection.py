"""
Connection management for MDB_INDEXES.

Opens the MongoDB connection, records the wire version negotiated with the
server and hands out index managers built for that version.

This module is part of MDB_INDEXES.
"""

import logging
import time

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, OperationFailure, ServerSelectionTimeoutError

from ..config import IndexSettings
from ..constants import APP_NAME, DEFAULT_MAX_IDLE_TIME_MS
from ..exceptions import InitializationError
from ..indexes import CollectionIndexManager, IndexBackend, IndexManager
from ..observability import get_logger as get_contextual_logger
from ..observability import record_operation, set_index_context
from .selector import BackendSelector, read_max_wire_version

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class ConnectionManager:
    """
    Manages the MongoDB connection and its negotiated metadata.

    The backend is selected once, at initialization; every manager handed
    out afterwards uses it.
    """

    def __init__(self, settings: IndexSettings) -> None:
        """
        Initialize the connection manager.

        Args:
            settings: Connection and backend settings
        """
        self.settings = settings
        self._selector = BackendSelector(settings)

        # Connection state
        self._mongo_client: AsyncIOMotorClient | None = None
        self._mongo_db: AsyncIOMotorDatabase | None = None
        self._max_wire_version: int | None = None
        self._backend: IndexBackend | None = None
        self._initialized: bool = False

    async def initialize(self) -> None:
        """
        Connect to MongoDB and read the server's maximum wire version.

        Raises:
            ConfigurationError: If mongo_uri or db_name is missing
            InitializationError: If the server cannot be reached
        """
        start_time = time.time()

        if self._initialized:
            logger.warning("ConnectionManager already initialized. Skipping re-initialization.")
            return

        self.settings.require_connection()

        contextual_logger.info(
            "Initializing MongoDB connection",
            extra={
                "db_name": self.settings.db_name,
                "max_pool_size": self.settings.max_pool_size,
                "min_pool_size": self.settings.min_pool_size,
            },
        )

        try:
            self._mongo_client = AsyncIOMotorClient(
                self.settings.mongo_uri,
                serverSelectionTimeoutMS=self.settings.server_selection_timeout_ms,
                appname=APP_NAME,
                maxPoolSize=self.settings.max_pool_size,
                minPoolSize=self.settings.min_pool_size,
                maxIdleTimeMS=DEFAULT_MAX_IDLE_TIME_MS,
            )

            hello = await self._mongo_client.admin.command("isMaster")
        except (ConnectionFailure, ServerSelectionTimeoutError, OperationFailure) as e:
            duration_ms = (time.time() - start_time) * 1000
            record_operation("connection.initialize", duration_ms, success=False)
            contextual_logger.critical(
                "MongoDB connection failed",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            if self._mongo_client is not None:
                self._mongo_client.close()
                self._mongo_client = None
            raise InitializationError(
                f"Failed to connect to MongoDB: {e}",
                db_name=self.settings.db_name,
                context={"error_type": type(e).__name__},
            ) from e

        self._mongo_db = self._mongo_client[self.settings.db_name]
        self._max_wire_version = read_max_wire_version(hello)
        self._backend = self._selector.select(self._max_wire_version)
        self._initialized = True
        set_index_context(db_name=self.settings.db_name, backend=self._backend.value)

        duration_ms = (time.time() - start_time) * 1000
        record_operation("connection.initialize", duration_ms, success=True)
        contextual_logger.info(
            "MongoDB connection initialized successfully",
            extra={
                "max_wire_version": self._max_wire_version,
                "duration_ms": round(duration_ms, 2),
            },
        )

    async def shutdown(self) -> None:
        """
        Close the MongoDB connection.

        This method is idempotent - it's safe to call multiple times.
        """
        if not self._initialized:
            return

        if self._mongo_client:
            self._mongo_client.close()
            contextual_logger.info("MongoDB connection closed.")

        self._initialized = False
        self._mongo_client = None
        self._mongo_db = None
        self._max_wire_version = None
        self._backend = None

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ConnectionManager not initialized. Call initialize() first.",
            )

    @property
    def mongo_client(self) -> AsyncIOMotorClient:
        self._require_initialized()
        return self._mongo_client

    @property
    def mongo_db(self) -> AsyncIOMotorDatabase:
        self._require_initialized()
        return self._mongo_db

    @property
    def max_wire_version(self) -> int | None:
        """Maximum wire version reported by the server, None if not reported."""
        self._require_initialized()
        return self._max_wire_version

    @property
    def backend(self) -> IndexBackend:
        self._require_initialized()
        return self._backend

    @property
    def initialized(self) -> bool:
        return self._initialized

    def index_manager(self) -> IndexManager:
        """Gets the indexes manager of the configured database."""
        self._require_initialized()
        return self._selector.index_manager(self._mongo_db, self._max_wire_version)

    def collection_index_manager(self, collection_name: str) -> CollectionIndexManager:
        """Gets the indexes manager of one collection of the configured database."""
        self._require_initialized()
        return self._selector.collection_index_manager(
            self._mongo_db, collection_name, self._max_wire_version
        )
