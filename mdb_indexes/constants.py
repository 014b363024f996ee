"""
Constants for MDB_INDEXES.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# INDEX METADATA CONSTANTS
# ============================================================================

SYSTEM_INDEXES_COLLECTION: Final[str] = "system.indexes"
"""Reserved collection holding index metadata documents on legacy servers."""

DROP_ALL_INDEXES: Final[str] = "*"
"""Index name that asks dropIndexes to drop every index except `_id_`."""

NAMESPACE_SEPARATOR: Final[str] = "."
"""Separator between the database and collection parts of a namespace."""

INDEX_NAME_SEPARATOR: Final[str] = "_"
"""Separator used when deriving a default index name from its key."""

# Field names of an index document
FIELD_NAMESPACE: Final[str] = "ns"
FIELD_KEY: Final[str] = "key"
FIELD_NAME: Final[str] = "name"
FIELD_UNIQUE: Final[str] = "unique"
FIELD_BACKGROUND: Final[str] = "background"
FIELD_DROP_DUPS: Final[str] = "dropDups"
FIELD_SPARSE: Final[str] = "sparse"
FIELD_VERSION: Final[str] = "v"

RESERVED_INDEX_FIELDS: Final[frozenset[str]] = frozenset(
    {
        FIELD_NAMESPACE,
        FIELD_KEY,
        FIELD_NAME,
        FIELD_UNIQUE,
        FIELD_BACKGROUND,
        FIELD_DROP_DUPS,
        FIELD_SPARSE,
        FIELD_VERSION,
    }
)
"""Fields decoded into named IndexSpec attributes; everything else is an option."""

# ============================================================================
# SERVER CONSTANTS
# ============================================================================

NAMESPACE_NOT_FOUND_CODE: Final[int] = 26
"""Server error code returned by listIndexes for a missing database/collection."""

COMMAND_INDEXES_MIN_WIRE_VERSION: Final[int] = 3
"""First wire version (MongoDB 3.0) with listIndexes/createIndexes commands."""

BACKEND_AUTO: Final[str] = "auto"
BACKEND_LEGACY: Final[str] = "legacy"
BACKEND_MODERN: Final[str] = "modern"

# ============================================================================
# CONNECTION CONSTANTS
# ============================================================================

DEFAULT_MAX_POOL_SIZE: Final[int] = 10
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 1
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

APP_NAME: Final[str] = "MDB_INDEXES"
"""Application name reported to the server in the connection handshake."""

# ============================================================================
# METRICS CONSTANTS
# ============================================================================

MAX_METRICS: Final[int] = 10000
"""Maximum number of distinct metric series kept before LRU eviction."""
