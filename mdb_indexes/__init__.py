"""
MDB_INDEXES - MongoDB index management

Lists, ensures, creates and drops MongoDB indexes through one async
interface, backed either by `system.indexes` documents (legacy servers) or
by the index commands (MongoDB 3.0+), chosen from the server wire version.
"""

from .config import IndexSettings
from .core import (
    BackendSelector,
    ConnectionManager,
    collection_index_manager,
    get_collection_index_manager,
    get_index_manager,
    index_manager,
    select_backend,
)
from .exceptions import (
    ConfigurationError,
    EmptyKeyError,
    IndexDecodeError,
    InitializationError,
    MissingKeyFieldError,
    MissingNamespaceFieldError,
    MongoDBIndexError,
    UnsupportedIndexTypeError,
)
from .indexes import (
    CollectionIndexManager,
    IndexBackend,
    IndexKeyType,
    IndexManager,
    IndexSpec,
    NamespacedIndex,
)

__version__ = "0.1.0"

__all__ = [
    # Values
    "IndexKeyType",
    "IndexSpec",
    "NamespacedIndex",
    # Managers
    "IndexBackend",
    "IndexManager",
    "CollectionIndexManager",
    "BackendSelector",
    "select_backend",
    "index_manager",
    "collection_index_manager",
    "get_index_manager",
    "get_collection_index_manager",
    # Connection & config
    "ConnectionManager",
    "IndexSettings",
    # Errors
    "MongoDBIndexError",
    "EmptyKeyError",
    "IndexDecodeError",
    "MissingKeyFieldError",
    "MissingNamespaceFieldError",
    "UnsupportedIndexTypeError",
    "ConfigurationError",
    "InitializationError",
]
