"""
Core components: connection handling and index backend selection.
"""

from .connection import ConnectionManager
from .selector import (
    BackendSelector,
    collection_index_manager,
    fetch_max_wire_version,
    get_collection_index_manager,
    get_index_manager,
    index_manager,
    read_max_wire_version,
    select_backend,
)

__all__ = [
    "ConnectionManager",
    "BackendSelector",
    "select_backend",
    "index_manager",
    "collection_index_manager",
    "get_index_manager",
    "get_collection_index_manager",
    "fetch_max_wire_version",
    "read_max_wire_version",
]
