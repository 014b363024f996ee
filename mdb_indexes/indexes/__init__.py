"""
Index Management Module

Index value types, their BSON codec and the legacy/modern index managers.

This module is part of MDB_INDEXES.
"""

from .base import CollectionIndexManager, IndexBackend, IndexManager
from .codec import (
    decode_index,
    decode_namespaced_index,
    encode_index,
    encode_namespaced_index,
)
from .helpers import keys_match, normalize_keys
from .legacy import LegacyCollectionIndexManager, LegacyIndexManager
from .modern import ModernCollectionIndexManager, ModernIndexManager
from .types import IndexKeyType, IndexSpec, NamespacedIndex, WriteOutcome

__all__ = [
    # Values
    "IndexKeyType",
    "IndexSpec",
    "NamespacedIndex",
    "WriteOutcome",
    # Codec
    "encode_index",
    "encode_namespaced_index",
    "decode_index",
    "decode_namespaced_index",
    # Helpers
    "keys_match",
    "normalize_keys",
    # Managers
    "IndexBackend",
    "IndexManager",
    "CollectionIndexManager",
    "LegacyIndexManager",
    "LegacyCollectionIndexManager",
    "ModernIndexManager",
    "ModernCollectionIndexManager",
]
