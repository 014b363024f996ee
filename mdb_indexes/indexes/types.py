"""
Index value types.

`IndexKeyType` enumerates the per-field index kinds and their wire values,
`IndexSpec` is the logical definition of an index (without its namespace)
and `NamespacedIndex` ties an `IndexSpec` to the collection it belongs to.

This module is part of MDB_INDEXES.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

import pymongo
from pymongo.results import InsertOneResult

from ..constants import INDEX_NAME_SEPARATOR, NAMESPACE_SEPARATOR
from ..exceptions import UnsupportedIndexTypeError

# PyMongo 4.x removed the GEOHAYSTACK constant.
GEOHAYSTACK = "geoHaystack"

WriteOutcome = Union[InsertOneResult, Mapping[str, Any]]
"""Acknowledgement of an index creation: an insert result or a command reply."""


class IndexKeyType(Enum):
    """Direction or special kind of one index field, valued by its wire form."""

    ASCENDING = pymongo.ASCENDING
    DESCENDING = pymongo.DESCENDING
    GEO2D = pymongo.GEO2D
    GEO2DSPHERE = pymongo.GEOSPHERE
    GEO_HAYSTACK = GEOHAYSTACK
    HASHED = pymongo.HASHED
    TEXT = pymongo.TEXT

    @property
    def wire_value(self) -> Union[int, str]:
        """Value stored under the field name in an index `key` document."""
        return self.value

    @property
    def value_str(self) -> str:
        """String form used when deriving a default index name."""
        return str(self.value)

    @classmethod
    def from_wire(cls, value: Any, field_name: str | None = None) -> "IndexKeyType":
        """
        Match a wire value to its index type.

        Numbers (int, Int64 or float) match by sign only: positive is
        ascending, negative is descending. Strings must match a special
        index kind exactly. Booleans are not numbers here.

        Raises:
            UnsupportedIndexTypeError: If the value matches no index type
        """
        if isinstance(value, bool):
            raise UnsupportedIndexTypeError(value, field_name)

        if isinstance(value, (int, float)):
            if value > 0:
                return cls.ASCENDING
            if value < 0:
                return cls.DESCENDING
            raise UnsupportedIndexTypeError(value, field_name)

        if isinstance(value, str):
            for member in cls:
                if isinstance(member.value, str) and member.value == value:
                    return member

        raise UnsupportedIndexTypeError(value, field_name)


def _coerce_key_type(value: Any, field_name: str) -> IndexKeyType:
    if isinstance(value, IndexKeyType):
        return value
    return IndexKeyType.from_wire(value, field_name)


@dataclass(frozen=True)
class IndexSpec:
    """
    A MongoDB index, excluding its namespace.

    Attributes:
        key: Ordered (field name, index type) pairs; order is the index
            column order. Raw wire values (1, -1, "2dsphere", ...) are
            accepted and converted.
        name: Explicit index name. When None a name is derived from the key.
        unique: Enforces uniqueness.
        background: Builds the index in the background.
        drop_dups: Deprecated since MongoDB 2.6, only carried through.
        sparse: Only indexes documents that have the indexed fields.
        format_version: Index format version (`v`); None lets the server decide.
        extra_options: Backend specific options (weights, bits,
            partialFilterExpression, ...), kept in order in a read-only
            mapping. Not part of the hash.
    """

    key: tuple[tuple[str, IndexKeyType], ...]
    name: str | None = None
    unique: bool = False
    background: bool = False
    drop_dups: bool = False
    sparse: bool = False
    format_version: int | None = None
    extra_options: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        key = tuple(
            (field_name, _coerce_key_type(key_type, field_name))
            for field_name, key_type in self.key
        )
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "extra_options", MappingProxyType(dict(self.extra_options)))

    @classmethod
    def from_keys(
        cls,
        keys: Union[str, Mapping[str, Any], Iterable[tuple[str, Any]]],
        **options: Any,
    ) -> "IndexSpec":
        """
        Build an index from PyMongo-style keys.

        Args:
            keys: A single field name (ascending), a mapping or a list of
                (field, direction) pairs
            **options: Named IndexSpec fields; anything else goes to
                extra_options

        Example:
            IndexSpec.from_keys([("a", 1), ("b", -1)], unique=True)
        """
        from .helpers import normalize_keys, split_index_options

        named, extra = split_index_options(options)
        return cls(key=tuple(normalize_keys(keys)), extra_options=extra, **named)

    @property
    def effective_name(self) -> str:
        """The explicit name, or `field_value` pairs joined by underscores."""
        if self.name is not None:
            return self.name
        return INDEX_NAME_SEPARATOR.join(
            f"{field_name}{INDEX_NAME_SEPARATOR}{key_type.value_str}"
            for field_name, key_type in self.key
        )


@dataclass(frozen=True)
class NamespacedIndex:
    """
    An index together with the fully qualified name of its collection.

    `namespace` is `<database>.<collection>`; the split happens at the first
    dot, so `"db.sub.coll"` is collection `"sub.coll"` of database `"db"`.
    """

    namespace: str
    index: IndexSpec

    @classmethod
    def for_collection(
        cls, db_name: str, collection_name: str, index: IndexSpec
    ) -> "NamespacedIndex":
        return cls(f"{db_name}{NAMESPACE_SEPARATOR}{collection_name}", index)

    @property
    def db_name(self) -> str:
        return self.namespace.partition(NAMESPACE_SEPARATOR)[0]

    @property
    def collection_name(self) -> str:
        return self.namespace.partition(NAMESPACE_SEPARATOR)[2]
