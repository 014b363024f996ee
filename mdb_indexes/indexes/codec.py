"""
Index document codec.

Maps `IndexSpec` / `NamespacedIndex` values to and from the BSON documents
stored in `system.indexes` and exchanged with the index commands.

Encoded layout (field order is significant):

    {"ns": ..., "name": ..., "key": {field: wire_value, ...},
     "background": true, "dropDups": true, "sparse": true, "unique": true,
     "v": ..., <extra options>}

Flags are only written when true. `ns` is only written for namespaced
indexes. Extra options never replace a named field.

This module is part of MDB_INDEXES.
"""

import math
from typing import Any, Mapping

from bson.son import SON

from ..constants import (
    FIELD_BACKGROUND,
    FIELD_DROP_DUPS,
    FIELD_KEY,
    FIELD_NAME,
    FIELD_NAMESPACE,
    FIELD_SPARSE,
    FIELD_UNIQUE,
    FIELD_VERSION,
    RESERVED_INDEX_FIELDS,
)
from ..exceptions import EmptyKeyError, MissingKeyFieldError, MissingNamespaceFieldError
from .types import IndexKeyType, IndexSpec, NamespacedIndex


def _get_bool(doc: Mapping[str, Any], field: str) -> bool:
    value = doc.get(field)
    return value if isinstance(value, bool) else False


def _get_string(doc: Mapping[str, Any], field: str) -> str | None:
    value = doc.get(field)
    return value if isinstance(value, str) else None


def _get_int(doc: Mapping[str, Any], field: str) -> int | None:
    value = doc.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _write_index_fields(doc: SON, index: IndexSpec) -> SON:
    doc[FIELD_NAME] = index.effective_name
    doc[FIELD_KEY] = SON(
        (field_name, key_type.wire_value) for field_name, key_type in index.key
    )

    if index.background:
        doc[FIELD_BACKGROUND] = True
    if index.drop_dups:
        doc[FIELD_DROP_DUPS] = True
    if index.sparse:
        doc[FIELD_SPARSE] = True
    if index.unique:
        doc[FIELD_UNIQUE] = True
    if index.format_version is not None:
        doc[FIELD_VERSION] = index.format_version

    for option, value in index.extra_options.items():
        if option in doc or option in RESERVED_INDEX_FIELDS:
            continue
        doc[option] = value

    return doc


def encode_index(index: IndexSpec) -> SON:
    """
    Encode an index without its namespace (the `createIndexes` form).

    Raises:
        EmptyKeyError: If the index has no key field
    """
    if not index.key:
        raise EmptyKeyError()
    return _write_index_fields(SON(), index)


def encode_namespaced_index(ns_index: NamespacedIndex) -> SON:
    """
    Encode a namespaced index (the `system.indexes` document form).

    Raises:
        EmptyKeyError: If the index has no key field
    """
    if not ns_index.index.key:
        raise EmptyKeyError(namespace=ns_index.namespace)
    return _write_index_fields(SON([(FIELD_NAMESPACE, ns_index.namespace)]), ns_index.index)


def decode_index(doc: Mapping[str, Any]) -> IndexSpec:
    """
    Decode an index document.

    Unknown fields are kept, in order, in `extra_options`. No name is made
    up when the document has none.

    Raises:
        MissingKeyFieldError: If `key` is absent or not a sub-document
        UnsupportedIndexTypeError: If a key value is not a known index type
    """
    key_doc = doc.get(FIELD_KEY)
    if not isinstance(key_doc, Mapping):
        raise MissingKeyFieldError(doc)

    key = tuple(
        (field_name, IndexKeyType.from_wire(value, field_name))
        for field_name, value in key_doc.items()
    )
    extra_options = {
        field: value for field, value in doc.items() if field not in RESERVED_INDEX_FIELDS
    }

    return IndexSpec(
        key=key,
        name=_get_string(doc, FIELD_NAME),
        unique=_get_bool(doc, FIELD_UNIQUE),
        background=_get_bool(doc, FIELD_BACKGROUND),
        drop_dups=_get_bool(doc, FIELD_DROP_DUPS),
        sparse=_get_bool(doc, FIELD_SPARSE),
        format_version=_get_int(doc, FIELD_VERSION),
        extra_options=extra_options,
    )


def decode_namespaced_index(doc: Mapping[str, Any]) -> NamespacedIndex:
    """
    Decode a `system.indexes` document.

    Raises:
        MissingNamespaceFieldError: If `ns` is absent or not a string
        MissingKeyFieldError: If `key` is absent or not a sub-document
        UnsupportedIndexTypeError: If a key value is not a known index type
    """
    namespace = _get_string(doc, FIELD_NAMESPACE)
    if namespace is None:
        raise MissingNamespaceFieldError(doc)
    return NamespacedIndex(namespace, decode_index(doc))
