"""
Helper functions for index management.

This module contains shared utility functions for turning PyMongo-style
index arguments into `IndexSpec` fields and for comparing index keys.
"""

from typing import Any, Iterable, Mapping, Sequence, Union

from pymongo import ASCENDING

from ..constants import (
    FIELD_BACKGROUND,
    FIELD_DROP_DUPS,
    FIELD_NAME,
    FIELD_SPARSE,
    FIELD_UNIQUE,
    FIELD_VERSION,
)

# Keyword (python or wire spelling) -> IndexSpec attribute
_NAMED_OPTIONS: dict[str, str] = {
    FIELD_NAME: "name",
    FIELD_UNIQUE: "unique",
    FIELD_BACKGROUND: "background",
    FIELD_SPARSE: "sparse",
    FIELD_DROP_DUPS: "drop_dups",
    "drop_dups": "drop_dups",
    FIELD_VERSION: "format_version",
    "format_version": "format_version",
}


def normalize_keys(
    keys: Union[str, Mapping[str, Any], Iterable[tuple[str, Any]]],
) -> list[tuple[str, Any]]:
    """
    Normalize index keys to a consistent format.

    Args:
        keys: A field name, a mapping or a list of (field, direction) pairs

    Returns:
        List of (field_name, direction) tuples, in the given order
    """
    if isinstance(keys, str):
        return [(keys, ASCENDING)]
    if isinstance(keys, Mapping):
        return [(k, v) for k, v in keys.items()]
    return [(k, v) for k, v in keys]


def split_index_options(options: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Split index options into named IndexSpec fields and extra options.

    Args:
        options: Keyword options as accepted by `create_index`

    Returns:
        Tuple of (named_fields, extra_options)
    """
    named: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for option, value in options.items():
        attribute = _NAMED_OPTIONS.get(option)
        if attribute is None:
            extra[option] = value
        else:
            named[attribute] = value
    return named, extra


def keys_match(left: Sequence[tuple[str, Any]], right: Sequence[tuple[str, Any]]) -> bool:
    """
    Check whether two index keys are the same ordered sequence of pairs.

    Names, flags and options are not part of the comparison.
    """
    return tuple(left) == tuple(right)

