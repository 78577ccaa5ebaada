"""Distinct type listing across both type slots."""

from __future__ import annotations

from typing import Any, Iterable, List, Set

from .filters import PRIMARY_TYPE_FIELD, SECONDARY_TYPE_FIELD
from .store import Store


def merge_distinct(first: Iterable[Any], second: Iterable[Any]) -> List[str]:
    """Merge two distinct() results into one ordered, de-duplicated list.

    Values keep the order they are first seen in `first` followed by
    `second`. Anything that is not a non-empty string is dropped.
    """
    seen: Set[str] = set()
    merged: List[str] = []
    for source in (first, second):
        for value in source:
            if not isinstance(value, str) or not value:
                continue
            if value in seen:
                continue
            seen.add(value)
            merged.append(value)
    return merged


def list_types(store: Store) -> List[str]:
    """Return every type used by a Pokemon in the store.

    Args:
        store: Store handle for the served collection.

    Returns:
        Primary types first, then secondary types not already listed.
    """
    primary = store.distinct(PRIMARY_TYPE_FIELD, {})
    secondary = store.distinct(SECONDARY_TYPE_FIELD, {SECONDARY_TYPE_FIELD: {"$ne": ""}})
    return merge_distinct(primary, secondary)
