"""Translate search inputs into MongoDB filter documents."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from .models import FilterCriteria

# Stored field names (see PokemonRecord aliases).
DEX_FIELD = "dex_number"
NAME_FIELD = "name"
PRIMARY_TYPE_FIELD = "type_01"
SECONDARY_TYPE_FIELD = "type_02"
LEGENDARY_FIELD = "is_legendary"

# Query-string flag -> stored literal. Anything else applies no constraint.
LEGENDARY_FLAGS = {"true": "True", "false": "False"}

Filter = Dict[str, Any]


def _regex(pattern: str) -> Dict[str, str]:
    """Return a case-insensitive $regex clause."""
    return {"$regex": pattern, "$options": "i"}


def _contains(value: str) -> Dict[str, str]:
    return _regex(re.escape(value))


def _exactly(value: str) -> Dict[str, str]:
    return _regex(f"^{re.escape(value)}$")


def text_clause(query: str) -> Filter:
    """Match a substring of the name or the dex key."""
    return {
        "$or": [
            {NAME_FIELD: _contains(query)},
            {DEX_FIELD: _contains(query)},
        ]
    }


def type_clause(category: str) -> Filter:
    """Match either type slot exactly, ignoring case."""
    return {
        "$or": [
            {PRIMARY_TYPE_FIELD: _exactly(category)},
            {SECONDARY_TYPE_FIELD: _exactly(category)},
        ]
    }


def legendary_clause(special: Optional[str]) -> Filter:
    """Return the legendary constraint for a 'true'/'false' flag, or {}."""
    literal = LEGENDARY_FLAGS.get(special) if special else None
    if literal is None:
        return {}
    return {LEGENDARY_FIELD: literal}


def build_filter(
    criteria: Optional[FilterCriteria] = None,
    *,
    query: Optional[str] = None,
    category: Optional[str] = None,
    special: Optional[str] = None,
    combine: bool = False,
) -> Filter:
    """Compose a single filter document from optional search inputs.

    Inputs may come as a FilterCriteria or as keyword arguments; keywords
    fill in whatever the criteria object leaves unset. Empty values are
    skipped, so no inputs at all yields {} (match everything).

    The text and type clauses are both written under "$or". By default the
    type clause replaces the text clause when both are given, which is how
    the public search endpoint has always behaved. Pass combine=True to keep
    both under "$and" instead.

    Args:
        criteria: Optional pre-built search inputs.
        query: Substring matched against name or dex key.
        category: Type name matched against either type slot.
        special: "true"/"false" legendary flag; other values are ignored.
        combine: Keep the text clause alongside the type clause.

    Returns:
        A filter document accepted by Collection.find.
    """
    if criteria is not None:
        query = query or criteria.query
        category = category or criteria.category
        special = special or criteria.special

    result: Filter = {}

    if query:
        result.update(text_clause(query))

    if category:
        if combine and "$or" in result:
            text = {"$or": result.pop("$or")}
            result["$and"] = [text, type_clause(category)]
        else:
            result.update(type_clause(category))

    result.update(legendary_clause(special))
    return result


def name_filter(name: str) -> Filter:
    """Match one Pokemon by full name, ignoring case."""
    return {NAME_FIELD: _exactly(name)}


def dex_filter(id_key: str) -> Filter:
    """Match one Pokemon by its stored dex key."""
    return {DEX_FIELD: id_key}
