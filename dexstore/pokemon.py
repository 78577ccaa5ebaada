"""Pokemon lookup helpers shared by the HTTP routes and MCP tools."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .errors import NotFound, StoreFailure
from .filters import build_filter, dex_filter, legendary_clause, name_filter
from .identifiers import resolve_identifier
from .models import FilterCriteria, PokemonRecord
from .store import Store


def _decode(document: Dict[str, Any]) -> PokemonRecord:
    try:
        return PokemonRecord.model_validate(document)
    except ValidationError as exc:
        # A stored document without the required fields is a data problem, not a caller one.
        raise StoreFailure("decode", str(exc)) from exc


def _decode_all(documents: Iterable[Dict[str, Any]]) -> List[PokemonRecord]:
    return [_decode(document) for document in documents]


def list_pokemon(store: Store) -> List[PokemonRecord]:
    """Return every Pokemon in the served collection."""
    return _decode_all(store.find({}))


def get_pokemon_by_id(store: Store, numeric_id: str) -> PokemonRecord:
    """Look up a Pokemon by national dex number.

    Args:
        store: Store handle for the served collection.
        numeric_id: Dex number as a decimal string (e.g., "25").

    Returns:
        The matching record.

    Raises:
        InvalidArgument: If the id is not a dex number.
        NotFound: If no Pokemon has that dex key.
    """
    document = store.find_one(dex_filter(resolve_identifier(numeric_id)))
    if document is None:
        raise NotFound(f"No Pokemon with id {numeric_id}")
    return _decode(document)


def get_pokemon_by_name(store: Store, name: str) -> PokemonRecord:
    """Look up a Pokemon by full name, ignoring case.

    Raises:
        NotFound: If no Pokemon has that name.
    """
    document = store.find_one(name_filter(name))
    if document is None:
        raise NotFound(f"No Pokemon named {name!r}")
    return _decode(document)


def search_pokemon(
    store: Store,
    query: Optional[str] = None,
    pokemon_type: Optional[str] = None,
    legendary: Optional[str] = None,
    combine: bool = False,
) -> List[PokemonRecord]:
    """Search by name/dex substring, type, and legendary flag.

    Args:
        store: Store handle for the served collection.
        query: Substring of the name or dex key.
        pokemon_type: Type name matched against either slot.
        legendary: "true" or "false"; other values are ignored.
        combine: Keep the text filter when a type is also given.

    Returns:
        Matching records in store order.
    """
    criteria = FilterCriteria(query=query, category=pokemon_type, special=legendary)
    return _decode_all(store.find(build_filter(criteria, combine=combine)))


def list_legendary(store: Store) -> List[PokemonRecord]:
    """Return every legendary Pokemon."""
    return _decode_all(store.find(legendary_clause("true")))
