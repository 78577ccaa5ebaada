"""Expose FastMCP tools for Pokedex queries over the MongoDB store."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

from mcp.server.fastmcp import Context, FastMCP

from . import pokemon
from .models import PokemonRecord, StatsSummary
from .stats import compute_stats
from .store import Store
from .types_listing import list_types as _list_types

# Each tool below is registered on the server built by create_server and
# reads the store from the lifespan context.


@dataclass
class DexContext:
    """Per-server state handed to every tool call."""

    store: Store
    combine_text_and_category: bool = False


def _dex(ctx: Context) -> DexContext:
    return ctx.request_context.lifespan_context


def get_pokemon(pokemon_id: str, ctx: Context) -> PokemonRecord:
    """Fetch a Pokemon by national dex number.

    Args:
        pokemon_id: Dex number as a decimal string (e.g., "25").

    Returns:
        The stored Pokemon document.
    """
    return pokemon.get_pokemon_by_id(_dex(ctx).store, pokemon_id)


def get_pokemon_by_name(name: str, ctx: Context) -> PokemonRecord:
    """Fetch a Pokemon by name, ignoring case.

    Args:
        name: Full Pokemon name (e.g., "Pikachu").

    Returns:
        The stored Pokemon document.
    """
    return pokemon.get_pokemon_by_name(_dex(ctx).store, name)


def search_pokemon(
    ctx: Context,
    query: Optional[str] = None,
    pokemon_type: Optional[str] = None,
    legendary: Optional[str] = None,
) -> List[PokemonRecord]:
    """Search Pokemon by name or dex substring, type, and legendary status.

    Args:
        query: Substring of the name or dex key (e.g., "char", "#00").
        pokemon_type: Type name matched against either type slot.
        legendary: "true" or "false"; any other value is ignored.

    Returns:
        Matching Pokemon documents.
    """
    dex = _dex(ctx)
    return pokemon.search_pokemon(
        dex.store,
        query=query,
        pokemon_type=pokemon_type,
        legendary=legendary,
        combine=dex.combine_text_and_category,
    )


def list_types(ctx: Context) -> List[str]:
    """List every type used in the collection, primary types first."""
    return _list_types(_dex(ctx).store)


def list_legendary(ctx: Context) -> List[PokemonRecord]:
    """List every legendary Pokemon."""
    return pokemon.list_legendary(_dex(ctx).store)


def get_stats(ctx: Context) -> StatsSummary:
    """Summarize total, legendary, and per-primary-type counts."""
    return compute_stats(_dex(ctx).store)


TOOLS = (get_pokemon, get_pokemon_by_name, search_pokemon, list_types, list_legendary, get_stats)


def create_server(store: Store, combine_text_and_category: bool = False) -> FastMCP:
    """Create the FastMCP server instance with every Pokedex tool registered."""

    @asynccontextmanager
    async def lifespan(_: FastMCP) -> AsyncIterator[DexContext]:
        yield DexContext(store=store, combine_text_and_category=combine_text_and_category)

    server = FastMCP("Dexstore MCP Server", lifespan=lifespan)
    for tool in TOOLS:
        server.add_tool(tool)
    return server


if __name__ == "__main__":
    from dexstore.cli import main

    main(["mcp"])
