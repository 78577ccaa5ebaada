"""FastAPI routes for the Pokedex query API."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import pokemon
from .errors import InvalidArgument, NotFound, StoreFailure
from .stats import compute_stats
from .store import Store
from .types_listing import list_types

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class ApiError(Exception):
    """An error response with a fixed, client-safe message."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


DECODE_FAILURE = "Failed to decode Pokemon data"


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    """Replace store failures with a stable 500 message; details go to the log."""
    try:
        yield
    except StoreFailure as exc:
        if exc.operation == "decode":
            message = DECODE_FAILURE
        logger.exception("%s (%s)", message, exc.operation)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, message) from exc


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_combine(request: Request) -> bool:
    return request.app.state.combine_text_and_category


# --- Routes ---
# Fixed paths come before /pokemon/{pokemon_id} so they are not read as ids.


@router.get("/pokemon")
def get_all_pokemon(store: Store = Depends(get_store)) -> List[Dict[str, str]]:
    with _store_errors("Failed to fetch Pokemon"):
        records = pokemon.list_pokemon(store)
    return [record.to_wire() for record in records]


@router.get("/pokemon/search")
def search_pokemon(
    q: Optional[str] = None,
    pokemon_type: Optional[str] = Query(default=None, alias="type"),
    legendary: Optional[str] = None,
    store: Store = Depends(get_store),
    combine: bool = Depends(get_combine),
) -> List[Dict[str, str]]:
    with _store_errors("Failed to search Pokemon"):
        records = pokemon.search_pokemon(store, query=q, pokemon_type=pokemon_type, legendary=legendary, combine=combine)
    return [record.to_wire() for record in records]


@router.get("/pokemon/types")
def get_available_types(store: Store = Depends(get_store)) -> List[str]:
    with _store_errors("Failed to fetch types"):
        return list_types(store)


@router.get("/pokemon/legendary")
def get_legendary_pokemon(store: Store = Depends(get_store)) -> List[Dict[str, str]]:
    with _store_errors("Failed to fetch legendary Pokemon"):
        records = pokemon.list_legendary(store)
    return [record.to_wire() for record in records]


@router.get("/pokemon/stats")
def get_stats_summary(store: Store = Depends(get_store)) -> Dict[str, Any]:
    with _store_errors("Failed to compute Pokemon stats"):
        summary = compute_stats(store)
    return summary.model_dump(by_alias=True)


@router.get("/pokemon/name/{name}")
def get_pokemon_by_name(name: str, store: Store = Depends(get_store)) -> Dict[str, str]:
    with _store_errors("Failed to fetch Pokemon"):
        record = pokemon.get_pokemon_by_name(store, name)
    return record.to_wire()


@router.get("/pokemon/{pokemon_id}")
def get_pokemon_by_id(pokemon_id: str, store: Store = Depends(get_store)) -> Dict[str, str]:
    with _store_errors("Failed to fetch Pokemon"):
        record = pokemon.get_pokemon_by_id(store, pokemon_id)
    return record.to_wire()


# --- Error mapping ---


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _invalid_argument(request: Request, exc: InvalidArgument) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid Pokemon ID")


async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "Pokemon not found")


async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


def create_app(store: Store, combine_text_and_category: bool = False) -> FastAPI:
    """Build the API app around an already-connected store.

    Args:
        store: Store handle shared by every request.
        combine_text_and_category: Keep the text filter when search also gets a type.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(title="Dexstore API", description="Read-only Pokedex queries over MongoDB.")
    app.state.store = store
    app.state.combine_text_and_category = combine_text_and_category

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(InvalidArgument, _invalid_argument)
    app.add_exception_handler(NotFound, _not_found)
    app.add_exception_handler(ApiError, _api_error)
    app.include_router(router)

    @app.get("/health")
    def health_check() -> JSONResponse:
        try:
            store.find_one({})
        except StoreFailure:
            logger.exception("Health check failed")
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Database unreachable")
        return JSONResponse({"status": "ok"})

    return app
