"""Command-line entry points: serve the API, run the MCP server, import datasets."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import uvicorn
from pymongo import MongoClient

from .config import DEFAULT_CONFIG_PATH, Settings, load_settings
from .errors import StoreFailure
from .importer import import_all
from .server import create_server
from .store import MongoStore, connect, ensure_collection, ensure_database, open_store
from .web import create_app

logger = logging.getLogger(__name__)


def _bootstrap(settings: Settings) -> tuple[MongoClient, MongoStore]:
    """Connect and make sure the database and every expected collection exist."""
    client = connect(settings.mongodb)
    database = ensure_database(client, settings.mongodb.database, settings.mongodb.collection)
    for name in settings.collection_names():
        ensure_collection(database, name)
    return client, open_store(client, settings.mongodb)


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    _, store = _bootstrap(settings)
    app = create_app(store, combine_text_and_category=settings.search.combine_text_and_category)
    logger.info("Server starting on %s:%d", settings.server.host, settings.server.port)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)
    return 0


def _mcp(settings: Settings, args: argparse.Namespace) -> int:
    _, store = _bootstrap(settings)
    create_server(store, combine_text_and_category=settings.search.combine_text_and_category).run()
    return 0


def _import(settings: Settings, args: argparse.Namespace) -> int:
    client = connect(settings.mongodb)
    results = import_all(client, settings, replace=args.replace)
    for collection, inserted in results.items():
        print(f"{collection}: {inserted} documents imported")
    return 0


def _check(settings: Settings, args: argparse.Namespace) -> int:
    client = connect(settings.mongodb)
    store = open_store(client, settings.mongodb)
    print(f"Connecting to MongoDB at {settings.mongodb.host}:{settings.mongodb.port}")
    print(f"Database: {settings.mongodb.database}")
    print(f"Collection: {settings.mongodb.collection}")
    try:
        names = store.collection_names()
        print("Available collections:")
        for name in names:
            print(f"- {name}")
        print(f"Documents in {store.name}: {store.count({})}")
    except StoreFailure as exc:
        logger.error("Connection check failed: %s", exc)
        return 1
    print("Connection test completed successfully!")
    return 0


COMMANDS = {
    "serve": _serve,
    "mcp": _mcp,
    "import": _import,
    "check": _check,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dexstore", description="Read-only Pokedex API over MongoDB.")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the YAML config file (default: {DEFAULT_CONFIG_PATH}).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("serve", help="Serve the HTTP API.")
    subparsers.add_parser("mcp", help="Run the MCP server over stdio.")
    import_parser = subparsers.add_parser("import", help="Import the configured JSON datasets.")
    import_parser.add_argument(
        "--replace",
        action="store_true",
        help="Clear each collection before importing instead of skipping populated ones.",
    )
    subparsers.add_parser("check", help="Print collections and document counts.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return COMMANDS[args.command](settings, args)


if __name__ == "__main__":
    raise SystemExit(main())
