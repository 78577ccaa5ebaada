"""MongoDB-backed store handle and connection bootstrap."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import MongoSettings
from .errors import StoreFailure

logger = logging.getLogger(__name__)

# Matches the ten second connect window the service has always used.
SERVER_SELECTION_TIMEOUT_MS = 10_000

Document = Dict[str, Any]


class Store(Protocol):
    """Read capability the query helpers depend on."""

    def find(self, filter: Mapping[str, Any]) -> List[Document]: ...

    def find_one(self, filter: Mapping[str, Any]) -> Optional[Document]: ...

    def count(self, filter: Mapping[str, Any]) -> int: ...

    def distinct(self, field: str, filter: Mapping[str, Any]) -> List[Any]: ...

    def aggregate(self, pipeline: Sequence[Mapping[str, Any]]) -> List[Document]: ...


class MongoStore:
    """Store implementation over a single pymongo collection.

    Every call runs inside pymongo.timeout when a deadline is configured, and
    any driver error is re-raised as StoreFailure naming the operation.
    """

    def __init__(self, collection: Collection, timeout: Optional[float] = None) -> None:
        self.collection = collection
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.collection.name

    @contextmanager
    def _call(self, operation: str) -> Iterator[None]:
        try:
            if self.timeout is None:
                yield
            else:
                with pymongo.timeout(self.timeout):
                    yield
        except PyMongoError as exc:
            raise StoreFailure(operation, str(exc)) from exc

    def find(self, filter: Mapping[str, Any]) -> List[Document]:
        with self._call("find"):
            return list(self.collection.find(filter, {"_id": 0}))

    def find_one(self, filter: Mapping[str, Any]) -> Optional[Document]:
        with self._call("find_one"):
            return self.collection.find_one(filter, {"_id": 0})

    def count(self, filter: Mapping[str, Any]) -> int:
        with self._call("count"):
            return self.collection.count_documents(filter)

    def distinct(self, field: str, filter: Mapping[str, Any]) -> List[Any]:
        with self._call("distinct"):
            return list(self.collection.distinct(field, filter))

    def aggregate(self, pipeline: Sequence[Mapping[str, Any]]) -> List[Document]:
        with self._call("aggregate"):
            return list(self.collection.aggregate(list(pipeline)))

    def collection_names(self) -> List[str]:
        with self._call("list_collection_names"):
            return self.collection.database.list_collection_names()


# --- Bootstrap ---


def connect(settings: MongoSettings) -> MongoClient:
    """Create the process-wide client; pymongo pools connections internally."""
    logger.info("Connecting to MongoDB at %s:%s", settings.host, settings.port)
    return MongoClient(
        settings.connection_uri(),
        serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
    )


def ensure_collection(database: Database, name: str) -> Collection:
    """Return the named collection, creating it when missing."""
    if name in database.list_collection_names():
        logger.info("Collection already exists: %s", name)
    else:
        logger.info("Creating collection: %s", name)
        database.create_collection(name)
    return database[name]


def ensure_database(client: MongoClient, name: str, collection: str) -> Database:
    """Make sure the database exists.

    MongoDB only materialises a database once it holds a collection, so a
    missing database is created by creating the service collection in it.
    """
    database = client[name]
    if name in client.list_database_names():
        logger.info("Database already exists: %s", name)
    else:
        logger.info("Creating database: %s", name)
        ensure_collection(database, collection)
    return database


def open_store(
    client: MongoClient,
    settings: MongoSettings,
    collection: Optional[str] = None,
) -> MongoStore:
    """Wrap the configured (or named) collection in a MongoStore."""
    database = client[settings.database]
    return MongoStore(database[collection or settings.collection], timeout=settings.timeout_seconds)
