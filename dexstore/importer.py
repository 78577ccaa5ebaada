"""One-time import of the JSON datasets into MongoDB."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from pymongo import MongoClient
from pymongo.collection import Collection

from .config import Settings
from .store import ensure_collection, ensure_database

logger = logging.getLogger(__name__)


def load_dataset(path: Path) -> list:
    """Read a dataset file; it must hold a JSON array of documents.

    Raises:
        FileNotFoundError: If the dataset file doesn't exist.
        ValueError: If the file is not valid JSON or not an array.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            documents = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Dataset {path} is not valid JSON: {exc}") from exc
    if not isinstance(documents, list):
        raise ValueError(f"Dataset {path} must contain a JSON array")
    return documents


def import_dataset(collection: Collection, path: Path, replace: bool = False) -> int:
    """Import a dataset into a collection unless it already holds documents.

    Args:
        collection: Target collection.
        path: JSON array file to import.
        replace: Clear the collection first instead of skipping a populated one.

    Returns:
        Number of documents inserted (0 when skipped).
    """
    if not replace:
        existing = collection.count_documents({})
        if existing > 0:
            logger.info(
                "Collection '%s' already contains %d documents. Skipping import.",
                collection.name,
                existing,
            )
            return 0

    # Parse before clearing so a bad file never empties the collection.
    documents = load_dataset(path)
    if not documents:
        logger.warning("No documents found in %s", path)
        return 0

    if replace:
        deleted = collection.delete_many({}).deleted_count
        logger.info("Cleared %d documents from %s", deleted, collection.name)

    result = collection.insert_many(documents)
    inserted = len(result.inserted_ids)
    logger.info("Imported %d documents into %s", inserted, collection.name)
    return inserted


def import_all(client: MongoClient, settings: Settings, replace: bool = False) -> Dict[str, int]:
    """Import every configured dataset, creating database and collections as needed.

    Returns:
        Mapping of collection name to inserted document count.
    """
    database = ensure_database(client, settings.mongodb.database, settings.mongodb.collection)
    results: Dict[str, int] = {}
    for dataset in settings.datasets:
        collection = ensure_collection(database, dataset.collection)
        logger.info("Starting import of %s into %s", dataset.path, dataset.collection)
        results[dataset.collection] = results.get(dataset.collection, 0) + import_dataset(
            collection, dataset.path, replace=replace
        )
    return results
