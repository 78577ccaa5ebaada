"""Load service settings from env.yaml with environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_CONFIG_PATH = Path("env.yaml")


class MongoSettings(BaseModel):
    """Connection parameters for the MongoDB deployment."""

    # YAML reads "pass: 123456" as an int; credentials are always strings.
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    uri: str = Field(default="", description="Full connection URI; wins over the parts below")
    user: str = ""
    password: str = Field(default="", alias="pass")
    host: str = "localhost"
    port: int = 27017
    database: str = "PokeDex"
    collection: str = "kanto_pokemons"
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    def connection_uri(self) -> str:
        """Return the URI handed to MongoClient."""
        if self.uri:
            return self.uri
        if self.user:
            credentials = f"{quote_plus(self.user)}:{quote_plus(self.password)}@"
        else:
            credentials = ""
        return f"mongodb://{credentials}{self.host}:{self.port}"


class DatasetSettings(BaseModel):
    """A JSON dataset and the collection it is imported into."""

    collection: str
    path: Path


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class SearchSettings(BaseModel):
    # Off by default: a type filter replaces the text filter when both are sent.
    combine_text_and_category: bool = False


class Settings(BaseModel):
    """Top-level service settings."""

    mongodb: MongoSettings = Field(default_factory=MongoSettings)
    datasets: List[DatasetSettings] = Field(
        default_factory=lambda: [
            DatasetSettings(
                collection="kanto_pokemons",
                path=Path("jsonImport/kanto/pokemon_kanto_dataset.json"),
            ),
            DatasetSettings(
                collection="johto_pokemons",
                path=Path("jsonImport/johto/pokemon_johto_dataset.json"),
            ),
        ]
    )
    server: ServerSettings = Field(default_factory=ServerSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    log_level: str = "INFO"

    def collection_names(self) -> List[str]:
        """Collections the service expects: the served one plus every dataset target."""
        names = [self.mongodb.collection]
        for dataset in self.datasets:
            if dataset.collection not in names:
                names.append(dataset.collection)
        return names


# Environment variable -> (section, key). Applied after the YAML is read.
ENV_OVERRIDES = {
    "MONGO_URI": ("mongodb", "uri"),
    "MONGO_DB": ("mongodb", "database"),
    "MONGO_COLLECTION": ("mongodb", "collection"),
    "DEXSTORE_PORT": ("server", "port"),
    "LOG_LEVEL": (None, "log_level"),
}


def _apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if not value:
            continue
        if section is None:
            raw[key] = value
        else:
            target = raw.get(section) or {}
            target[key] = value
            raw[section] = target
    return raw


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from YAML, then apply environment overrides.

    Args:
        path: Optional config file. Defaults to env.yaml in the working directory.

    Returns:
        Parsed settings.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the file is not a mapping or fails validation.
    """
    load_dotenv()
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {cfg_path}")

    # Relative dataset paths resolve against the config file's directory.
    for dataset in raw.get("datasets") or []:
        if isinstance(dataset, dict) and dataset.get("path"):
            dataset_path = Path(dataset["path"])
            if not dataset_path.is_absolute():
                dataset["path"] = cfg_path.parent / dataset_path

    try:
        return Settings.model_validate(_apply_env_overrides(raw))
    except ValidationError as exc:
        raise ValueError(f"Invalid config file {cfg_path}: {exc}") from exc
