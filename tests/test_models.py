"""Tests for the Pokemon document model."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from dexstore.models import PokemonRecord


def test_record_round_trips_through_wire_format(kanto_documents) -> None:
    """Serialize a record to JSON and parse it back unchanged."""
    record = PokemonRecord.model_validate(kanto_documents[0])
    payload = json.dumps(record.to_wire())
    assert PokemonRecord.model_validate(json.loads(payload)) == record
    assert record.to_wire() == kanto_documents[0]


def test_record_keeps_string_values(kanto_documents) -> None:
    # Stats and the legendary flag are stored as strings and stay that way.
    record = PokemonRecord.model_validate(kanto_documents[-1])
    assert record.id_key == "#150"
    assert record.is_special == "True"
    assert record.hp == "106"
    assert record.secondary_category == ""


def test_record_ignores_unknown_fields(kanto_documents) -> None:
    document = {**kanto_documents[1], "_id": "64f0c0ffee", "generation": 1}
    record = PokemonRecord.model_validate(document)
    assert "_id" not in record.to_wire()


def test_record_requires_identity_fields() -> None:
    with pytest.raises(ValidationError):
        PokemonRecord.model_validate({"name": "Missingno"})


def test_record_is_immutable(kanto_documents) -> None:
    record = PokemonRecord.model_validate(kanto_documents[0])
    with pytest.raises(ValidationError):
        record.name = "Ivysaur"
