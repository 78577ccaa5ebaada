import re
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pytest

from dexstore.errors import StoreFailure
from dexstore.server import DexContext


def _record(
    dex: str,
    name: str,
    type_01: str,
    type_02: str = "",
    legendary: str = "False",
    hp: str = "45",
) -> Dict[str, str]:
    return {
        "dex_number": dex,
        "name": name,
        "type_01": type_01,
        "type_02": type_02,
        "ability_01": "Overgrow",
        "ability_02": "",
        "hidden_ability": "Chlorophyll",
        "is_legendary": legendary,
        "bio": f"{name} entry.",
        "hp": hp,
        "attack": "49",
        "defense": "49",
        "sp_attack": "65",
        "sp_defense": "65",
        "speed": "45",
    }


KANTO = [
    _record("#001", "Bulbasaur", "Grass", "Poison"),
    _record("#004", "Charmander", "Fire", hp="39"),
    _record("#006", "Charizard", "Fire", "Flying", hp="78"),
    _record("#007", "Squirtle", "Water", hp="44"),
    _record("#025", "Pikachu", "Electric", hp="35"),
    _record("#144", "Articuno", "Ice", "Flying", legendary="True", hp="90"),
    _record("#150", "Mewtwo", "Psychic", legendary="True", hp="106"),
]


def _matches(document: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    """Evaluate the subset of the MongoDB query language the helpers emit."""
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(document, clause) for clause in condition):
                return False
            continue
        if key == "$and":
            if not all(_matches(document, clause) for clause in condition):
                return False
            continue
        value = document.get(key)
        if isinstance(condition, dict):
            if "$regex" in condition:
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or not re.search(condition["$regex"], value, flags):
                    return False
            if "$ne" in condition and value == condition["$ne"]:
                return False
        elif value != condition:
            return False
    return True


class StubStore:
    """In-memory Store that records every call and can be told to fail."""

    def __init__(
        self,
        documents: Iterable[Dict[str, Any]],
        fail_on: Sequence[str] = (),
        aggregate_rows: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.documents = [dict(document) for document in documents]
        self.fail_on = set(fail_on)
        self.aggregate_rows = aggregate_rows
        self.calls: List[tuple] = []

    def _record_call(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise StoreFailure(operation, "stubbed failure")

    def find(self, filter: Mapping[str, Any]) -> List[Dict[str, Any]]:
        self._record_call("find", filter)
        return [dict(doc) for doc in self.documents if _matches(doc, filter)]

    def find_one(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        self._record_call("find_one", filter)
        for doc in self.documents:
            if _matches(doc, filter):
                return dict(doc)
        return None

    def count(self, filter: Mapping[str, Any]) -> int:
        self._record_call("count", filter)
        return sum(1 for doc in self.documents if _matches(doc, filter))

    def distinct(self, field: str, filter: Mapping[str, Any]) -> List[Any]:
        self._record_call("distinct", field, filter)
        values: List[Any] = []
        for doc in self.documents:
            if field in doc and _matches(doc, filter) and doc[field] not in values:
                values.append(doc[field])
        return values

    def aggregate(self, pipeline: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        self._record_call("aggregate", pipeline)
        if self.aggregate_rows is not None:
            return list(self.aggregate_rows)
        # Only the single $group stage used for the type distribution is supported.
        group_field = pipeline[0]["$group"]["_id"].lstrip("$")
        counts: Dict[Any, int] = {}
        for doc in self.documents:
            key = doc.get(group_field)
            counts[key] = counts.get(key, 0) + 1
        return [{"_id": key, "count": count} for key, count in counts.items()]


@pytest.fixture
def kanto_documents() -> List[Dict[str, str]]:
    return [dict(doc) for doc in KANTO]


@pytest.fixture
def store(kanto_documents: List[Dict[str, str]]) -> StubStore:
    return StubStore(kanto_documents)


@pytest.fixture
def make_ctx():
    """Build a stand-in for the FastMCP Context carrying a DexContext."""

    def _make(store: StubStore, combine: bool = False) -> SimpleNamespace:
        dex = DexContext(store=store, combine_text_and_category=combine)
        return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=dex))

    return _make


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep developer shells from leaking overrides into config tests.
    for name in ("MONGO_URI", "MONGO_DB", "MONGO_COLLECTION", "DEXSTORE_PORT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
