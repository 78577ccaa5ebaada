"""Tests for the dexstore command-line entry points."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from conftest import StubStore

import dexstore.cli as cli
from dexstore.errors import StoreFailure

CONFIG = """
mongodb:
  host: mongo
  database: PokeDex
  collection: kanto_pokemons
server:
  port: 8181
"""


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "env.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def stub_bootstrap(monkeypatch: pytest.MonkeyPatch, store: StubStore) -> StubStore:
    monkeypatch.setattr(cli, "_bootstrap", lambda settings: (object(), store))
    return store


def test_serve_runs_uvicorn_with_app(config_path: Path, stub_bootstrap, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_run(app, host: str, port: int) -> None:
        seen.update(app=app, host=host, port=port)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    assert cli.main(["--config", str(config_path), "serve"]) == 0
    assert seen["port"] == 8181
    assert seen["app"].state.store is stub_bootstrap


def test_mcp_runs_fastmcp(config_path: Path, stub_bootstrap, monkeypatch: pytest.MonkeyPatch) -> None:
    called = {"run": False}

    def fake_run(self) -> None:
        called["run"] = True

    # Patch the FastMCP.run method to avoid launching a live server.
    monkeypatch.setattr("mcp.server.fastmcp.FastMCP.run", fake_run)
    assert cli.main(["--config", str(config_path), "mcp"]) == 0
    assert called["run"]


def test_import_passes_replace_flag(config_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    seen = {}

    def fake_import_all(client, settings, replace=False):
        seen["replace"] = replace
        return {"kanto_pokemons": 151}

    monkeypatch.setattr(cli, "connect", lambda settings: object())
    monkeypatch.setattr(cli, "import_all", fake_import_all)
    assert cli.main(["--config", str(config_path), "import", "--replace"]) == 0
    assert seen["replace"] is True
    assert "kanto_pokemons: 151 documents imported" in capsys.readouterr().out


def test_check_reports_collections(
    config_path: Path, monkeypatch: pytest.MonkeyPatch, capsys, kanto_documents
) -> None:
    """Print collections and the served collection's document count."""
    store = StubStore(kanto_documents)
    store.name = "kanto_pokemons"
    store.collection_names = lambda: ["kanto_pokemons", "johto_pokemons"]
    monkeypatch.setattr(cli, "connect", lambda settings: object())
    monkeypatch.setattr(cli, "open_store", lambda client, settings: store)

    assert cli.main(["--config", str(config_path), "check"]) == 0
    out = capsys.readouterr().out
    assert "- johto_pokemons" in out
    assert "Documents in kanto_pokemons: 7" in out


def test_check_fails_when_store_unreachable(config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def unreachable():
        raise StoreFailure("list_collection_names", "no servers")

    store = SimpleNamespace(name="kanto_pokemons", collection_names=unreachable)
    monkeypatch.setattr(cli, "connect", lambda settings: object())
    monkeypatch.setattr(cli, "open_store", lambda client, settings: store)
    assert cli.main(["--config", str(config_path), "check"]) == 1


def test_bootstrap_ensures_every_collection(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    ensured = []
    monkeypatch.setattr(cli, "connect", lambda settings: "client")
    monkeypatch.setattr(cli, "ensure_database", lambda client, name, collection: "db")
    monkeypatch.setattr(cli, "ensure_collection", lambda database, name: ensured.append(name))
    monkeypatch.setattr(cli, "open_store", lambda client, settings: "store")

    settings = cli.load_settings(config_path)
    assert cli._bootstrap(settings) == ("client", "store")
    assert ensured == ["kanto_pokemons", "johto_pokemons"]
