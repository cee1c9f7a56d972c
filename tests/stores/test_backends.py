"""Tests for the key/value storage backends."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fastwrite.errors import StorageError
from fastwrite.stores import JsonFileStore, MemoryStore


def test_memory_store_basic_operations() -> None:
    store = MemoryStore({"a": "1"})
    store.set_item("b", "2")
    store.remove_item("a")
    store.remove_item("missing")

    assert store.get_item("a") is None
    assert store.get_item("b") == "2"
    assert store.keys() == ["b"]


def test_json_file_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "state" / "storage.json"
    store = JsonFileStore(path)
    store.set_item("apiKey:google", "secret")
    store.set_item("documentationResult", '{"textContent": "x"}')

    reloaded = JsonFileStore(path)

    assert reloaded.get_item("apiKey:google") == "secret"
    assert reloaded.keys() == ["apiKey:google", "documentationResult"]


def test_json_file_store_remove_persists(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set_item("k", "v")
    store.remove_item("k")

    assert JsonFileStore(path).get_item("k") is None


def test_json_file_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")

    store = JsonFileStore(path)

    assert store.keys() == []


def test_json_file_store_ignores_unknown_layout(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"version": 99, "items": {"k": "v"}}), encoding="utf-8")

    assert JsonFileStore(path).get_item("k") is None


def test_json_file_store_drops_non_string_values(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"version": 1, "items": {"k": "v", "n": 3}}), encoding="utf-8")

    store = JsonFileStore(path)

    assert store.get_item("k") == "v"
    assert store.get_item("n") is None


def test_json_file_store_write_failure_raises_storage_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "storage.json")

    with pytest.raises(StorageError):
        store.set_item("k", "v")


def test_json_file_store_failed_write_leaves_items_unchanged(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "storage.json")

    with pytest.raises(StorageError):
        store.set_item("k", "v")

    assert store.get_item("k") is None
    assert store.keys() == []
