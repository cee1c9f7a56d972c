"""Tests for the per-provider credential store."""

from __future__ import annotations

from pathlib import Path

import pytest

from fastwrite.errors import StorageError, ValidationError
from fastwrite.stores import CredentialStore, JsonFileStore, MemoryStore


class FailingStore(MemoryStore):
    def set_item(self, key: str, value: str) -> None:
        raise StorageError("disk full")

    def get_item(self, key: str):
        raise StorageError("unreadable")


def test_credentials_are_namespaced_per_provider() -> None:
    backend = MemoryStore()
    store = CredentialStore(backend)
    store.set("google", "g-key")
    store.set("openai", "o-key")

    assert backend.get_item("apiKey:google") == "g-key"
    assert store.get("google") == "g-key"
    assert store.get("openai") == "o-key"
    assert store.get("groq") is None
    assert store.has("google")
    assert not store.has("groq")


def test_custom_namespace() -> None:
    backend = MemoryStore()
    CredentialStore(backend, namespace="secrets").set("groq", "k")

    assert backend.get_item("secrets:groq") == "k"


def test_set_replaces_previous_secret() -> None:
    store = CredentialStore(MemoryStore())
    store.set("google", "old")
    store.set("google", "new")

    assert store.get("google") == "new"


@pytest.mark.parametrize("secret", ["", "   ", "\n\t"])
def test_blank_secret_is_rejected(secret: str) -> None:
    store = CredentialStore(MemoryStore())

    with pytest.raises(ValidationError, match="valid API key"):
        store.set("google", secret)
    assert not store.has("google")


def test_remove() -> None:
    store = CredentialStore(MemoryStore())
    store.set("google", "k")
    store.remove("google")
    store.remove("google")

    assert store.get("google") is None


def test_storage_faults_are_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    store = CredentialStore(FailingStore())

    store.set("google", "k")

    assert store.get("google") is None
    assert "Could not save the secret for google" in caplog.text
    assert "k" not in [record.getMessage() for record in caplog.records]


def test_unsaved_secret_is_not_reported_as_present(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = CredentialStore(JsonFileStore(blocker / "storage.json"))

    store.set("google", "g-secret")

    assert not store.has("google")
