"""Tests for the form reducer and the session-backed form manager."""

from __future__ import annotations

import json

import pytest

from fastwrite.errors import StorageError, ValidationError
from fastwrite.form import (
    DEFAULT_SESSION_KEY,
    ArchiveCleared,
    ArchiveSelected,
    FieldChanged,
    FormStateManager,
    ProviderSelected,
    SectionToggled,
    apply_event,
    from_snapshot,
    is_zip_archive,
    to_snapshot,
)
from fastwrite.models import ArchiveHandle, FormState
from fastwrite.stores import MemoryStore


class BrokenStore:
    """Session storage that is unavailable."""

    def get_item(self, key: str):
        raise StorageError("storage unavailable")

    def set_item(self, key: str, value: str) -> None:
        raise StorageError("quota exceeded")

    def remove_item(self, key: str) -> None:
        raise StorageError("storage unavailable")


def test_apply_event_does_not_mutate_input() -> None:
    state = FormState()
    updated = apply_event(state, FieldChanged("description", "New"))

    assert state.description == ""
    assert updated.description == "New"


def test_section_toggle_keeps_order_and_ignores_duplicates() -> None:
    state = FormState(code_section_ids=())
    state = apply_event(state, SectionToggled("code", "api_endpoints", True))
    state = apply_event(state, SectionToggled("code", "code_overview", True))
    state = apply_event(state, SectionToggled("code", "api_endpoints", True))

    assert state.code_section_ids == ("api_endpoints", "code_overview")

    state = apply_event(state, SectionToggled("code", "api_endpoints", False))
    assert state.code_section_ids == ("code_overview",)


def test_report_section_toggle() -> None:
    state = apply_event(FormState(), SectionToggled("report", "abstract", False))

    assert "abstract" not in state.report_section_ids


def test_provider_selection_picks_first_model() -> None:
    state = apply_event(FormState(model_id="gemini-2.0-flash"), ProviderSelected("groq"))

    assert state.provider_id == "groq"
    assert state.model_id == "LLama-3-8B"


def test_unknown_provider_clears_model() -> None:
    state = apply_event(FormState(model_id="gemini-2.0-flash"), ProviderSelected("acme"))

    assert state.provider_id == "acme"
    assert state.model_id == ""


@pytest.mark.parametrize(
    "handle",
    [
        ArchiveHandle(name="project.zip"),
        ArchiveHandle(name="PROJECT.ZIP"),
        ArchiveHandle(name="upload", content_type="application/zip"),
    ],
)
def test_archive_selection_accepts_zip(handle: ArchiveHandle) -> None:
    state = apply_event(FormState(), ArchiveSelected(handle))

    assert state.archive == handle
    assert state.source_type == "archive"


def test_archive_selection_rejects_other_files() -> None:
    with pytest.raises(ValidationError, match="ZIP"):
        apply_event(FormState(), ArchiveSelected(ArchiveHandle(name="notes.tar.gz", content_type="application/gzip")))


def test_archive_cleared() -> None:
    state = FormState(source_type="archive", archive=ArchiveHandle(name="a.zip"))

    assert apply_event(state, ArchiveCleared()).archive is None


def test_is_zip_archive_checks_only_type_and_extension() -> None:
    assert is_zip_archive(ArchiveHandle(name="x.zip"))
    assert not is_zip_archive(ArchiveHandle(name="x.rar", content_type="application/x-rar"))


def test_field_changed_rejects_invalid_enums() -> None:
    with pytest.raises(ValidationError):
        apply_event(FormState(), FieldChanged("source_type", "ftp"))
    with pytest.raises(ValidationError):
        apply_event(FormState(), FieldChanged("literature_mode", "sometimes"))


def test_snapshot_round_trip() -> None:
    state = FormState(
        source_type="repository",
        repository_url="https://example.com/org/repo",
        description="desc",
        provider_id="openai",
        model_id="GPT-4o",
        code_section_ids=("code_overview", "api_endpoints"),
        report_section_ids=("literature_survey",),
        literature_mode="manual",
        manual_references="Ref 1",
    )

    restored = from_snapshot(json.loads(json.dumps(to_snapshot(state))))

    assert restored == state


def test_snapshot_excludes_archive_handle() -> None:
    state = FormState(source_type="archive", archive=ArchiveHandle(name="a.zip"))

    snapshot = to_snapshot(state)

    assert "archive" not in snapshot
    assert "a.zip" not in json.dumps(snapshot)
    assert snapshot["sourceType"] == "archive"
    assert from_snapshot(snapshot).archive is None


def test_partial_snapshot_applies_present_fields_only() -> None:
    restored = from_snapshot({"projectDescription": "Only this", "literatureSource": "bogus"})

    assert restored.description == "Only this"
    assert restored.literature_mode == "auto"
    assert restored.report_section_ids == FormState().report_section_ids


def test_manager_flushes_on_every_change(session_store: MemoryStore) -> None:
    manager = FormStateManager(session_store)
    manager.set("repository_url", "https://example.com/org/repo")
    manager.toggle_section("code", "code_overview")

    saved = json.loads(session_store.get_item(DEFAULT_SESSION_KEY))
    assert saved["repositoryUrl"] == "https://example.com/org/repo"
    assert saved["selectedCodeSections"] == ["code_overview"]


def test_manager_hydrates_from_session(session_store: MemoryStore) -> None:
    first = FormStateManager(session_store)
    first.update(description="Persisted", provider_id="groq", model_id="Mixtral-8x7B")

    second = FormStateManager(session_store)

    assert second.state.description == "Persisted"
    assert second.get("provider_id") == "groq"
    assert second.get("model_id") == "Mixtral-8x7B"


def test_manager_tolerates_malformed_snapshot(session_store: MemoryStore) -> None:
    session_store.set_item(DEFAULT_SESSION_KEY, "{not json")

    manager = FormStateManager(session_store)

    assert manager.state == FormState(model_id="gemini-2.0-flash")


def test_manager_survives_unavailable_storage(caplog: pytest.LogCaptureFixture) -> None:
    manager = FormStateManager(BrokenStore())

    state = manager.set("description", "still works")

    assert state.description == "still works"
    assert manager.state.description == "still works"
    assert "Error saving form data" in caplog.text


def test_manager_rejects_unknown_fields(session_store: MemoryStore) -> None:
    manager = FormStateManager(session_store)

    with pytest.raises(AttributeError):
        manager.set("colour", "blue")


def test_manager_notifies_listener_once_per_change(session_store: MemoryStore) -> None:
    seen = []
    manager = FormStateManager(session_store, on_change=seen.append)

    manager.set("description", "x")
    manager.set("description", "x")

    assert len(seen) == 1


def test_manager_reset(session_store: MemoryStore) -> None:
    manager = FormStateManager(session_store)
    manager.set("description", "x")

    manager.reset()

    assert manager.state.description == ""
    assert manager.state.model_id == "gemini-2.0-flash"
    assert session_store.get_item(DEFAULT_SESSION_KEY) is None


def test_manager_preselects_first_model(session_store: MemoryStore) -> None:
    manager = FormStateManager(session_store, initial=FormState(provider_id="openai"))

    assert manager.state.model_id == "GPT-4o"


def test_manager_keeps_saved_model(session_store: MemoryStore) -> None:
    FormStateManager(session_store).update(provider_id="openai", model_id="GPT-4-turbo")

    assert FormStateManager(session_store).state.model_id == "GPT-4-turbo"
