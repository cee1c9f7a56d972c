"""Form state: a pure reducer plus a manager that mirrors state into session storage."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Iterable, Literal, Optional, Tuple, Union

from .catalog import DEFAULT_CATALOG, ProviderCatalog
from .errors import ValidationError
from .logging import get_logger
from .models import (
    LITERATURE_MODES,
    SOURCE_ARCHIVE,
    SOURCE_TYPES,
    ArchiveHandle,
    FormState,
)
from .stores.backends import KeyValueStore

DEFAULT_SESSION_KEY = "documentationFormData"
ZIP_CONTENT_TYPES = frozenset({"application/zip", "application/x-zip-compressed"})

FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in fields(FormState))

# Snapshot key for every serializable field; the archive handle is never written.
_SNAPSHOT_KEYS: Dict[str, str] = {
    "source_type": "sourceType",
    "repository_url": "repositoryUrl",
    "description": "projectDescription",
    "provider_id": "selectedAiProvider",
    "model_id": "selectedAiModel",
    "code_section_ids": "selectedCodeSections",
    "report_section_ids": "selectedReportSections",
    "literature_mode": "literatureSource",
    "manual_references": "manualReferences",
}

SectionGroup = Literal["code", "report"]


@dataclass(frozen=True)
class FieldChanged:
    name: str
    value: Any


@dataclass(frozen=True)
class SectionToggled:
    group: SectionGroup
    section_id: str
    checked: bool


@dataclass(frozen=True)
class ProviderSelected:
    provider_id: str


@dataclass(frozen=True)
class ArchiveSelected:
    handle: ArchiveHandle


@dataclass(frozen=True)
class ArchiveCleared:
    pass


FormEvent = Union[FieldChanged, SectionToggled, ProviderSelected, ArchiveSelected, ArchiveCleared]


def is_zip_archive(handle: ArchiveHandle) -> bool:
    """Accept a handle by MIME type or ``.zip`` extension; contents are not inspected."""
    return handle.content_type in ZIP_CONTENT_TYPES or handle.name.lower().endswith(".zip")


def apply_event(
    state: FormState, event: FormEvent, *, catalog: ProviderCatalog = DEFAULT_CATALOG
) -> FormState:
    """Return the state that results from ``event``. Never mutates ``state``."""
    if isinstance(event, FieldChanged):
        return replace(state, **{event.name: _coerce_field(event.name, event.value)})
    if isinstance(event, SectionToggled):
        attr = _section_attr(event.group)
        current: Tuple[str, ...] = getattr(state, attr)
        if event.checked:
            updated = current if event.section_id in current else current + (event.section_id,)
        else:
            updated = tuple(section for section in current if section != event.section_id)
        return replace(state, **{attr: updated})
    if isinstance(event, ProviderSelected):
        return replace(
            state,
            provider_id=event.provider_id,
            model_id=catalog.default_model(event.provider_id),
        )
    if isinstance(event, ArchiveSelected):
        if not is_zip_archive(event.handle):
            raise ValidationError("Please upload a ZIP file.", field="archive")
        return replace(state, archive=event.handle, source_type=SOURCE_ARCHIVE)
    if isinstance(event, ArchiveCleared):
        return replace(state, archive=None)
    raise TypeError(f"Unsupported form event: {event!r}")


def to_snapshot(state: FormState) -> Dict[str, Any]:
    snapshot: Dict[str, Any] = {}
    for name, key in _SNAPSHOT_KEYS.items():
        value = getattr(state, name)
        snapshot[key] = list(value) if isinstance(value, tuple) else value
    return snapshot


def from_snapshot(snapshot: Any, base: FormState | None = None) -> FormState:
    """Apply every present, well-typed snapshot field on top of ``base``."""
    state = base or FormState()
    if not isinstance(snapshot, dict):
        return state
    changes: Dict[str, Any] = {}
    for name, key in _SNAPSHOT_KEYS.items():
        if key not in snapshot:
            continue
        try:
            changes[name] = _coerce_field(name, snapshot[key])
        except ValidationError:
            continue
    return replace(state, **changes)


class FormStateManager:
    """Holds the current FormState and flushes it to session storage on every change."""

    def __init__(
        self,
        session: KeyValueStore,
        *,
        key: str = DEFAULT_SESSION_KEY,
        catalog: ProviderCatalog = DEFAULT_CATALOG,
        initial: FormState | None = None,
        on_change: Optional[Callable[[FormState], None]] = None,
    ) -> None:
        self._session = session
        self._key = key
        self._catalog = catalog
        self._state = self._with_default_model(initial or FormState())
        self._on_change = on_change
        self.logger = get_logger("form")
        self.hydrate()

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def catalog(self) -> ProviderCatalog:
        return self._catalog

    def get(self, name: str) -> Any:
        if name not in FIELD_NAMES:
            raise AttributeError(f"FormState has no field {name!r}")
        return getattr(self._state, name)

    def set(self, name: str, value: Any) -> FormState:
        if name not in FIELD_NAMES:
            raise AttributeError(f"FormState has no field {name!r}")
        return self.dispatch(FieldChanged(name, value))

    def update(self, **changes: Any) -> FormState:
        state = self._state
        for name, value in changes.items():
            if name not in FIELD_NAMES:
                raise AttributeError(f"FormState has no field {name!r}")
            state = apply_event(state, FieldChanged(name, value), catalog=self._catalog)
        self._commit(state)
        return self._state

    def dispatch(self, event: FormEvent) -> FormState:
        self._commit(apply_event(self._state, event, catalog=self._catalog))
        return self._state

    def toggle_section(self, group: SectionGroup, section_id: str, checked: bool = True) -> FormState:
        return self.dispatch(SectionToggled(group, section_id, checked))

    def select_provider(self, provider_id: str) -> FormState:
        return self.dispatch(ProviderSelected(provider_id))

    def select_archive(self, handle: ArchiveHandle) -> FormState:
        return self.dispatch(ArchiveSelected(handle))

    def clear_archive(self) -> FormState:
        return self.dispatch(ArchiveCleared())

    def hydrate(self) -> FormState:
        try:
            raw = self._session.get_item(self._key)
        except OSError as exc:
            self.logger.error("Error loading saved form data: %s", exc)
            return self._state
        if not raw:
            return self._state
        try:
            snapshot = json.loads(raw)
        except json.JSONDecodeError as exc:
            self.logger.error("Error loading saved form data: %s", exc)
            return self._state
        self._state = self._with_default_model(from_snapshot(snapshot, self._state))
        self.logger.debug("Restored form state from session")
        return self._state

    def flush(self) -> None:
        try:
            self._session.set_item(self._key, json.dumps(to_snapshot(self._state)))
        except (OSError, TypeError, ValueError) as exc:
            self.logger.error("Error saving form data: %s", exc)

    def reset(self) -> FormState:
        try:
            self._session.remove_item(self._key)
        except OSError as exc:
            self.logger.error("Error clearing saved form data: %s", exc)
        self._state = self._with_default_model(FormState())
        return self._state

    def _with_default_model(self, state: FormState) -> FormState:
        # A provider with no model chosen starts on its first catalog model.
        if state.model_id or state.provider_id not in self._catalog:
            return state
        return replace(state, model_id=self._catalog.default_model(state.provider_id))

    def _commit(self, state: FormState) -> None:
        if state == self._state:
            return
        self._state = state
        self.flush()
        if self._on_change is not None:
            self._on_change(state)


def _section_attr(group: str) -> str:
    if group == "code":
        return "code_section_ids"
    if group == "report":
        return "report_section_ids"
    raise ValidationError(f"Unknown section group: {group}", field="group")


def _coerce_field(name: str, value: Any) -> Any:
    if name not in FIELD_NAMES:
        raise ValidationError(f"Unknown form field: {name}", field=name)
    if name == "source_type":
        if value not in SOURCE_TYPES:
            raise ValidationError(f"Unsupported source type: {value!r}", field=name)
        return value
    if name == "literature_mode":
        if value not in LITERATURE_MODES:
            raise ValidationError(f"Unsupported literature mode: {value!r}", field=name)
        return value
    if name in ("code_section_ids", "report_section_ids"):
        return _as_section_ids(name, value)
    if name == "archive":
        if value is None:
            return None
        if not isinstance(value, ArchiveHandle) or not is_zip_archive(value):
            raise ValidationError("Please upload a ZIP file.", field=name)
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", field=name)
    return value


def _as_section_ids(name: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValidationError(f"{name} must be a list of section ids", field=name)
    ordered: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(f"{name} must contain only strings", field=name)
        if item not in ordered:
            ordered.append(item)
    return tuple(ordered)


__all__ = [
    "ArchiveCleared",
    "ArchiveSelected",
    "DEFAULT_SESSION_KEY",
    "FieldChanged",
    "FormEvent",
    "FormStateManager",
    "ProviderSelected",
    "SectionToggled",
    "apply_event",
    "from_snapshot",
    "is_zip_archive",
    "to_snapshot",
]
