"""Key/value storage backends behind credentials, session snapshots and results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Protocol

from ..errors import StorageError
from ..logging import get_logger

_STORE_VERSION = 1


class KeyValueStore(Protocol):
    """String-to-string storage in the shape of browser local/session storage."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def keys(self) -> list[str]:
        return sorted(self._items)


class JsonFileStore:
    """Write-through store persisted as a single JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._items: Dict[str, str] = {}
        self.logger = get_logger("stores")
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._commit({**self._items, key: value})

    def remove_item(self, key: str) -> None:
        if key in self._items:
            self._commit({k: v for k, v in self._items.items() if k != key})

    def clear(self) -> None:
        self._commit({})

    def keys(self) -> list[str]:
        return sorted(self._items)

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self) -> None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable store %s: %s", self._path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            self.logger.warning("Ignoring store %s with unexpected layout", self._path)
            return
        items = data.get("items")
        if not isinstance(items, dict):
            return
        self._items = {
            key: value
            for key, value in items.items()
            if isinstance(key, str) and isinstance(value, str)
        }

    def _commit(self, items: Dict[str, str]) -> None:
        # Memory only changes once the file write has succeeded.
        self._persist(items)
        self._items = items

    def _persist(self, items: Dict[str, str]) -> None:
        payload = {"version": _STORE_VERSION, "items": items}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
            )
        except OSError as exc:
            raise StorageError(f"Unable to write {self._path}: {exc}") from exc


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore"]
