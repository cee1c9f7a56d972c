"""Handoff of the latest documentation result to the results view."""

from __future__ import annotations

import json
from typing import Optional

from ..logging import get_logger
from ..models import DocumentationResult
from .backends import KeyValueStore

DEFAULT_RESULT_KEY = "documentationResult"


class ResultSink:
    """Stores the single most recent DocumentationResult, overwriting the previous one."""

    def __init__(self, backend: KeyValueStore, *, key: str = DEFAULT_RESULT_KEY) -> None:
        self._backend = backend
        self._key = key
        self.logger = get_logger("results")

    def store(self, result: DocumentationResult) -> None:
        try:
            self._backend.set_item(self._key, json.dumps(result.to_dict()))
        except OSError as exc:
            self.logger.error("Could not persist the documentation result: %s", exc)

    def load(self) -> Optional[DocumentationResult]:
        try:
            raw = self._backend.get_item(self._key)
        except OSError as exc:
            self.logger.error("Could not read the documentation result: %s", exc)
            return None
        if not raw:
            return None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            self.logger.warning("Discarding malformed documentation result")
            return None
        return DocumentationResult.from_dict(payload)


__all__ = ["DEFAULT_RESULT_KEY", "ResultSink"]
