"""Per-provider secret storage."""

from __future__ import annotations

from typing import Optional

from ..errors import ValidationError
from ..logging import get_logger
from .backends import KeyValueStore

DEFAULT_NAMESPACE = "apiKey"


class CredentialStore:
    """Keeps one secret per provider under ``<namespace>:<provider_id>`` keys."""

    def __init__(self, backend: KeyValueStore, *, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._backend = backend
        self._namespace = namespace
        self.logger = get_logger("credentials")

    def key_for(self, provider_id: str) -> str:
        return f"{self._namespace}:{provider_id}"

    def get(self, provider_id: str) -> Optional[str]:
        try:
            secret = self._backend.get_item(self.key_for(provider_id))
        except OSError as exc:
            self.logger.error("Could not read the secret for %s: %s", provider_id, exc)
            return None
        return secret or None

    def set(self, provider_id: str, secret: str) -> None:
        if not secret or not secret.strip():
            raise ValidationError("Please enter a valid API key", field="secret")
        try:
            self._backend.set_item(self.key_for(provider_id), secret)
        except OSError as exc:
            self.logger.error("Could not save the secret for %s: %s", provider_id, exc)
            return
        self.logger.info("API key saved for %s", provider_id)

    def remove(self, provider_id: str) -> None:
        try:
            self._backend.remove_item(self.key_for(provider_id))
        except OSError as exc:
            self.logger.error("Could not remove the secret for %s: %s", provider_id, exc)

    def has(self, provider_id: str) -> bool:
        return self.get(provider_id) is not None


__all__ = ["CredentialStore", "DEFAULT_NAMESPACE"]
