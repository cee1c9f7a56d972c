"""Configuration loading for fastwrite (.fastwrite.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".fastwrite.yml"
DEFAULT_ENDPOINT = "https://fastwrite-api.onrender.com/generate"
DEFAULT_REQUEST_TIMEOUT = 30.0

ENV_ENDPOINT = "FASTWRITE_ENDPOINT"
ENV_REQUEST_TIMEOUT = "FASTWRITE_REQUEST_TIMEOUT"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class StorageConfig:
    """Where credentials, the session snapshot and results are kept."""

    state_dir: Path = field(default_factory=lambda: Path("~/.fastwrite").expanduser())
    credential_namespace: str = "apiKey"
    session_key: str = "documentationFormData"
    result_key: str = "documentationResult"

    @property
    def durable_path(self) -> Path:
        return self.state_dir / "storage.json"

    @property
    def session_path(self) -> Path:
        return self.state_dir / "session.json"


@dataclass
class FastWriteConfig:
    """Represents the settings defined in .fastwrite.yml."""

    root: Path
    endpoint: str = DEFAULT_ENDPOINT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    storage: StorageConfig = field(default_factory=StorageConfig)


def load_config(
    config_path: Path | None = None, *, environ: Mapping[str, str] | None = None
) -> FastWriteConfig:
    """Load configuration from disk, then apply environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path or Path.cwd())
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = FastWriteConfig(root=root)

    endpoint = _as_str(data.get("endpoint"))
    if endpoint:
        config.endpoint = endpoint
    timeout = _as_float(data.get("request_timeout"))
    if timeout is not None:
        config.request_timeout = _positive_timeout(timeout)

    storage_data = _as_dict(data.get("storage"))
    if storage_data:
        state_dir = _as_str(storage_data.get("state_dir"))
        if state_dir:
            config.storage.state_dir = _resolve_dir(root, state_dir)
        for key in ("credential_namespace", "session_key", "result_key"):
            value = _as_str(storage_data.get(key))
            if value:
                setattr(config.storage, key, value)

    env_endpoint = env.get(ENV_ENDPOINT)
    if env_endpoint:
        config.endpoint = env_endpoint
    env_timeout = env.get(ENV_REQUEST_TIMEOUT)
    if env_timeout:
        parsed = _as_float(env_timeout)
        if parsed is None:
            raise ConfigError(f"{ENV_REQUEST_TIMEOUT} must be a number, got {env_timeout!r}")
        config.request_timeout = _positive_timeout(parsed)

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _resolve_dir(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path


def _positive_timeout(value: float) -> float:
    if value <= 0:
        raise ConfigError("request_timeout must be greater than zero")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_ENDPOINT",
    "DEFAULT_REQUEST_TIMEOUT",
    "FastWriteConfig",
    "StorageConfig",
    "load_config",
]
