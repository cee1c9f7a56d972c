"""Logging utilities for fastwrite commands and the service."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "fastwrite"

CLI_FORMAT = "[fastwrite] %(levelname)s %(message)s"
# The service interleaves with uvicorn output, so lines carry a time and origin.
SERVICE_FORMAT = "%(asctime)s [fastwrite] %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the fastwrite hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None, service: bool = False
) -> logging.Logger:
    """Route fastwrite records to stderr and, optionally, a log file.

    CLI output on stdout stays clean for piping ``fastwrite result`` or
    ``fastwrite preview``; ``service=True`` switches to timestamped lines.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(SERVICE_FORMAT if service else CLI_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["CLI_FORMAT", "SERVICE_FORMAT", "configure_logging", "get_logger"]
