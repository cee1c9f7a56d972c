"""Persistence for credentials, results and the storage backends they share."""

from .backends import JsonFileStore, KeyValueStore, MemoryStore
from .credentials import CredentialStore
from .results import ResultSink

__all__ = ["CredentialStore", "JsonFileStore", "KeyValueStore", "MemoryStore", "ResultSink"]
