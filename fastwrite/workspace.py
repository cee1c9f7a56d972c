"""Wires configuration into the stores, form manager and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import FastWriteConfig
from .form import FormStateManager
from .orchestrator import Navigator, Notifier, SubmissionOrchestrator
from .stores import CredentialStore, JsonFileStore, KeyValueStore, ResultSink
from .transport import Transport


@dataclass
class Workspace:
    """Everything a surface needs to edit the form and submit it."""

    config: FastWriteConfig
    credentials: CredentialStore
    results: ResultSink
    form: FormStateManager
    orchestrator: SubmissionOrchestrator


def open_workspace(
    config: FastWriteConfig,
    *,
    durable: Optional[KeyValueStore] = None,
    session: Optional[KeyValueStore] = None,
    transport: Optional[Transport] = None,
    navigate: Optional[Navigator] = None,
    notify: Optional[Notifier] = None,
) -> Workspace:
    storage = config.storage
    durable_store = durable if durable is not None else JsonFileStore(storage.durable_path)
    session_store = session if session is not None else JsonFileStore(storage.session_path)

    credentials = CredentialStore(durable_store, namespace=storage.credential_namespace)
    results = ResultSink(durable_store, key=storage.result_key)
    form = FormStateManager(session_store, key=storage.session_key)
    orchestrator = SubmissionOrchestrator.from_config(
        config,
        credentials,
        results,
        transport=transport,
        navigate=navigate,
        notify=notify,
    )
    return Workspace(
        config=config,
        credentials=credentials,
        results=results,
        form=form,
        orchestrator=orchestrator,
    )


__all__ = ["Workspace", "open_workspace"]
