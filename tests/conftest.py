from __future__ import annotations

import logging
from typing import Any, Callable

import pytest

from fastwrite.models import FormState
from fastwrite.orchestrator import SubmissionOrchestrator
from fastwrite.stores import CredentialStore, MemoryStore, ResultSink
from tests._fixtures.transport import FakeTransport


@pytest.fixture
def durable_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def credentials(durable_store: MemoryStore) -> CredentialStore:
    return CredentialStore(durable_store)


@pytest.fixture
def results(durable_store: MemoryStore) -> ResultSink:
    return ResultSink(durable_store)


@pytest.fixture
def ready_form() -> FormState:
    """A form that passes every submission precondition once a google key is stored."""
    return FormState(
        repository_url="https://example.com/org/repo",
        provider_id="google",
        model_id="gemini-2.0-flash",
        code_section_ids=("code_overview",),
        report_section_ids=("abstract",),
    )


@pytest.fixture
def make_orchestrator(
    credentials: CredentialStore, results: ResultSink
) -> Callable[..., SubmissionOrchestrator]:
    def _factory(transport: FakeTransport, **kwargs: Any) -> SubmissionOrchestrator:
        kwargs.setdefault("endpoint", "https://api.test/generate")
        return SubmissionOrchestrator(credentials, results, transport=transport, **kwargs)

    return _factory


@pytest.fixture(autouse=True)
def _reset_fastwrite_logger():
    yield
    logger = logging.getLogger("fastwrite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
