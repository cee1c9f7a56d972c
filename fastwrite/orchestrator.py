"""Validates a form, submits the generation request and persists a displayable result."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .config import DEFAULT_ENDPOINT, DEFAULT_REQUEST_TIMEOUT, FastWriteConfig
from .errors import (
    AnyFault,
    NetworkFault,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    UnknownFault,
    ValidationError,
)
from .failsafe import NO_TEXT_CONTENT, build_error_report, build_offline_document, describe_source
from .logging import get_logger
from .models import (
    NOT_APPLICABLE,
    SOURCE_ARCHIVE,
    SOURCE_REPOSITORY,
    DocumentationResult,
    FormState,
    SubmissionPayload,
)
from .prompting.builder import PromptCompiler
from .stores.credentials import CredentialStore
from .stores.results import ResultSink
from .transport import Transport, TransportResponse, UrllibTransport

RESULTS_ROUTE = "/results"

Navigator = Callable[[str], None]
Notifier = Callable[[str, str], None]


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FALLBACK_PRODUCED = "fallback_produced"
    FAILED = "failed"


@dataclass
class SubmissionOutcome:
    """What happened to one submit call."""

    state: SubmissionState
    result: Optional[DocumentationResult] = None
    fault: Optional[AnyFault] = None
    navigated: bool = False

    @property
    def kind(self) -> Optional[str]:
        """Fault tag (``rate_limit``, ``timeout``, ``server`` ...) or None on success."""
        return self.fault.kind if self.fault is not None else None

    @property
    def message(self) -> str:
        if self.fault is not None:
            return self.fault.message
        if self.state is SubmissionState.FALLBACK_PRODUCED:
            return "Documentation generated in offline mode"
        if self.state is SubmissionState.SUCCEEDED:
            return "Documentation generated successfully!"
        return ""


Classification = Tuple[SubmissionState, DocumentationResult, Optional[NetworkFault]]


def classify_response(response: TransportResponse, source_label: str) -> Classification:
    """Map an endpoint answer to a terminal state and the result to persist.

    Raises ``ValueError`` when a success status carries a body that is not JSON.
    """
    if response.status == 429:
        fault: NetworkFault = RateLimitError()
        return SubmissionState.FAILED, build_error_report(fault.message), fault
    if not response.ok:
        fault = ServerError(_server_error_message(response), status=response.status)
        return SubmissionState.FAILED, build_error_report(fault.message), fault

    try:
        payload = response.json()
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValueError("The server returned an invalid JSON response") from exc
    if not isinstance(payload, dict):
        payload = {}

    if not (payload.get("text_content") or payload.get("documentation")):
        return SubmissionState.FALLBACK_PRODUCED, build_offline_document(source_label), None
    text = _first_text(payload, "text_content", "documentation") or NO_TEXT_CONTENT
    visual = _first_text(payload, "visual_content", "diagram")
    return (
        SubmissionState.SUCCEEDED,
        DocumentationResult(text_content=text, visual_content=visual),
        None,
    )


def _first_text(payload: dict, primary: str, alternate: str) -> str:
    for key in (primary, alternate):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _server_error_message(response: TransportResponse) -> str:
    try:
        body = response.json()
    except (UnicodeDecodeError, ValueError):
        body = None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return f"Server error: {response.status}"


class SubmissionOrchestrator:
    """Runs the Idle → Validating → Submitting → terminal state machine.

    Once a request is sent, every outcome (success, offline fallback or
    failure) is stored in the result sink and navigation fires exactly once.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        results: ResultSink,
        *,
        transport: Transport | None = None,
        compiler: PromptCompiler | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        navigate: Navigator | None = None,
        notify: Notifier | None = None,
    ) -> None:
        self.credentials = credentials
        self.results = results
        self.transport = transport or UrllibTransport()
        self.compiler = compiler or PromptCompiler()
        self.endpoint = endpoint
        self.timeout = timeout
        self._navigate = navigate
        self._notify = notify
        self._state = SubmissionState.IDLE
        self._busy = False
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_config(
        cls,
        config: FastWriteConfig,
        credentials: CredentialStore,
        results: ResultSink,
        **kwargs: object,
    ) -> "SubmissionOrchestrator":
        return cls(
            credentials,
            results,
            endpoint=config.endpoint,
            timeout=config.request_timeout,
            **kwargs,  # type: ignore[arg-type]
        )

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    def validate(self, form: FormState) -> str:
        """Check submission preconditions in order and return the provider secret."""
        if form.source_type == SOURCE_REPOSITORY and not form.repository_url.strip():
            raise ValidationError("Please enter a GitHub repository URL", field="repository_url")
        if form.source_type == SOURCE_ARCHIVE and form.archive is None:
            raise ValidationError("Please upload a ZIP file", field="archive")
        if not form.has_sections:
            raise ValidationError("Please select at least one documentation section", field="sections")
        if not form.provider_id or not form.model_id:
            raise ValidationError("Please select both an AI provider and model", field="provider_id")
        secret = self.credentials.get(form.provider_id)
        if not secret:
            raise ValidationError(f"Please set an API key for {form.provider_id}", field="secret")
        return secret

    def build_payload(self, form: FormState, secret: str) -> SubmissionPayload:
        if form.source_type == SOURCE_ARCHIVE:
            archive_name = form.archive.name if form.archive is not None else ""
            repository_reference, secondary_reference = NOT_APPLICABLE, archive_name
        else:
            repository_reference, secondary_reference = form.repository_url.strip(), NOT_APPLICABLE
        return SubmissionPayload(
            repository_reference=repository_reference,
            secondary_reference=secondary_reference,
            provider_id=form.provider_id,
            model_id=form.model_id,
            secret=secret,
            prompt=self.compiler.compile(form),
        )

    async def submit(self, form: FormState) -> SubmissionOutcome:
        if self._busy:
            fault = ValidationError("A documentation request is already in progress", field="submit")
            self._emit("error", fault.message)
            return SubmissionOutcome(state=SubmissionState.REJECTED, fault=fault)

        self._state = SubmissionState.VALIDATING
        try:
            secret = self.validate(form)
        except ValidationError as exc:
            self._state = SubmissionState.IDLE
            self.logger.info("Submission rejected: %s", exc.message)
            self._emit("error", exc.message)
            return SubmissionOutcome(state=SubmissionState.REJECTED, fault=exc)

        self._busy = True
        self._state = SubmissionState.SUBMITTING
        try:
            state, result, fault = await self._execute(form, secret)
        finally:
            self._busy = False

        self._state = state
        self.results.store(result)
        if fault is not None:
            self.logger.error("Error submitting form: %s", fault.message)
            self._emit("error", fault.message)
        elif state is SubmissionState.FALLBACK_PRODUCED:
            self._emit("success", "Documentation generated in offline mode")
        else:
            self._emit("success", "Documentation generated successfully!")
        navigated = self._go_to_results()
        return SubmissionOutcome(state=state, result=result, fault=fault, navigated=navigated)

    async def _execute(self, form: FormState, secret: str) -> Classification:
        cancel = threading.Event()
        self.logger.info(
            "Submitting documentation request to %s (provider=%s, model=%s)",
            self.endpoint,
            form.provider_id,
            form.model_id,
        )
        try:
            payload = self.build_payload(form, secret)
            response = await asyncio.wait_for(
                self.transport.post_json(
                    self.endpoint, payload.to_json(), timeout=self.timeout, cancel=cancel
                ),
                timeout=self.timeout,
            )
            state, result, fault = classify_response(response, describe_source(form))
        except TimeoutError:
            cancel.set()
            fault = RequestTimeoutError(timeout=self.timeout)
            return SubmissionState.FAILED, build_error_report(fault.message), fault
        except asyncio.CancelledError:
            cancel.set()
            raise
        except Exception as exc:
            fault = UnknownFault.from_exception(exc)
            return SubmissionState.FAILED, build_error_report(fault.message), fault

        if state is SubmissionState.FALLBACK_PRODUCED:
            self.logger.warning("API returned success but no content, using fallback")
        return state, result, fault

    def _go_to_results(self) -> bool:
        if self._navigate is None:
            return False
        self._navigate(RESULTS_ROUTE)
        return True

    def _emit(self, level: str, message: str) -> None:
        if self._notify is not None:
            self._notify(level, message)


__all__ = [
    "RESULTS_ROUTE",
    "SubmissionOrchestrator",
    "SubmissionOutcome",
    "SubmissionState",
    "classify_response",
]
