"""Failure taxonomy for form validation and documentation submissions."""

from __future__ import annotations

from typing import ClassVar, Optional, Union


class StorageError(OSError):
    """Raised by storage backends when a read or write cannot complete."""


class SubmissionFault(RuntimeError):
    """Base class for every failure the submission flow can classify."""

    kind: ClassVar[str] = "fault"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SubmissionFault):
    """A precondition failed before any network activity."""

    kind = "validation"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class RateLimitError(SubmissionFault):
    """The generation endpoint answered with HTTP 429."""

    kind = "rate_limit"
    DEFAULT_MESSAGE = "Rate limit exceeded. Please try again later."

    def __init__(self, message: str = DEFAULT_MESSAGE) -> None:
        super().__init__(message)


class ServerError(SubmissionFault):
    """The generation endpoint answered with a non-success status."""

    kind = "server"

    def __init__(self, message: str, *, status: int) -> None:
        super().__init__(message)
        self.status = status


class RequestTimeoutError(SubmissionFault):
    """The request exceeded its time budget and was cancelled."""

    kind = "timeout"
    DEFAULT_MESSAGE = "Request timed out. The server might be overloaded."

    def __init__(self, message: str = DEFAULT_MESSAGE, *, timeout: float | None = None) -> None:
        super().__init__(message)
        self.timeout = timeout


class UnknownFault(SubmissionFault):
    """Any other failure raised while calling the endpoint or reading its answer."""

    kind = "unknown"
    DEFAULT_MESSAGE = "Unknown error"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UnknownFault":
        message = str(exc).strip() or cls.DEFAULT_MESSAGE
        fault = cls(message)
        fault.__cause__ = exc
        return fault


# Failures that reach the network layer and end in an error report.
NetworkFault = Union[RateLimitError, ServerError, RequestTimeoutError, UnknownFault]
AnyFault = Union[ValidationError, RateLimitError, ServerError, RequestTimeoutError, UnknownFault]


__all__ = [
    "AnyFault",
    "NetworkFault",
    "RateLimitError",
    "RequestTimeoutError",
    "ServerError",
    "StorageError",
    "SubmissionFault",
    "UnknownFault",
    "ValidationError",
]
