"""HTTP transport for the generation endpoint."""

from __future__ import annotations

import asyncio
import json
import threading
from dataclasses import dataclass
from typing import Mapping, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .logging import get_logger

_CHUNK_SIZE = 64 * 1024


class RequestCancelled(Exception):
    """Raised inside the worker thread when the caller abandoned the request."""


@dataclass(frozen=True)
class TransportResponse:
    """Raw answer from the endpoint; classification happens in the orchestrator."""

    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> object:
        return json.loads(self.body.decode("utf-8"))


class Transport(Protocol):
    """Sends one JSON POST and returns the status/body, whatever the status."""

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        timeout: float,
        cancel: threading.Event,
    ) -> TransportResponse:
        ...


class UrllibTransport:
    """Runs a blocking ``urlopen`` call on the loop's default executor.

    ``cancel`` is checked between body chunks, so an abandoned request stops
    reading as soon as the caller signals it.
    """

    def __init__(self) -> None:
        self.logger = get_logger("transport")

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        timeout: float,
        cancel: threading.Event,
    ) -> TransportResponse:
        data = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._send, url, data, headers, timeout, cancel)

    def _send(
        self,
        url: str,
        data: bytes,
        headers: Mapping[str, str],
        timeout: float,
        cancel: threading.Event,
    ) -> TransportResponse:
        if cancel.is_set():
            raise RequestCancelled("Request cancelled before it was sent")
        http_request = Request(url, data=data, headers=dict(headers), method="POST")
        self.logger.debug("POST %s (%d bytes)", url, len(data))
        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                status = getattr(response, "status", 200)
                body = self._read_body(response, cancel)
        except HTTPError as exc:
            # Non-2xx answers still carry a body worth classifying.
            detail = exc.read() if hasattr(exc, "read") else b""
            return TransportResponse(status=exc.code, body=detail or b"")
        except URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                raise TimeoutError(f"Timed out connecting to {url}") from exc
            raise ConnectionError(f"Unable to reach {url}: {exc.reason}") from exc
        return TransportResponse(status=status, body=body)

    @staticmethod
    def _read_body(response: object, cancel: threading.Event) -> bytes:
        chunks: list[bytes] = []
        while True:
            if cancel.is_set():
                raise RequestCancelled("Request cancelled while reading the response")
            chunk = response.read(_CHUNK_SIZE)  # type: ignore[attr-defined]
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)


__all__ = ["RequestCancelled", "Transport", "TransportResponse", "UrllibTransport"]
