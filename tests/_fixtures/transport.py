"""Test doubles for the generation endpoint."""

from __future__ import annotations

import asyncio
import json
from typing import Any, List, Optional

from fastwrite.transport import TransportResponse


def json_response(status: int, payload: Any) -> TransportResponse:
    return TransportResponse(status=status, body=json.dumps(payload).encode("utf-8"))


class FakeTransport:
    """Records outbound requests and replays a canned answer."""

    def __init__(
        self,
        response: Optional[TransportResponse] = None,
        *,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
    ) -> None:
        self.response = response or json_response(200, {"text_content": "# Doc"})
        self.error = error
        self.delay = delay
        self.calls: List[dict[str, Any]] = []
        self.cancelled = False

    async def post_json(self, url, payload, *, timeout, cancel):
        self.calls.append({"url": url, "payload": dict(payload), "timeout": timeout, "cancel": cancel})
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.response
