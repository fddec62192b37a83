"""Outbound chat webhook delivery with protocol-based swappable implementations.

Production code uses ``HttpNotifier`` which POSTs the rendered message to the
platform's webhook URL with ``httpx``. Tests use ``InMemoryNotifier`` which
records messages for assertion without any network access.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

_JSON_HEADERS = {"Content-Type": "application/json; charset=UTF-8"}


@dataclass(frozen=True)
class NotifierResponse:
    """HTTP status and decoded body returned by a chat webhook."""

    status_code: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Notifier(Protocol):
    """Protocol for delivering a rendered message to a webhook URL."""

    async def send(self, url: str, message: dict[str, Any]) -> NotifierResponse:
        """POST *message* as JSON to *url*.

        Raises ``httpx.HTTPError`` on timeouts and transport failures; non-2xx
        responses are returned, not raised.
        """
        ...


class HttpNotifier:
    """Production implementation backed by ``httpx.AsyncClient``.

    Each delivery gets its own client and timeout, so a slow platform never
    holds up another. ``transport`` lets tests inject ``httpx.MockTransport``.
    """

    def __init__(
        self,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def send(self, url: str, message: dict[str, Any]) -> NotifierResponse:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(url, json=message, headers=_JSON_HEADERS)
        try:
            data = resp.json()
        except ValueError:
            data = resp.text
        return NotifierResponse(status_code=resp.status_code, data=data)


class InMemoryNotifier:
    """Test double that records sent messages and returns a canned response."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.status_code: int = 200
        self.data: Any = {"errcode": 0, "errmsg": "ok"}

    async def send(self, url: str, message: dict[str, Any]) -> NotifierResponse:
        """Append the delivery and return the canned response."""
        self.sent.append({"url": url, "message": message})
        return NotifierResponse(status_code=self.status_code, data=self.data)
