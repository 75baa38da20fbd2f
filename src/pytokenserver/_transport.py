"""HTTP transport for token server requests."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Protocol

import aiohttp

from pytokenserver._redact import redact_for_log

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RawResponse:
    """Status, headers and decoded body of one HTTP response."""

    status: int
    headers: Mapping[str, str]
    text: str

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299


class Transport(Protocol):
    """Structural transport interface used by the client.

    Implementations raise on transport failure (connection errors,
    timeouts); any HTTP status, success or not, is returned as a
    :class:`RawResponse`.
    """

    async def post(self, url: str, headers: Mapping[str, str]) -> RawResponse:
        ...


class AiohttpTransport:
    """Transport backed by an :class:`aiohttp.ClientSession`."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def post(self, url: str, headers: Mapping[str, str]) -> RawResponse:
        _logger.debug("POST %s headers=%s", url, redact_for_log(headers))

        async with self._http.post(url, headers=dict(headers), timeout=self._timeout) as resp:
            text = await resp.text(errors="replace")
            response = RawResponse(status=resp.status, headers=dict(resp.headers), text=text)

        _logger.debug("HTTP %s from %s (%d bytes)", response.status, url, len(text))
        return response
