"""High-level async client for the token server."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pytokenserver._api.exchange import build_exchange_headers, parse_exchange_response
from pytokenserver._transport import AiohttpTransport, Transport
from pytokenserver.audience import get_audience
from pytokenserver.config import TokenServerConfig
from pytokenserver.exceptions import TokenServerClientError
from pytokenserver.models.errors import LocalError
from pytokenserver.models.result import Result
from pytokenserver.models.token import TokenServerToken

_logger = logging.getLogger(__name__)

ResultCallback = Callable[[Result[TokenServerToken]], None]


class TokenServerClient:
    """Async client exchanging BrowserID assertions for sync tokens.

    Usage::

        async with TokenServerClient() as client:
            result = await client.exchange(assertion)
            if result.is_success:
                token = result.success_value

    Every exchange issues exactly one request and yields exactly one
    :class:`Result`; failures are never raised.  Retrying is left to the
    caller, which usually re-authenticates on ``RemoteError(code=401)``
    and treats anything else as transient.

    A ``transport`` may be injected instead of an HTTP session, in which
    case the client can be used without ``async with``.
    """

    def __init__(
        self,
        config: TokenServerConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or TokenServerConfig()
        self._audience = get_audience(self._config.endpoint_url)
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._background_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TokenServerClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = AiohttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._external_transport:
            return
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Exchange
    # ------------------------------------------------------------------

    @property
    def config(self) -> TokenServerConfig:
        return self._config

    @property
    def audience(self) -> str:
        """Audience assertions for this client's endpoint must be issued for."""
        return self._audience

    async def exchange(
        self,
        assertion: str,
        *,
        client_state: str | None = None,
    ) -> Result[TokenServerToken]:
        """Trade *assertion* for a token.

        Parameters
        ----------
        assertion : str
            Signed BrowserID assertion issued for :attr:`audience`.
        client_state : str or None
            Hex digest of the current sync keys, sent as ``X-Client-State``.

        Returns
        -------
        Result[TokenServerToken]
            The token, or a :class:`LocalError` / :class:`RemoteError`.
        """
        transport = self._require_transport()
        url = self._config.endpoint_url
        headers = build_exchange_headers(self._config, assertion, client_state)

        _logger.debug("Exchanging assertion at %s (audience %s)", url, self._audience)
        try:
            response = await transport.post(url, headers)
        except Exception as exc:  # noqa: BLE001
            _logger.debug("Token exchange request to %s failed: %r", url, exc)
            return Result.failure(LocalError(exc))

        try:
            result = parse_exchange_response(response)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Unparseable token server response (HTTP %s)", response.status, exc_info=True)
            return Result.failure(LocalError(exc))

        if result.failure_value is not None:
            _logger.debug("Token exchange failed: %s", result.failure_value)
        return result

    async def token(
        self,
        assertion: str,
        *,
        client_state: str | None = None,
    ) -> Result[TokenServerToken]:
        """Alias of :meth:`exchange`."""
        return await self.exchange(assertion, client_state=client_state)

    def exchange_in_background(
        self,
        assertion: str,
        on_result: ResultCallback,
        *,
        client_state: str | None = None,
    ) -> asyncio.Task[None]:
        """Schedule an exchange and hand its result to *on_result*.

        *on_result* is called exactly once, from the running event loop,
        after the call site has returned.  It is not called if the
        returned task is cancelled first.
        """
        task = asyncio.get_running_loop().create_task(
            self._exchange_and_deliver(assertion, on_result, client_state),
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _exchange_and_deliver(
        self,
        assertion: str,
        on_result: ResultCallback,
        client_state: str | None,
    ) -> None:
        try:
            result = await self.exchange(assertion, client_state=client_state)
        except Exception as exc:  # noqa: BLE001
            result = Result.failure(LocalError(exc))
        on_result(result)

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise TokenServerClientError("Client not initialized. Use 'async with TokenServerClient(...) as client:'")
        return self._transport
