"""Token exchange request and response handling.

Endpoint:
  - ``POST <endpoint_url>`` with ``Authorization: BrowserID <assertion>``

The response is mapped to exactly one :class:`Result`:

* 2xx with a valid token body → success
* non-2xx with a JSON object body → :class:`RemoteError`
* anything else → :class:`LocalError`
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from pytokenserver._constants import (
    AUTHORIZATION_SCHEME,
    BACKOFF_HEADERS,
    CLIENT_STATE_HEADER,
    CONTENT_TYPE_JSON,
    TIMESTAMP_HEADER,
)
from pytokenserver._redact import redact_for_log
from pytokenserver._timestamps import coerce_timestamp_ms, decimal_seconds_to_ms
from pytokenserver._transport import RawResponse
from pytokenserver.config import TokenServerConfig
from pytokenserver.models.errors import LocalError, RemoteError, RemoteErrorDetail
from pytokenserver.models.result import Result
from pytokenserver.models.token import TokenServerToken

_logger = logging.getLogger(__name__)


def build_exchange_headers(
    config: TokenServerConfig,
    assertion: str,
    client_state: str | None = None,
) -> dict[str, str]:
    """Build the request headers for an exchange.

    The assertion is passed through untouched; validating it is the
    token server's job.
    """
    headers = {
        "Authorization": f"{AUTHORIZATION_SCHEME} {assertion}",
        "Accept": CONTENT_TYPE_JSON,
        "User-Agent": config.user_agent,
    }
    if client_state is not None:
        headers[CLIENT_STATE_HEADER] = client_state
    return headers


def _body_timestamp(body: Any) -> int | None:
    if not isinstance(body, dict):
        return None
    for key in ("remoteTimestamp", "timestamp"):
        if key in body:
            return coerce_timestamp_ms(body[key])
    return None


def _retry_after(response: RawResponse) -> int | None:
    for name in BACKOFF_HEADERS:
        value = response.header(name)
        if value is None:
            continue
        try:
            seconds = int(value.strip())
        except ValueError:
            # Retry-After may also be an HTTP date; only seconds are reported.
            continue
        if seconds >= 0:
            return seconds
    return None


def _error_details(body: Any) -> tuple[RemoteErrorDetail, ...]:
    raw_errors = body.get("errors") if isinstance(body, dict) else None
    if not isinstance(raw_errors, list):
        return ()
    details: list[RemoteErrorDetail] = []
    for entry in raw_errors:
        if not isinstance(entry, dict):
            continue
        try:
            details.append(RemoteErrorDetail.model_validate(entry))
        except ValidationError:
            _logger.debug("Skipping malformed error entry: %s", entry)
    return tuple(details)


def parse_remote_error(response: RawResponse, body: dict[str, Any], remote_timestamp: int | None) -> RemoteError:
    """Build a :class:`RemoteError` from a non-2xx JSON object response."""
    status = body.get("status")
    return RemoteError(
        code=response.status,
        status=status if isinstance(status, str) else None,
        remote_timestamp=remote_timestamp if remote_timestamp is not None else _body_timestamp(body),
        errors=_error_details(body),
        retry_after=_retry_after(response),
    )


def parse_token(body: Any, remote_timestamp: int | None) -> TokenServerToken | None:
    """Validate a 2xx body into a token, or return ``None`` if it does not fit."""
    if not isinstance(body, dict):
        _logger.warning("Token server success body is not an object: %s", type(body).__name__)
        return None

    if remote_timestamp is None:
        remote_timestamp = _body_timestamp(body)
    if remote_timestamp is None:
        _logger.warning("Token server response carries no usable timestamp")
        return None

    try:
        return TokenServerToken.model_validate({**body, "remoteTimestamp": remote_timestamp})
    except ValidationError as exc:
        _logger.warning(
            "Token server returned an invalid token: %s",
            [(".".join(str(p) for p in err["loc"]), err["msg"]) for err in exc.errors()],
        )
        return None


def parse_exchange_response(response: RawResponse) -> Result[TokenServerToken]:
    """Map one HTTP response to an exchange result."""
    remote_timestamp = decimal_seconds_to_ms(response.header(TIMESTAMP_HEADER))

    try:
        body = json.loads(response.text)
    except (ValueError, RecursionError) as exc:
        _logger.debug("HTTP %s body is not JSON: %s", response.status, response.text[:200])
        return Result.failure(LocalError(exc))

    _logger.debug("HTTP %s body parsed=%s", response.status, redact_for_log(body))

    if not response.ok:
        if not isinstance(body, dict):
            _logger.warning("HTTP %s error body is not an object: %s", response.status, type(body).__name__)
            return Result.failure(LocalError())
        return Result.failure(parse_remote_error(response, body, remote_timestamp))

    token = parse_token(body, remote_timestamp)
    if token is None:
        return Result.failure(LocalError())
    return Result.success(token)
