"""Failure side of a token exchange.

A failed exchange is exactly one of two variants:

* :class:`RemoteError`: the server answered and refused, with a parseable
  JSON error body.
* :class:`LocalError`: anything else (network failure, timeout, malformed
  body, or a success body that is not a valid token).

Callers branch on the variant, typically with ``match``::

    match result.failure_value:
        case RemoteError(code=401):
            reauthenticate()
        case LocalError(cause):
            schedule_retry(cause)
"""

from __future__ import annotations

import dataclasses

from pydantic import BaseModel, ConfigDict


def _error_code(error: BaseException) -> object:
    for attr in ("errno", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return 0


def describe_error(error: BaseException | None) -> str:
    """Render *error* with its domain, code and message.

    The domain is the exception's qualified class name; the code is its
    ``errno``, ``status`` or ``code`` attribute (``0`` when none is set).
    """
    if error is None:
        return "None"
    cls = type(error)
    domain = cls.__qualname__ if cls.__module__ == "builtins" else f"{cls.__module__}.{cls.__qualname__}"
    return f'Error Domain={domain} Code={_error_code(error)} "{error}"'


class RemoteErrorDetail(BaseModel):
    """One entry of the token server's ``errors`` list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    location: str | None = None
    name: str | None = None
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class TokenServerError:
    """Base for the two failure variants."""

    @property
    def is_auth_failure(self) -> bool:
        """Whether the caller should re-authenticate before trying again."""
        return False


@dataclasses.dataclass(frozen=True)
class LocalError(TokenServerError):
    """The exchange failed without a structured server response.

    ``cause`` is the underlying exception, or ``None`` when the response
    arrived but did not validate.
    """

    cause: BaseException | None = None

    def __str__(self) -> str:
        return f"<TokenServerError.Local {describe_error(self.cause)}>"


@dataclasses.dataclass(frozen=True)
class RemoteError(TokenServerError):
    """The server refused the request.

    ``errors`` and ``retry_after`` are diagnostics copied from the
    response body and backoff headers; this client never acts on them.
    """

    code: int
    status: str | None = None
    remote_timestamp: int | None = None
    errors: tuple[RemoteErrorDetail, ...] = ()
    retry_after: int | None = None

    @property
    def is_auth_failure(self) -> bool:
        return self.code == 401

    def __str__(self) -> str:
        return f"<TokenServerError.Remote {self.code}: {self.status} ({self.remote_timestamp})>"
