"""Custom exception hierarchy for pytokenserver.

Exchange outcomes are never raised; they are delivered as
:class:`~pytokenserver.models.Result` values.  The exceptions here cover
misuse and configuration problems, plus the explicit
:meth:`Result.unwrap` escape hatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pytokenserver.models.errors import TokenServerError


class TokenServerClientError(Exception):
    """Base exception for all pytokenserver errors."""


class TokenServerConfigError(TokenServerClientError):
    """Invalid or missing configuration."""


class TokenServerExchangeError(TokenServerClientError):
    """A failed exchange result was unwrapped.

    The original :class:`TokenServerError` is available as ``error`` so
    callers can still branch on the local/remote variant.
    """

    def __init__(self, error: TokenServerError) -> None:
        self.error = error
        super().__init__(str(error))
