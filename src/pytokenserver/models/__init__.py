"""Data models for token server exchanges."""

from pytokenserver.models.errors import (
    LocalError,
    RemoteError,
    RemoteErrorDetail,
    TokenServerError,
    describe_error,
)
from pytokenserver.models.result import Result
from pytokenserver.models.token import TokenServerToken

__all__ = [
    "LocalError",
    "RemoteError",
    "RemoteErrorDetail",
    "Result",
    "TokenServerError",
    "TokenServerToken",
    "describe_error",
]
