"""pytokenserver - Async Python client for the sync token server."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytokenserver")
except PackageNotFoundError:
    __version__ = "0+local"
from pytokenserver.audience import get_audience
from pytokenserver.client import TokenServerClient
from pytokenserver.config import TokenServerConfig
from pytokenserver.exceptions import (
    TokenServerClientError,
    TokenServerConfigError,
    TokenServerExchangeError,
)
from pytokenserver.models import (
    LocalError,
    RemoteError,
    RemoteErrorDetail,
    Result,
    TokenServerError,
    TokenServerToken,
    describe_error,
)

__all__ = [
    "__version__",
    "LocalError",
    "RemoteError",
    "RemoteErrorDetail",
    "Result",
    "TokenServerClient",
    "TokenServerClientError",
    "TokenServerConfig",
    "TokenServerConfigError",
    "TokenServerError",
    "TokenServerExchangeError",
    "TokenServerToken",
    "describe_error",
    "get_audience",
]
