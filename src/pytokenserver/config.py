"""Client configuration for pytokenserver."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from urllib.parse import urlsplit

from pytokenserver._constants import DEFAULT_ENDPOINT_URL, DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from pytokenserver.exceptions import TokenServerConfigError


@dataclasses.dataclass(frozen=True)
class TokenServerConfig:
    """Client configuration.

    Parameters
    ----------
    endpoint_url : str
        Absolute token server URL the assertion is posted to.  Defaults
        to the production Sync 1.5 token server.
    request_timeout : float
        Total seconds allowed for one exchange, connection included.
        A timeout is reported as a local error, never retried.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    endpoint_url: str = DEFAULT_ENDPOINT_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        parts = urlsplit(self.endpoint_url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise TokenServerConfigError(f"endpoint_url must be an absolute http(s) URL, got {self.endpoint_url!r}")
        if self.request_timeout <= 0:
            raise TokenServerConfigError(f"request_timeout must be positive, got {self.request_timeout!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> TokenServerConfig:
        """Create configuration from environment variables.

        Reads ``TOKENSERVER_URL``, ``TOKENSERVER_TIMEOUT`` and
        ``TOKENSERVER_USER_AGENT``.  Explicit keyword arguments override
        environment values.

        Raises
        ------
        TokenServerConfigError
            If a value is malformed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        url_env = env.get("TOKENSERVER_URL")
        if url_env is not None:
            config_kwargs["endpoint_url"] = url_env.strip()

        agent_env = env.get("TOKENSERVER_USER_AGENT")
        if agent_env is not None:
            config_kwargs["user_agent"] = agent_env

        # request_timeout is numeric, handle separately
        timeout_env = env.get("TOKENSERVER_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise TokenServerConfigError(f"TOKENSERVER_TIMEOUT is not a number: {timeout_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
