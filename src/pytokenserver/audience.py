"""BrowserID audience derivation.

The token server checks that an assertion was issued for the origin it
received the request on.  The audience is ``scheme://host[:port]``; the
port appears exactly when the endpoint URL spells one out, even if it is
the scheme's default (``https://example.com:443`` is a different audience
from ``https://example.com``).
"""

from __future__ import annotations

from urllib.parse import urlsplit

import yarl


def _bracketed(host: str) -> str:
    return f"[{host}]" if ":" in host and not host.startswith("[") else host


def _origin(scheme: str, host: str, port: int | None) -> str:
    if port is None:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def get_audience(url: str | yarl.URL) -> str:
    """Return the BrowserID audience for *url*.

    String hosts are kept as written.  A :class:`yarl.URL` host comes back
    lowercased because yarl normalises it on parsing.

    Raises
    ------
    ValueError
        If *url* is not absolute or carries an invalid port.
    """
    if isinstance(url, yarl.URL):
        # str() of a yarl URL drops a default port, so read the parts.
        if not url.is_absolute() or not url.scheme or not url.host:
            raise ValueError(f"Cannot derive an audience from relative URL: {url!s}")
        return _origin(url.scheme, _bracketed(url.host), url.explicit_port)

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"Cannot derive an audience from relative URL: {url}")

    hostport = parts.netloc.rpartition("@")[2]
    if hostport.startswith("["):
        host = hostport[: hostport.index("]") + 1]
    else:
        host = hostport.partition(":")[0]
    return _origin(parts.scheme, host, parts.port)
