"""Redaction of bearer material before it reaches DEBUG logs.

Exchanges carry secrets both ways: the BrowserID assertion in the
``Authorization`` header going out, the token ``id``/``key`` coming back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"authorization", "id", "key", "x-client-state"})
_MAX_DEPTH = 20


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of a header mapping or JSON body with secrets masked.

    Long strings are truncated and nesting beyond a fixed depth is elided.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, Mapping):
        return {
            str(k): "<redacted>"
            if str(k).lower() in _SENSITIVE_KEYS
            else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]
    return value
