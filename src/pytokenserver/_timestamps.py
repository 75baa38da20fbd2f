"""Server timestamp parsing.

The token server reports its clock in the ``X-Timestamp`` header as
decimal seconds (``"1429121686.49"``).  Everything inside pytokenserver
uses integer milliseconds since the epoch.
"""

from __future__ import annotations

import math
from decimal import Decimal, DecimalException
from typing import Any

from pytokenserver._constants import MAX_TIMESTAMP

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def _in_range(value: int) -> int | None:
    if 0 <= value <= MAX_TIMESTAMP:
        return value
    return None


def decimal_seconds_to_ms(value: str | None) -> int | None:
    """Convert a decimal-seconds string to milliseconds.

    Returns ``None`` when *value* is missing, not a finite number, or
    falls outside the unsigned 64-bit millisecond range.
    """
    if value is None:
        return None
    try:
        seconds = Decimal(value.strip())
        if not seconds.is_finite() or seconds.adjusted() > 20:
            return None
        millis = int(seconds * 1000)
    except DecimalException:
        return None
    return _in_range(millis)


def coerce_timestamp_ms(value: Any) -> int | None:
    """Convert a body timestamp (seconds **or** milliseconds) to milliseconds."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return decimal_seconds_to_ms(value)
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, int):
        return _in_range(value * 1000 if value < _MS_THRESHOLD else value)
    if value < _MS_THRESHOLD:
        return _in_range(int(Decimal(repr(value)) * 1000))
    return _in_range(int(value))
