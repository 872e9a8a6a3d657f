"""Normalization helpers.

Centralizes defensive parsing of Traccar attribute values.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any


def safe_float(value: Any) -> float | None:
    """Parse *value* to a finite float, ``None`` when that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value in ("", "--"):
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return int(value)
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_flag(value: Any) -> int | None:
    """Parse an on/off sensor value to ``0`` or ``1``.

    Booleans, numbers and numeric strings are accepted; any non-zero
    number counts as ``1``.
    """
    parsed = safe_int(value)
    if parsed is None:
        return None
    return 1 if parsed else 0


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 API timestamp to an aware UTC datetime.

    Naive values are assumed to be UTC. Unparseable values give ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Format *value* as the ISO-8601 UTC string the API expects (``...Z``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    utc = value.astimezone(UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"
