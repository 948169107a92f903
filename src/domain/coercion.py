"""
Defaulting policy for caller payloads.

Tracking writes never reject input.  Numbers that are missing, ``None``,
non-numeric or NaN collapse to ``0``; optional fields fall back to literal
defaults.  These helpers pin that behaviour in one place.
"""

from __future__ import annotations

import math
import time
from typing import Any


def to_number(value: Any) -> float:
    """Coerce *value* to a float, collapsing anything unusable to ``0.0``.

    ``None``, ``""``, ``"abc"``, ``NaN``, ``"0"`` and ``-0.0`` all give
    ``0.0``.  Numeric strings are parsed; booleans count as ``1`` / ``0``.
    """
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or number == 0:
        return 0.0
    return number


def first_present(*values: Any) -> Any:
    """Return the first value that is not ``None`` (``None`` if all are)."""
    for value in values:
        if value is not None:
            return value
    return None


def is_real_number(value: Any) -> bool:
    """True for int / float values, excluding ``bool``."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)
