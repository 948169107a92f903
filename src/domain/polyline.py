"""
Google encoded-polyline codec (precision 1e5).

Each coordinate is scaled to fixed-point degrees, delta-encoded against
the previous accepted point and written as 5-bit chunks offset by 63.

Complexity: O(n) in the number of points / characters.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any, Optional

PRECISION = 1e5


def _to_fixed(value: Any) -> Optional[int]:
    """Scale to fixed-point degrees, rounding half up.  None if unusable."""
    try:
        scaled = float(value) * PRECISION
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(scaled):
        return None
    return math.floor(scaled + 0.5)


def _encode_signed(num: int) -> str:
    value = ~(num << 1) if num < 0 else num << 1
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(points: Iterable[Any] | None) -> str:
    """Encode ``[(lat, lng), ...]`` into a polyline string.

    Malformed points (not a sequence, fewer than two items, non-numeric or
    non-finite) are skipped and do not move the delta baseline.
    """
    if (
        not points
        or isinstance(points, (str, bytes))
        or not isinstance(points, Iterable)
    ):
        return ""

    prev_lat = 0
    prev_lng = 0
    parts: list[str] = []

    for point in points:
        if isinstance(point, (str, bytes)) or not isinstance(point, Sequence):
            continue
        if len(point) < 2:
            continue
        lat = _to_fixed(point[0])
        lng = _to_fixed(point[1])
        if lat is None or lng is None:
            continue

        parts.append(_encode_signed(lat - prev_lat))
        parts.append(_encode_signed(lng - prev_lng))
        prev_lat, prev_lng = lat, lng

    return "".join(parts)


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValueError("Truncated polyline")
        b = ord(encoded[index]) - 63
        index += 1
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: str) -> list[tuple[float, float]]:
    """Inverse of :func:`encode_polyline`.  Raises ``ValueError`` if truncated."""
    points: list[tuple[float, float]] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        dlat, index = _decode_value(encoded, index)
        dlng, index = _decode_value(encoded, index)
        lat += dlat
        lng += dlng
        points.append((lat / PRECISION, lng / PRECISION))

    return points
