"""Route-cache key derived from a route's start and end coordinates."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

from .coercion import to_number

_STEP = Decimal("0.0001")
# Wide enough for any finite float at 4 decimals.
_CONTEXT = Context(prec=400)


def _fixed4(number: float) -> str:
    """Four decimals, ties away from zero (``1.03125`` -> ``1.0313``)."""
    if math.isinf(number):
        return "-Infinity" if number < 0 else "Infinity"
    quantized = Decimal(number).quantize(
        _STEP, rounding=ROUND_HALF_UP, context=_CONTEXT
    )
    return format(quantized, "f")


def _normalise(value: Any) -> str:
    return _fixed4(to_number(value)).replace(".", "_").replace("-", "m", 1)


def make_route_cache_key(
    start_lat: Any, start_lng: Any, end_lat: Any, end_lng: Any
) -> str:
    """Return e.g. ``12_9716_77_5946_m1_5000_0_0000``.

    Coordinates are fixed to 4 decimals, so lookups match exactly at
    ~11 m resolution and never fuzzier than that.
    """
    return "_".join(
        _normalise(v) for v in (start_lat, start_lng, end_lat, end_lng)
    )
