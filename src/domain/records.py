"""
Record builders for the realtime collections.

Pure functions: they take a caller payload (possibly malformed) plus the
current time and return exactly what gets written.  Numeric fields go
through :func:`to_number`; string fields use ``or`` defaults; fields where
a falsy value is meaningful (``is_active``, ``is_available``,
``accuracy``) default only when absent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .coercion import first_present, to_number
from .entities import Coordinate, RouteCacheEntry
from .enums import (
    DEFAULT_DRIVER_NAME,
    DEFAULT_ORDER_STATUS,
    DEFAULT_TRANSPORT_TYPE,
    DEFAULT_VEHICLE_ICON,
    DeliveryBoyStatus,
)
from .polyline import encode_polyline

DAY_MS = 24 * 60 * 60 * 1000


def driver_key(driver_id: Any) -> str:
    return f"driver_{driver_id}"


def format_driver_date(timestamp_ms: int) -> str:
    """UTC ``YYYY-MM-DD HH:MM:SS.mmm``."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S.") + f"{dt.microsecond // 1000:03d}"


def build_delivery_boy_presence(
    payload: Mapping[str, Any], now: int
) -> dict[str, Any]:
    coord = Coordinate.coerce(payload.get("lat"), payload.get("lng"))
    return {
        "status": payload.get("status") or DeliveryBoyStatus.OFFLINE.value,
        "lat": coord.latitude,
        "lng": coord.longitude,
        "last_updated": payload.get("last_updated") or now,
    }


def build_driver_presence(
    driver_id: Any, payload: Mapping[str, Any], now: int
) -> dict[str, Any]:
    coord = Coordinate.coerce(payload.get("lat"), payload.get("lng"))
    return {
        "id": payload.get("id") or driver_id,
        "name": payload.get("name") or DEFAULT_DRIVER_NAME,
        "mobile": payload.get("mobile") or "",
        "is_active": first_present(payload.get("is_active"), 1),
        "is_available": first_present(payload.get("is_available"), True),
        # geofire-style location pair
        "l": [coord.latitude, coord.longitude],
        "bearing": to_number(payload.get("bearing")),
        "transport_type": payload.get("transport_type") or DEFAULT_TRANSPORT_TYPE,
        "vehicle_number": payload.get("vehicle_number") or "",
        "vehicle_type_name": payload.get("vehicle_type_name") or "",
        "vehicle_type_icon": payload.get("vehicle_type_icon") or DEFAULT_VEHICLE_ICON,
        "date": payload.get("date") or format_driver_date(now),
        "updated_at": payload.get("updated_at") or now,
    }


def build_user_location(payload: Mapping[str, Any], now: int) -> dict[str, Any]:
    coord = Coordinate.coerce(payload.get("lat"), payload.get("lng"))
    return {
        "lat": coord.latitude,
        "lng": coord.longitude,
        "address": payload.get("address") or "",
        "area": payload.get("area") or "",
        "city": payload.get("city") or "",
        "state": payload.get("state") or "",
        "formatted_address": payload.get("formatted_address") or "",
        "accuracy": payload.get("accuracy"),
        "last_updated": payload.get("last_updated") or now,
    }


_ORDER_NUMERIC_FIELDS = (
    "boy_lat",
    "boy_lng",
    "customer_lat",
    "customer_lng",
    "restaurant_lat",
    "restaurant_lng",
    "distance",
    "duration",
)


def merge_active_order(
    existing: Optional[Mapping[str, Any]],
    payload: Mapping[str, Any],
    now: int,
) -> dict[str, Any]:
    """Right-biased merge: payload, then existing, then default.

    Unknown fields already on the record are carried over untouched.
    ``created_at`` is sticky once set.
    """
    existing = dict(existing or {})
    merged = dict(existing)

    merged["boy_id"] = first_present(payload.get("boy_id"), existing.get("boy_id"))
    for field in _ORDER_NUMERIC_FIELDS:
        merged[field] = to_number(
            first_present(payload.get(field), existing.get(field), 0)
        )

    polyline = payload.get("polyline") or encode_polyline(
        payload.get("route_coordinates") or []
    )
    merged["polyline"] = polyline or existing.get("polyline") or ""
    merged["status"] = (
        payload.get("status")
        or existing.get("status")
        or DEFAULT_ORDER_STATUS
    )
    merged["created_at"] = (
        existing.get("created_at") or payload.get("created_at") or now
    )
    merged["last_updated"] = payload.get("last_updated") or now
    return merged


def build_route_cache_entry(
    payload: Mapping[str, Any], now: int, ttl_days: int = 7
) -> RouteCacheEntry:
    polyline = payload.get("polyline") or encode_polyline(
        payload.get("route_coordinates") or []
    )
    return RouteCacheEntry(
        distance=to_number(payload.get("distance")),
        duration=to_number(payload.get("duration")),
        polyline=polyline,
        cached_at=now,
        expires_at=now + ttl_days * DAY_MS,
    )
