"""
Domain value objects for the tracking layer.

Presence and order-tracking records stay plain dicts because the store
hands back arbitrary extra fields that must survive a merge; only the
route-cache entry has a fixed shape worth modelling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .coercion import to_number


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    @classmethod
    def coerce(cls, lat: Any, lng: Any) -> "Coordinate":
        return cls(to_number(lat), to_number(lng))


@dataclass(frozen=True)
class RouteCacheEntry:
    distance: float
    duration: float
    polyline: str
    cached_at: int
    expires_at: int

    def is_expired(self, now_ms: int) -> bool:
        """TTL is advisory: the store never evicts, readers decide."""
        return now_ms >= self.expires_at

    def to_record(self) -> dict[str, Any]:
        return {
            "distance": self.distance,
            "duration": self.duration,
            "polyline": self.polyline,
            "cached_at": self.cached_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RouteCacheEntry":
        return cls(
            distance=to_number(record.get("distance")),
            duration=to_number(record.get("duration")),
            polyline=record.get("polyline") or "",
            cached_at=int(to_number(record.get("cached_at"))),
            expires_at=int(to_number(record.get("expires_at"))),
        )
