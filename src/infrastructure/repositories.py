"""
Repository Pattern -- domain operations over the realtime store.

Each repository receives a ``RealtimeStore`` (or ``None`` when the store
never initialised) and exposes tracking operations only.

Every public method is fail-soft: writes return ``True`` / ``False`` and
reads return the record or ``None``.  Store outages, missing ids and
backend errors are logged as warnings and never propagate, so a request
handler can treat ``False`` / ``None`` as "retry or degrade".

Two write styles are kept apart on purpose:

* ``_partial_upsert`` -- merge the given fields (presence records).
* ``_replace_upsert`` -- overwrite the whole record (active orders,
  route cache).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from src.config import settings
from src.domain.coercion import now_ms, to_number
from src.domain.entities import RouteCacheEntry
from src.domain.enums import Collection
from src.domain.nearest import pick_nearest
from src.domain.records import (
    build_delivery_boy_presence,
    build_driver_presence,
    build_route_cache_entry,
    build_user_location,
    driver_key,
    merge_active_order,
)

from .store import RealtimeStore, join_path

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _as_payload(payload: Any) -> Mapping[str, Any]:
    return payload if isinstance(payload, Mapping) else {}


class _RealtimeRepository:
    collection: Collection

    def __init__(self, store: Optional[RealtimeStore], clock: Clock = now_ms):
        self.store = store
        self.clock = clock

    def _available(self, record_id: Any) -> bool:
        if self.store is None or record_id is None or record_id == "":
            logger.warning(
                "Realtime store not available for %s", self.collection.value
            )
            return False
        return True

    def _path(self, record_id: Any) -> str:
        return join_path(self.collection.value, record_id)

    def _build(self, builder: Callable[..., Any], *args: Any) -> Optional[Any]:
        try:
            return builder(*args)
        except Exception as exc:
            logger.warning("Rejected %s payload: %s", self.collection.value, exc)
            return None

    async def _partial_upsert(self, record_id: Any, values: dict[str, Any]) -> bool:
        try:
            await self.store.update(self._path(record_id), values)
            return True
        except Exception as exc:
            logger.warning("Failed to write %s: %s", self.collection.value, exc)
            return False

    async def _replace_upsert(self, record_id: Any, value: dict[str, Any]) -> bool:
        try:
            await self.store.set(self._path(record_id), value)
            return True
        except Exception as exc:
            logger.warning("Failed to write %s: %s", self.collection.value, exc)
            return False

    async def _read(self, record_id: Any) -> Optional[Any]:
        if not self._available(record_id):
            return None
        try:
            return await self.store.get(self._path(record_id))
        except Exception as exc:
            logger.warning("Failed to read %s: %s", self.collection.value, exc)
            return None


class DeliveryBoyPresenceRepository(_RealtimeRepository):
    collection = Collection.DELIVERY_BOYS

    async def upsert(self, boy_id: Any, payload: Mapping[str, Any] | None = None) -> bool:
        if not self._available(boy_id):
            return False
        payload = _as_payload(payload)
        values = self._build(build_delivery_boy_presence, payload, self.clock())
        if values is None:
            return False
        return await self._partial_upsert(boy_id, values)

    async def get(self, boy_id: Any) -> Optional[dict[str, Any]]:
        return await self._read(boy_id)

    async def find_nearest_online(
        self,
        ref_lat: float,
        ref_lng: float,
        max_distance_km: float = 20.0,
    ) -> Optional[dict[str, Any]]:
        """Closest online delivery partner within ``max_distance_km``."""
        if self.store is None:
            logger.warning("Realtime store not available for nearest lookup")
            return None
        try:
            online = await self.store.query_equal(
                self.collection.value, "status", settings.online_status
            )
            return pick_nearest(
                online or {},
                to_number(ref_lat),
                to_number(ref_lng),
                max_distance_km,
            )
        except Exception as exc:
            logger.warning("Failed to find nearest delivery boy: %s", exc)
            return None


class DriverPresenceRepository(_RealtimeRepository):
    collection = Collection.DRIVERS

    async def upsert(self, driver_id: Any, payload: Mapping[str, Any] | None = None) -> bool:
        if not self._available(driver_id):
            return False
        payload = _as_payload(payload)
        values = self._build(build_driver_presence, driver_id, payload, self.clock())
        if values is None:
            return False
        return await self._partial_upsert(driver_key(driver_id), values)

    async def get(self, driver_id: Any) -> Optional[dict[str, Any]]:
        if not self._available(driver_id):
            return None
        return await self._read(driver_key(driver_id))


class UserLocationRepository(_RealtimeRepository):
    collection = Collection.USERS

    async def upsert(self, user_id: Any, payload: Mapping[str, Any] | None = None) -> bool:
        if not self._available(user_id):
            return False
        payload = _as_payload(payload)
        values = self._build(build_user_location, payload, self.clock())
        if values is None:
            return False
        return await self._partial_upsert(user_id, values)

    async def get(self, user_id: Any) -> Optional[dict[str, Any]]:
        return await self._read(user_id)


class ActiveOrderRepository(_RealtimeRepository):
    """Live tracking for an order from assignment until completion.

    ``upsert`` is read-modify-write without compare-and-swap: two writers
    on the same order can still clobber each other.
    """

    collection = Collection.ACTIVE_ORDERS

    async def upsert(self, order_id: Any, payload: Mapping[str, Any] | None = None) -> bool:
        if not self._available(order_id):
            return False
        payload = _as_payload(payload)
        try:
            existing = await self.store.get(self._path(order_id))
            record = merge_active_order(
                existing if isinstance(existing, Mapping) else None,
                payload,
                self.clock(),
            )
        except Exception as exc:
            logger.warning("Failed to write %s: %s", self.collection.value, exc)
            return False
        return await self._replace_upsert(order_id, record)

    async def update_location(self, order_id: Any, lat: Any, lng: Any) -> bool:
        if not self._available(order_id):
            return False
        return await self._partial_upsert(
            order_id,
            {
                "boy_lat": to_number(lat),
                "boy_lng": to_number(lng),
                "last_updated": self.clock(),
            },
        )

    async def set_status(self, order_id: Any, status: str) -> bool:
        if not self._available(order_id):
            return False
        return await self._partial_upsert(
            order_id, {"status": status, "last_updated": self.clock()}
        )

    async def remove(self, order_id: Any) -> bool:
        if not self._available(order_id):
            return False
        try:
            await self.store.remove(self._path(order_id))
            return True
        except Exception as exc:
            logger.warning("Failed to remove active order: %s", exc)
            return False

    async def get(self, order_id: Any) -> Optional[dict[str, Any]]:
        return await self._read(order_id)


class RouteCacheRepository(_RealtimeRepository):
    collection = Collection.ROUTE_CACHE

    def __init__(
        self,
        store: Optional[RealtimeStore],
        clock: Clock = now_ms,
        ttl_days: Optional[int] = None,
    ):
        super().__init__(store, clock)
        self.ttl_days = ttl_days if ttl_days is not None else settings.route_cache_ttl_days

    async def upsert(self, route_key: str, payload: Mapping[str, Any] | None = None) -> bool:
        if not self._available(route_key):
            return False
        payload = _as_payload(payload)
        entry = self._build(
            build_route_cache_entry, payload, self.clock(), self.ttl_days
        )
        if entry is None:
            return False
        return await self._replace_upsert(route_key, entry.to_record())

    async def get(self, route_key: str) -> Optional[RouteCacheEntry]:
        """Cached entry regardless of age; check ``is_expired`` before use."""
        record = await self._read(route_key)
        if not isinstance(record, Mapping):
            return None
        return RouteCacheEntry.from_record(record)
