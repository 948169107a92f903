"""
Process-wide realtime store handle
==================================

``init_realtime`` builds the configured backend once and caches it; later
calls return the same handle without reconnecting.  Missing configuration
or a failing connection yields ``None`` (logged), never an exception, so
the tracking layer degrades to no-ops instead of taking the API down.

``reset_realtime`` exists for test isolation only.
"""

from __future__ import annotations

import logging
from typing import Optional

from src.config import Settings, settings as default_settings
from src.domain.coercion import now_ms
from src.domain.enums import CORE_COLLECTIONS, MANDATORY_COLLECTIONS

from .store import RealtimeStore

logger = logging.getLogger(__name__)

_store: Optional[RealtimeStore] = None


# ── Public API ────────────────────────────────────────────────────────


def init_realtime(config: Optional[Settings] = None) -> Optional[RealtimeStore]:
    global _store
    if _store is not None:
        return _store

    config = config or default_settings
    try:
        if config.realtime_backend == "redis":
            store = _init_redis(config)
        else:
            store = _init_firebase(config)
    except Exception as exc:
        logger.error("Failed to initialise realtime store: %s", exc)
        return None

    if store is not None:
        _store = store
        logger.info("Realtime store initialised (backend=%s)", config.realtime_backend)
    return _store


def get_realtime() -> Optional[RealtimeStore]:
    if _store is None:
        logger.warning("Realtime store not initialised; call init_realtime() first")
    return _store


def reset_realtime() -> None:
    global _store
    _store = None


async def ensure_mandatory_collections(
    store: Optional[RealtimeStore], now: Optional[int] = None
) -> None:
    """Create a ``_meta`` stub for every missing collection.  Idempotent."""
    if store is None:
        return

    now = now if now is not None else now_ms()
    for collection in MANDATORY_COLLECTIONS:
        name = collection.value
        if await store.exists(name):
            continue
        await store.set(
            name,
            {
                "_meta": {
                    "initialized_at": now,
                    "mandatory": collection in CORE_COLLECTIONS,
                }
            },
        )
        logger.info("Bootstrapped realtime collection %s", name)


# ── Internals ─────────────────────────────────────────────────────────


def _init_firebase(config: Settings) -> Optional[RealtimeStore]:
    required = (
        config.firebase_project_id,
        config.firebase_client_email,
        config.firebase_private_key,
        config.firebase_database_url,
    )
    if not all(required):
        logger.warning("Firebase Realtime Database not configured")
        return None

    from .firebase_store import FirebaseRealtimeStore, initialize_firebase_app

    app = initialize_firebase_app(*required)
    return FirebaseRealtimeStore(app)


def _init_redis(config: Settings) -> Optional[RealtimeStore]:
    if not config.redis_url:
        logger.warning("Redis realtime store not configured")
        return None

    from .redis_store import RedisRealtimeStore, create_redis_client

    return RedisRealtimeStore(create_redis_client(config.redis_url))
