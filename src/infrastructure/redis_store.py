"""
Redis backend for the realtime store.

Layout: one hash per collection, one JSON-encoded record per hash field
(``HSET delivery_boys 42 '{"status": "online", ...}'``).

Partial updates merge server-side in a Lua script so two concurrent
pings on the same record cannot drop each other's fields.  Equality
queries are filtered client-side over ``HGETALL``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import redis.asyncio as aioredis

from .store import filter_children, split_path

_MERGE_LUA = """
local current = redis.call("hget", KEYS[1], ARGV[1])
local record = {}
if current then
    record = cjson.decode(current)
end
for k, v in pairs(cjson.decode(ARGV[2])) do
    record[k] = v
end
redis.call("hset", KEYS[1], ARGV[1], cjson.encode(record))
return 1
"""


def create_redis_client(url: str) -> aioredis.Redis:
    """Return a Redis client backed by its own connection pool."""
    pool = aioredis.ConnectionPool.from_url(url, decode_responses=True)
    return aioredis.Redis(connection_pool=pool)


class RedisRealtimeStore:
    def __init__(self, client: aioredis.Redis):
        self.redis = client

    async def get(self, path: str) -> Optional[Any]:
        collection, key = split_path(path)
        if key is None:
            raw = await self.redis.hgetall(collection)
            if not raw:
                return None
            return {k: json.loads(v) for k, v in raw.items()}
        raw = await self.redis.hget(collection, key)
        return None if raw is None else json.loads(raw)

    async def exists(self, path: str) -> bool:
        collection, key = split_path(path)
        if key is None:
            return bool(await self.redis.exists(collection))
        return bool(await self.redis.hexists(collection, key))

    async def set(self, path: str, value: Any) -> None:
        collection, key = split_path(path)
        if key is not None:
            await self.redis.hset(collection, key, json.dumps(value))
            return
        if not isinstance(value, dict):
            raise ValueError("A collection can only be set to a mapping")
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(collection)
            if value:
                pipe.hset(
                    collection,
                    mapping={k: json.dumps(v) for k, v in value.items()},
                )
            await pipe.execute()

    async def update(self, path: str, values: dict[str, Any]) -> None:
        collection, key = split_path(path)
        if not values:
            return
        if key is None:
            # children are replaced wholesale, matching a multi-path update
            await self.redis.hset(
                collection,
                mapping={k: json.dumps(v) for k, v in values.items()},
            )
            return
        await self.redis.eval(_MERGE_LUA, 1, collection, key, json.dumps(values))

    async def remove(self, path: str) -> None:
        collection, key = split_path(path)
        if key is None:
            await self.redis.delete(collection)
        else:
            await self.redis.hdel(collection, key)

    async def query_equal(
        self, path: str, field: str, value: Any
    ) -> dict[str, Any]:
        collection, key = split_path(path)
        if key is not None:
            raise ValueError("Queries run against a whole collection")
        raw = await self.redis.hgetall(collection)
        children = {k: json.loads(v) for k, v in raw.items()}
        return filter_children(children, field, value)
