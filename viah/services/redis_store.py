"""
Thin module-level wrappers over the pooled Redis client.

Services import these functions rather than the client so tests can
monkeypatch a single seam.
"""

import json
from typing import Any

from viah.services.redis_client import fast_redis


async def ping() -> bool:
    return await fast_redis.ping()


async def get(key: str) -> str | None:
    return await fast_redis.get(key)


async def set_with_ttl(key: str, value: str, ttl_s: int | None = None) -> bool:
    return await fast_redis.set_with_ttl(key, value, ttl_s)


async def delete(key: str) -> bool:
    return await fast_redis.delete(key)


async def get_json(key: str) -> Any | None:
    raw = await get(key)
    return json.loads(raw) if raw else None


async def set_json(key: str, value: Any, ttl_s: int | None = None) -> bool:
    return await set_with_ttl(key, json.dumps(value, default=str), ttl_s)
