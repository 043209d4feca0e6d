"""
Redis cache for the couple notification summary.
"""

from typing import Any

from viah.config import settings
from viah.services import redis_store

CACHE_KEY_PREFIX = "notifications:couple"


def couple_summary_key(wedding_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{wedding_id}"


async def get_cached_summary(wedding_id: str) -> dict[str, Any] | None:
    return await redis_store.get_json(couple_summary_key(wedding_id))


async def store_summary(wedding_id: str, summary: dict[str, Any]) -> bool:
    return await redis_store.set_json(
        couple_summary_key(wedding_id), summary, settings.NOTIFICATION_CACHE_TTL_SECONDS
    )


async def invalidate_couple_summary(wedding_id: str) -> bool:
    return await redis_store.delete(couple_summary_key(wedding_id))
