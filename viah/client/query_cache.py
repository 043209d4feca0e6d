"""
Typed query cache keyed by request descriptors.

Keys are tuples such as ("messages", conversation_id). Invalidating a
prefix drops every key that starts with it and notifies subscribers whose
prefix overlaps, so views refetch exactly what a mutation touched.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

QueryKey = tuple[Any, ...]
Listener = Callable[[QueryKey], None]


def _overlaps(a: QueryKey, b: QueryKey) -> bool:
    shorter = min(len(a), len(b))
    return a[:shorter] == b[:shorter]


class QueryCache:
    def __init__(self) -> None:
        self._entries: dict[QueryKey, Any] = {}
        self._listeners: list[tuple[QueryKey, Listener]] = []

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def get(self, key: QueryKey, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = value
        self._notify(key)

    async def fetch(self, key: QueryKey, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Cached value for key, loading and storing it on a miss."""
        if key in self._entries:
            return self._entries[key]
        value = await loader()
        self.set(key, value)
        return value

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose key starts with prefix; returns how many were dropped."""
        stale = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        logger.debug("Query cache invalidated", prefix=prefix, dropped=len(stale))
        self._notify(prefix)
        return len(stale)

    def subscribe(self, prefix: QueryKey, listener: Listener) -> Callable[[], None]:
        """Call listener(key) on every set/invalidate overlapping prefix. Returns an unsubscribe function."""
        entry = (prefix, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def _notify(self, key: QueryKey) -> None:
        for prefix, listener in list(self._listeners):
            if _overlaps(prefix, key):
                listener(key)
