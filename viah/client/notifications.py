"""
Fixed-interval notification polling for the couple header badge.
"""

import asyncio
import contextlib
from collections.abc import Callable

import httpx

from viah.client.api_client import ViahApiClient
from viah.client.errors import ApiError
from viah.client.query_cache import QueryCache
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

POLL_INTERVAL_SECONDS = 30


def notifications_key(wedding_id: str) -> tuple:
    return ("notifications", wedding_id)


class NotificationPoller:
    """Refresh every `interval` seconds. No backoff or jitter; a failed poll is logged and the next one runs on schedule."""

    def __init__(
        self,
        client: ViahApiClient,
        cache: QueryCache,
        wedding_id: str,
        interval: float = POLL_INTERVAL_SECONDS,
        on_update: Callable[[dict], None] | None = None,
    ):
        self._client = client
        self._cache = cache
        self.wedding_id = wedding_id
        self.interval = interval
        self._on_update = on_update
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> dict:
        summary = await self._client.get_couple_notifications(self.wedding_id)
        self._cache.set(notifications_key(self.wedding_id), summary)
        if self._on_update:
            self._on_update(summary)
        return summary

    async def run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except (ApiError, httpx.HTTPError) as e:
                logger.warning("Notification poll failed", wedding_id=self.wedding_id, error=str(e))
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
