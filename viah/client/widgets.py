"""
Optimistic dashboard widget layout with rollback on failed persistence.
"""

import httpx

from viah.client.api_client import ViahApiClient
from viah.client.errors import ApiError
from viah.client.query_cache import QueryCache
from viah.features.dashboard.layout import move_item
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def widgets_key(wedding_id: str) -> tuple:
    return ("widgets", wedding_id)


class WidgetBoard:
    """
    Local widget order mirrors the server. Edits apply immediately; if the
    server rejects them the previous snapshot is restored and the error
    re-raised.
    """

    def __init__(self, client: ViahApiClient, cache: QueryCache, wedding_id: str):
        self._client = client
        self._cache = cache
        self.wedding_id = wedding_id
        self.widgets: list[dict] = []

    @property
    def order(self) -> list[str]:
        return [widget["id"] for widget in self.widgets]

    async def load(self) -> list[dict]:
        self.widgets = list(
            await self._cache.fetch(
                widgets_key(self.wedding_id), lambda: self._client.get_widgets(self.wedding_id)
            )
        )
        return self.widgets

    async def move(self, from_index: int, to_index: int) -> list[dict]:
        snapshot = list(self.widgets)
        moved = move_item(self.widgets, from_index, to_index)
        self._apply([{**widget, "position": position} for position, widget in enumerate(moved)])

        try:
            await self._client.reorder_widgets(self.wedding_id, self.order)
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Widget reorder failed, rolling back", wedding_id=self.wedding_id, error=str(e))
            self._apply(snapshot)
            raise
        return self.widgets

    async def move_widget(self, active_id: str, over_id: str) -> list[dict]:
        """Drag-and-drop: place active_id where over_id currently sits."""
        order = self.order
        return await self.move(order.index(active_id), order.index(over_id))

    async def set_visible(self, widget_id: str, visible: bool) -> dict:
        snapshot = list(self.widgets)
        self._apply(
            [{**w, "is_visible": visible} if w["id"] == widget_id else w for w in self.widgets]
        )

        try:
            updated = await self._client.update_widget(widget_id, is_visible=visible)
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Widget update failed, rolling back", widget_id=widget_id, error=str(e))
            self._apply(snapshot)
            raise

        self._apply([updated if w["id"] == widget_id else w for w in self.widgets])
        return updated

    def _apply(self, widgets: list[dict]) -> None:
        self.widgets = widgets
        self._cache.set(widgets_key(self.wedding_id), widgets)
