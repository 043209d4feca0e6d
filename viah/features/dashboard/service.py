"""
Dashboard widget service - default layout, edits and reordering.
"""

from viah.features.dashboard.domain import DashboardWidget, WidgetUpdate
from viah.features.dashboard.layout import merge_order
from viah.features.dashboard.repository import WidgetRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class WidgetServiceError(Exception):
    code = "widget_error"

    def __init__(self, message: str, code: str | None = None, details: dict | None = None):
        super().__init__(message)
        if code:
            self.code = code
        self.details = details or {}


class WidgetNotFoundError(WidgetServiceError):
    code = "widget_not_found"


class InvalidWidgetOrderError(WidgetServiceError):
    code = "invalid_widget_ids"


async def get_widgets(wedding_id: str) -> list[DashboardWidget]:
    """Widgets in position order; the default set is created on first access."""
    widgets = await WidgetRepository.list_for_wedding(wedding_id)
    if widgets:
        return widgets

    await WidgetRepository.create_defaults(wedding_id)
    return await WidgetRepository.list_for_wedding(wedding_id)


async def update_widget(widget_id: str, payload: WidgetUpdate) -> DashboardWidget:
    widget = await WidgetRepository.update(widget_id, payload.model_dump(exclude_unset=True))
    if not widget:
        raise WidgetNotFoundError("Widget not found")
    return widget


async def reorder_widgets(wedding_id: str, widget_ids: list[str]) -> list[DashboardWidget]:
    """
    Persist a new widget order. Positions become list indexes; widgets not
    named in the request keep their relative order after the named ones.

    Raises:
        InvalidWidgetOrderError: empty list, duplicates, or ids from another wedding
    """
    if not widget_ids:
        raise InvalidWidgetOrderError("widget_ids is required")
    if len(set(widget_ids)) != len(widget_ids):
        raise InvalidWidgetOrderError("widget_ids contains duplicates")

    current = await WidgetRepository.list_for_wedding(wedding_id)
    current_ids = [widget.id for widget in current]
    unknown = [widget_id for widget_id in widget_ids if widget_id not in set(current_ids)]
    if unknown:
        logger.warning("Widget reorder rejected", wedding_id=wedding_id, unknown_ids=unknown)
        raise InvalidWidgetOrderError(
            "Some widgets do not belong to this wedding", details={"unknown_ids": unknown}
        )

    ordered_ids = merge_order(current_ids, widget_ids)
    await WidgetRepository.set_positions(wedding_id, ordered_ids)

    logger.info("Widgets reordered", wedding_id=wedding_id, count=len(ordered_ids))
    by_id = {widget.id: widget for widget in current}
    return [
        by_id[widget_id].model_copy(update={"position": position})
        for position, widget_id in enumerate(ordered_ids)
    ]
