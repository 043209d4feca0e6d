"""
Persistence for dashboard widgets.
"""

from psycopg.types.json import Jsonb

from viah.db.helpers import build_update, execute_transaction, fetch_all, fetch_one
from viah.features.dashboard.domain import DashboardWidget
from viah.features.dashboard.layout import DEFAULT_WIDGET_TYPES
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class WidgetRepository:
    WIDGET_COLUMNS = "id, wedding_id, widget_type, position, is_visible, config"

    @classmethod
    def _row_to_widget(cls, row: dict | None) -> DashboardWidget | None:
        return DashboardWidget.model_validate(row) if row else None

    @classmethod
    async def get(cls, widget_id: str) -> DashboardWidget | None:
        query = f"SELECT {cls.WIDGET_COLUMNS} FROM dashboard_widgets WHERE id = %s"
        return cls._row_to_widget(await fetch_one(query, (widget_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[DashboardWidget]:
        query = f"""
            SELECT {cls.WIDGET_COLUMNS}
            FROM dashboard_widgets
            WHERE wedding_id = %s
            ORDER BY position, created_at
        """
        return [cls._row_to_widget(row) for row in await fetch_all(query, (wedding_id,))]

    @classmethod
    async def create_defaults(cls, wedding_id: str) -> None:
        """Insert the default widget set; concurrent first loads are harmless."""
        insert = """
            INSERT INTO dashboard_widgets (wedding_id, widget_type, position, is_visible, config)
            VALUES (%s, %s, %s, TRUE, %s)
            ON CONFLICT (wedding_id, widget_type) DO NOTHING
        """
        await execute_transaction(
            [
                (insert, (wedding_id, widget_type, position, Jsonb({})))
                for position, widget_type in enumerate(DEFAULT_WIDGET_TYPES)
            ]
        )
        logger.info("Default dashboard widgets created", wedding_id=wedding_id)

    @classmethod
    async def update(cls, widget_id: str, values: dict) -> DashboardWidget | None:
        if not values:
            return await cls.get(widget_id)
        if "config" in values:
            values = {**values, "config": Jsonb(values["config"])}
        query, params = build_update("dashboard_widgets", values, {"id": widget_id}, cls.WIDGET_COLUMNS)
        return cls._row_to_widget(await fetch_one(query, params))

    @classmethod
    async def set_positions(cls, wedding_id: str, ordered_ids: list[str]) -> None:
        """Write position = index for every id, atomically."""
        update = "UPDATE dashboard_widgets SET position = %s WHERE id = %s AND wedding_id = %s"
        await execute_transaction(
            [(update, (position, widget_id, wedding_id)) for position, widget_id in enumerate(ordered_ids)]
        )
