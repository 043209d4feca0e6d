"""
Persistence for weddings and events.
"""

from viah.db.helpers import DatabaseError, build_update, execute_query, fetch_all, fetch_one
from viah.features.planning.domain import Event, EventCreate, EventUpdate, Wedding, WeddingCreate, WeddingUpdate
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class PlanningRepositoryError(DatabaseError):
    """More specific exception for planning persistence failures."""


class WeddingRepository:
    WEDDING_COLUMNS = """
        id, user_id, tradition, role, partner1_name, partner2_name, couple_email,
        wedding_date, location, guest_count_estimate, total_budget, status, created_at
    """

    @classmethod
    def _row_to_wedding(cls, row: dict | None) -> Wedding | None:
        return Wedding.model_validate(row) if row else None

    @classmethod
    async def get(cls, wedding_id: str) -> Wedding | None:
        query = f"SELECT {cls.WEDDING_COLUMNS} FROM weddings WHERE id = %s"
        return cls._row_to_wedding(await fetch_one(query, (wedding_id,)))

    @classmethod
    async def get_many(cls, wedding_ids: list[str]) -> dict[str, Wedding]:
        if not wedding_ids:
            return {}
        query = f"SELECT {cls.WEDDING_COLUMNS} FROM weddings WHERE id = ANY(%s::uuid[])"
        weddings = [cls._row_to_wedding(row) for row in await fetch_all(query, (list(wedding_ids),))]
        return {wedding.id: wedding for wedding in weddings}

    @classmethod
    async def list_for_user(cls, user_id: str) -> list[Wedding]:
        query = f"""
            SELECT {cls.WEDDING_COLUMNS}
            FROM weddings
            WHERE user_id = %s
            ORDER BY created_at DESC
        """
        rows = await fetch_all(query, (user_id,))
        return [cls._row_to_wedding(row) for row in rows]

    @classmethod
    async def create(cls, user_id: str, payload: WeddingCreate) -> Wedding:
        query = f"""
            INSERT INTO weddings (
                user_id, tradition, role, partner1_name, partner2_name, couple_email,
                wedding_date, location, guest_count_estimate, total_budget
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.WEDDING_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                user_id,
                payload.tradition,
                payload.role,
                payload.partner1_name,
                payload.partner2_name,
                payload.couple_email,
                payload.wedding_date,
                payload.location,
                payload.guest_count_estimate,
                payload.total_budget,
            ),
        )
        if not row:
            raise PlanningRepositoryError("Failed to create wedding", operation="create_wedding")

        logger.info("Wedding created", user_id=user_id, wedding_id=str(row["id"]))
        return cls._row_to_wedding(row)

    @classmethod
    async def update(cls, wedding_id: str, payload: WeddingUpdate) -> Wedding | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            return await cls.get(wedding_id)
        query, params = build_update("weddings", values, {"id": wedding_id}, cls.WEDDING_COLUMNS)
        return cls._row_to_wedding(await fetch_one(query, params))


class EventRepository:
    EVENT_COLUMNS = 'id, wedding_id, name, type, date, time, location, guest_count, "order"'

    @classmethod
    def _row_to_event(cls, row: dict | None) -> Event | None:
        return Event.model_validate(row) if row else None

    @classmethod
    async def get(cls, event_id: str) -> Event | None:
        query = f"SELECT {cls.EVENT_COLUMNS} FROM events WHERE id = %s"
        return cls._row_to_event(await fetch_one(query, (event_id,)))

    @classmethod
    async def get_many(cls, event_ids: list[str]) -> dict[str, Event]:
        if not event_ids:
            return {}
        query = f"SELECT {cls.EVENT_COLUMNS} FROM events WHERE id = ANY(%s::uuid[])"
        events = [cls._row_to_event(row) for row in await fetch_all(query, (list(event_ids),))]
        return {event.id: event for event in events}

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[Event]:
        query = f"""
            SELECT {cls.EVENT_COLUMNS}
            FROM events
            WHERE wedding_id = %s
            ORDER BY "order", date NULLS LAST
        """
        rows = await fetch_all(query, (wedding_id,))
        return [cls._row_to_event(row) for row in rows]

    @classmethod
    async def create(cls, wedding_id: str, payload: EventCreate) -> Event:
        query = f"""
            INSERT INTO events (wedding_id, name, type, date, time, location, guest_count, "order")
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.EVENT_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                wedding_id,
                payload.name,
                payload.type,
                payload.date,
                payload.time,
                payload.location,
                payload.guest_count,
                payload.order,
            ),
        )
        if not row:
            raise PlanningRepositoryError("Failed to create event", operation="create_event")
        return cls._row_to_event(row)

    @classmethod
    async def update(cls, event_id: str, payload: EventUpdate) -> Event | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            return await cls.get(event_id)
        query, params = build_update("events", values, {"id": event_id}, cls.EVENT_COLUMNS)
        return cls._row_to_event(await fetch_one(query, params))

    @classmethod
    async def delete(cls, event_id: str) -> bool:
        return await execute_query("DELETE FROM events WHERE id = %s", (event_id,)) > 0
