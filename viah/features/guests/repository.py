"""
Persistence for households and guests.
"""

from viah.db.helpers import DatabaseError, build_update, execute_query, fetch_all, fetch_one
from viah.features.guests.domain import Guest, GuestCreate, GuestUpdate, Household, HouseholdCreate, HouseholdUpdate
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class GuestRepositoryError(DatabaseError):
    """More specific exception for guest list persistence failures."""


class HouseholdRepository:
    HOUSEHOLD_COLUMNS = """
        id, wedding_id, name, contact_email, max_count, affiliation,
        relationship_tier, priority_tier, created_at
    """

    @classmethod
    def _row_to_household(cls, row: dict | None) -> Household | None:
        return Household.model_validate(row) if row else None

    @classmethod
    async def get(cls, household_id: str) -> Household | None:
        query = f"SELECT {cls.HOUSEHOLD_COLUMNS} FROM households WHERE id = %s"
        return cls._row_to_household(await fetch_one(query, (household_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[Household]:
        query = f"""
            SELECT {cls.HOUSEHOLD_COLUMNS}
            FROM households
            WHERE wedding_id = %s
            ORDER BY name
        """
        rows = await fetch_all(query, (wedding_id,))
        return [cls._row_to_household(row) for row in rows]

    @classmethod
    async def create(cls, wedding_id: str, payload: HouseholdCreate) -> Household:
        query = f"""
            INSERT INTO households (
                wedding_id, name, contact_email, max_count, affiliation,
                relationship_tier, priority_tier
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.HOUSEHOLD_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                wedding_id,
                payload.name,
                payload.contact_email,
                payload.max_count,
                payload.affiliation,
                payload.relationship_tier,
                payload.priority_tier,
            ),
        )
        if not row:
            raise GuestRepositoryError("Failed to create household", operation="create_household")

        logger.info("Household created", wedding_id=wedding_id, household_id=str(row["id"]))
        return cls._row_to_household(row)

    @classmethod
    async def update(cls, household_id: str, payload: HouseholdUpdate) -> Household | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            return await cls.get(household_id)
        query, params = build_update("households", values, {"id": household_id}, cls.HOUSEHOLD_COLUMNS)
        return cls._row_to_household(await fetch_one(query, params))

    @classmethod
    async def delete(cls, household_id: str) -> bool:
        # guests.household_id is ON DELETE SET NULL, so members stay on the list
        return await execute_query("DELETE FROM households WHERE id = %s", (household_id,)) > 0


class GuestRepository:
    GUEST_COLUMNS = """
        id, wedding_id, household_id, name, email, phone, side, relationship_tier,
        event_ids, rsvp_status, plus_one, dietary_restrictions
    """

    @classmethod
    def _row_to_guest(cls, row: dict | None) -> Guest | None:
        if not row:
            return None
        return Guest.model_validate({**row, "event_ids": row.get("event_ids") or []})

    @classmethod
    async def get(cls, guest_id: str) -> Guest | None:
        query = f"SELECT {cls.GUEST_COLUMNS} FROM guests WHERE id = %s"
        return cls._row_to_guest(await fetch_one(query, (guest_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[Guest]:
        query = f"""
            SELECT {cls.GUEST_COLUMNS}
            FROM guests
            WHERE wedding_id = %s
            ORDER BY name
        """
        rows = await fetch_all(query, (wedding_id,))
        return [cls._row_to_guest(row) for row in rows]

    @classmethod
    async def list_for_household(cls, household_id: str) -> list[Guest]:
        query = f"""
            SELECT {cls.GUEST_COLUMNS}
            FROM guests
            WHERE household_id = %s
            ORDER BY name
        """
        rows = await fetch_all(query, (household_id,))
        return [cls._row_to_guest(row) for row in rows]

    @classmethod
    async def create(cls, wedding_id: str, payload: GuestCreate) -> Guest:
        query = f"""
            INSERT INTO guests (
                wedding_id, household_id, name, email, phone, side, relationship_tier,
                event_ids, rsvp_status, plus_one, dietary_restrictions
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.GUEST_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                wedding_id,
                payload.household_id,
                payload.name,
                payload.email,
                payload.phone,
                payload.side,
                payload.relationship_tier,
                payload.event_ids,
                payload.rsvp_status,
                payload.plus_one,
                payload.dietary_restrictions,
            ),
        )
        if not row:
            raise GuestRepositoryError("Failed to create guest", operation="create_guest")
        return cls._row_to_guest(row)

    @classmethod
    async def update(cls, guest_id: str, payload: GuestUpdate) -> Guest | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            return await cls.get(guest_id)
        query, params = build_update("guests", values, {"id": guest_id}, cls.GUEST_COLUMNS)
        return cls._row_to_guest(await fetch_one(query, params))

    @classmethod
    async def delete(cls, guest_id: str) -> bool:
        return await execute_query("DELETE FROM guests WHERE id = %s", (guest_id,)) > 0
