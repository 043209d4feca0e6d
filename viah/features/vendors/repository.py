"""
Persistence for vendors and bookings.
"""

from viah.db.helpers import DatabaseError, build_update, fetch_all, fetch_one
from viah.features.vendors.domain import Booking, BookingCreate, Vendor, VendorSubmission
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class VendorRepositoryError(DatabaseError):
    """More specific exception for vendor persistence failures."""


class VendorRepository:
    VENDOR_COLUMNS = "id, user_id, name, categories, city, email, phone, starting_price"

    @classmethod
    def _row_to_vendor(cls, row: dict | None) -> Vendor | None:
        return Vendor.model_validate(row) if row else None

    @classmethod
    async def get(cls, vendor_id: str) -> Vendor | None:
        query = f"SELECT {cls.VENDOR_COLUMNS} FROM vendors WHERE id = %s"
        return cls._row_to_vendor(await fetch_one(query, (vendor_id,)))

    @classmethod
    async def get_many(cls, vendor_ids: list[str]) -> dict[str, Vendor]:
        if not vendor_ids:
            return {}
        query = f"SELECT {cls.VENDOR_COLUMNS} FROM vendors WHERE id = ANY(%s::uuid[])"
        rows = await fetch_all(query, (list(vendor_ids),))
        vendors = [cls._row_to_vendor(row) for row in rows]
        return {vendor.id: vendor for vendor in vendors}

    @classmethod
    async def find_candidates(cls, submission: VendorSubmission) -> list[Vendor]:
        """Vendors worth comparing against a submission: same city, email or phone."""
        query = f"""
            SELECT {cls.VENDOR_COLUMNS}
            FROM vendors
            WHERE lower(city) = lower(%s)
               OR (%s::text IS NOT NULL AND lower(email) = lower(%s))
               OR (%s::text IS NOT NULL AND right(regexp_replace(phone, '\\D', '', 'g'), 10) = %s)
        """
        phone_digits = "".join(ch for ch in submission.phone or "" if ch.isdigit())[-10:] or None
        rows = await fetch_all(
            query,
            (submission.city, submission.email, submission.email, phone_digits, phone_digits),
        )
        return [cls._row_to_vendor(row) for row in rows]

    @classmethod
    async def create(cls, user_id: str, submission: VendorSubmission) -> Vendor:
        query = f"""
            INSERT INTO vendors (user_id, name, categories, city, email, phone, starting_price)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.VENDOR_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                user_id,
                submission.name,
                submission.categories,
                submission.city,
                submission.email,
                submission.phone,
                submission.starting_price,
            ),
        )
        if not row:
            raise VendorRepositoryError("Failed to create vendor", operation="create_vendor")
        return cls._row_to_vendor(row)


class BookingRepository:
    BOOKING_COLUMNS = """
        id, wedding_id, event_id, vendor_id, status, time_slot, request_date,
        confirmed_date, declined_date, estimated_cost, couple_notes, vendor_notes
    """

    @classmethod
    def _row_to_booking(cls, row: dict | None) -> Booking | None:
        return Booking.model_validate(row) if row else None

    @classmethod
    async def get(cls, booking_id: str) -> Booking | None:
        query = f"SELECT {cls.BOOKING_COLUMNS} FROM bookings WHERE id = %s"
        return cls._row_to_booking(await fetch_one(query, (booking_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[Booking]:
        query = f"""
            SELECT {cls.BOOKING_COLUMNS}
            FROM bookings
            WHERE wedding_id = %s
            ORDER BY request_date DESC
        """
        return [cls._row_to_booking(row) for row in await fetch_all(query, (wedding_id,))]

    @classmethod
    async def list_for_vendor(cls, vendor_id: str) -> list[Booking]:
        query = f"""
            SELECT {cls.BOOKING_COLUMNS}
            FROM bookings
            WHERE vendor_id = %s
            ORDER BY request_date DESC
        """
        return [cls._row_to_booking(row) for row in await fetch_all(query, (vendor_id,))]

    @classmethod
    async def create(cls, payload: BookingCreate) -> Booking:
        query = f"""
            INSERT INTO bookings (
                wedding_id, event_id, vendor_id, time_slot, estimated_cost, couple_notes
            )
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {cls.BOOKING_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                payload.wedding_id,
                payload.event_id,
                payload.vendor_id,
                payload.time_slot,
                payload.estimated_cost,
                payload.couple_notes,
            ),
        )
        if not row:
            raise VendorRepositoryError("Failed to create booking", operation="create_booking")
        return cls._row_to_booking(row)

    @classmethod
    async def update(cls, booking_id: str, values: dict) -> Booking | None:
        if not values:
            return await cls.get(booking_id)
        query, params = build_update("bookings", values, {"id": booking_id}, cls.BOOKING_COLUMNS)
        return cls._row_to_booking(await fetch_one(query, params))
