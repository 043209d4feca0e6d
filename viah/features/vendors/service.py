"""
Vendor submissions and booking lifecycle.

A booking request notifies the vendor through a system message in the
couple/vendor thread and lands in the vendor's lead pipeline. Vendors
answer requests by changing the status; couples may only edit their notes.
"""

from datetime import UTC, datetime

from viah.db.helpers import DatabaseError
from viah.features.leads.service import create_booking_lead
from viah.features.messaging.service import post_system_message
from viah.features.planning.domain import Wedding
from viah.features.vendors.domain import (
    Booking,
    BookingCreate,
    BookingUpdate,
    DuplicateMatch,
    Vendor,
    VendorSubmission,
)
from viah.features.vendors.duplicates import find_duplicate_vendors
from viah.features.vendors.repository import BookingRepository, VendorRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

COUPLE_EDITABLE = frozenset({"couple_notes"})
VENDOR_EDITABLE = frozenset({"status", "estimated_cost", "vendor_notes"})

STATUS_MESSAGE_TYPES = {
    "confirmed": "booking_confirmed",
    "declined": "booking_declined",
}


class VendorServiceError(Exception):
    code = "vendor_error"


class DuplicateVendorError(VendorServiceError):
    """Submission looks like one or more existing vendors."""

    code = "duplicate_vendor"

    def __init__(self, matches: list[DuplicateMatch]):
        super().__init__("A similar vendor already exists")
        self.matches = matches


class BookingNotFoundError(VendorServiceError):
    code = "booking_not_found"


class BookingPermissionError(VendorServiceError):
    code = "booking_forbidden"


async def submit_vendor(user_id: str, submission: VendorSubmission) -> Vendor:
    """
    Create a vendor listing unless it looks like an existing one.

    Raises:
        DuplicateVendorError: possible duplicates found and the submitter
            has not confirmed the listing is distinct
    """
    if not submission.confirm_not_duplicate:
        candidates = await VendorRepository.find_candidates(submission)
        matches = find_duplicate_vendors(submission, candidates)
        if matches:
            logger.info(
                "Vendor submission matched existing vendors",
                name=submission.name,
                city=submission.city,
                match_count=len(matches),
            )
            raise DuplicateVendorError(matches)

    vendor = await VendorRepository.create(user_id, submission)
    logger.info("Vendor submitted", vendor_id=vendor.id, user_id=user_id)
    return vendor


def _booking_request_text(wedding: Wedding, vendor: Vendor, payload: BookingCreate) -> str:
    text = f"{wedding.couple_name} sent a booking request to {vendor.name}."
    if payload.time_slot:
        text += f" Requested time: {payload.time_slot}."
    if payload.couple_notes:
        text += f" Notes: {payload.couple_notes}"
    return text


async def create_booking(wedding: Wedding, vendor: Vendor, payload: BookingCreate) -> Booking:
    booking = await BookingRepository.create(payload)
    logger.info(
        "Booking requested", booking_id=booking.id, wedding_id=wedding.id, vendor_id=vendor.id
    )

    await post_system_message(
        wedding_id=wedding.id,
        vendor_id=vendor.id,
        event_id=booking.event_id,
        sender_id=wedding.user_id,
        content=_booking_request_text(wedding, vendor, payload),
        message_type="booking_request",
        booking_id=booking.id,
    )

    try:
        await create_booking_lead(vendor_id=vendor.id, wedding=wedding, booking=booking)
    except DatabaseError as e:
        # The booking stands even if the lead pipeline write fails.
        logger.warning(
            "Lead creation failed for booking", booking_id=booking.id, error=str(e)
        )

    return booking


def _status_text(vendor_name: str, status: str) -> str:
    if status == "confirmed":
        return f"{vendor_name} confirmed your booking request."
    if status == "declined":
        return f"{vendor_name} declined your booking request."
    return f"Booking status updated to {status}."


async def update_booking(
    booking: Booking,
    payload: BookingUpdate,
    *,
    actor: str,
    actor_id: str,
    vendor: Vendor,
) -> Booking:
    """
    Apply a participant's edit.

    Raises:
        BookingPermissionError: the actor tried to change a field they do not own
        BookingNotFoundError: booking disappeared before the update
    """
    values = payload.model_dump(exclude_unset=True)
    allowed = VENDOR_EDITABLE if actor == "vendor" else COUPLE_EDITABLE
    forbidden = sorted(set(values) - allowed)
    if forbidden:
        raise BookingPermissionError(f"{actor.capitalize()}s cannot change: {', '.join(forbidden)}")

    new_status = values.get("status")
    status_changed = new_status is not None and new_status != booking.status
    if status_changed and new_status == "confirmed":
        values["confirmed_date"] = datetime.now(UTC)
    elif status_changed and new_status == "declined":
        values["declined_date"] = datetime.now(UTC)

    updated = await BookingRepository.update(booking.id, values)
    if not updated:
        raise BookingNotFoundError("Booking not found")

    if status_changed:
        logger.info(
            "Booking status changed",
            booking_id=booking.id,
            old_status=booking.status,
            new_status=new_status,
        )
        await post_system_message(
            wedding_id=updated.wedding_id,
            vendor_id=updated.vendor_id,
            event_id=updated.event_id,
            sender_id=actor_id,
            content=_status_text(vendor.name, new_status),
            message_type=STATUS_MESSAGE_TYPES.get(new_status, "status_update"),
            booking_id=updated.id,
        )

    return updated
