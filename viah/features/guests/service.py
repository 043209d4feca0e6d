"""
Guest list service - household membership checks, spreadsheet-style bulk
import and RSVP headcounts.
"""

from collections import Counter
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from viah.features.guests.domain import (
    BulkGuestError,
    BulkGuestResult,
    Guest,
    GuestCreate,
    GuestSummary,
    GuestUpdate,
)
from viah.features.guests.repository import GuestRepository, HouseholdRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class GuestServiceError(Exception):
    code = "guest_error"


class HouseholdMismatchError(GuestServiceError):
    code = "household_mismatch"


async def _check_household(wedding_id: str, household_id: str | None, seen: dict[str, str] | None = None) -> None:
    """A guest may only join a household of the same wedding."""
    if household_id is None:
        return
    if seen is not None and household_id in seen:
        owner = seen[household_id]
    else:
        household = await HouseholdRepository.get(household_id)
        owner = household.wedding_id if household else ""
        if seen is not None:
            seen[household_id] = owner
    if owner != wedding_id:
        raise HouseholdMismatchError(f"Household {household_id} is not part of this wedding")


async def add_guest(wedding_id: str, payload: GuestCreate) -> Guest:
    await _check_household(wedding_id, payload.household_id)
    return await GuestRepository.create(wedding_id, payload)


async def update_guest(guest: Guest, payload: GuestUpdate) -> Guest | None:
    if "household_id" in payload.model_fields_set:
        await _check_household(guest.wedding_id, payload.household_id)
    return await GuestRepository.update(guest.id, payload)


async def import_guests(wedding_id: str, rows: list[Any]) -> BulkGuestResult:
    """
    Create guests row by row. Rows that fail validation or name a foreign
    household are reported by index; the remaining rows are still created.
    """
    created: list[Guest] = []
    errors: list[BulkGuestError] = []
    households: dict[str, str] = {}

    for index, row in enumerate(rows):
        try:
            payload = GuestCreate.model_validate(row)
            await _check_household(wedding_id, payload.household_id, households)
        except ValidationError as e:
            errors.append(BulkGuestError(index=index, data=row, error=_first_error(e)))
            continue
        except HouseholdMismatchError as e:
            errors.append(BulkGuestError(index=index, data=row, error=str(e)))
            continue
        created.append(await GuestRepository.create(wedding_id, payload))

    logger.info("Guest import finished", wedding_id=wedding_id, created=len(created), failed=len(errors))
    return BulkGuestResult(success=len(created), failed=len(errors), guests=created, errors=errors)


def _first_error(e: ValidationError) -> str:
    first = e.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def guest_summary(guests: Iterable[Guest]) -> GuestSummary:
    """RSVP counts; expected headcount is confirmed guests plus their plus-ones."""
    guests = list(guests)
    statuses = Counter(guest.rsvp_status for guest in guests)
    confirmed_plus_ones = sum(1 for g in guests if g.rsvp_status == "confirmed" and g.plus_one)
    return GuestSummary(
        total=len(guests),
        confirmed=statuses["confirmed"],
        pending=statuses["pending"],
        declined=statuses["declined"],
        plus_ones=sum(1 for g in guests if g.plus_one),
        expected_headcount=statuses["confirmed"] + confirmed_plus_ones,
        by_side=dict(Counter(guest.side for guest in guests)),
    )
