"""
Guest list routes.

Usage:
    1. GET/POST  /api/households/{wedding_id}
    2. GET/PATCH/DELETE /api/households/item/{household_id}
    3. GET       /api/guests/{wedding_id}?side=&rsvp_status=
    4. POST      /api/guests/{wedding_id}
    5. POST      /api/guests/{wedding_id}/bulk      - Import rows, per-row errors
    6. GET       /api/guests/{wedding_id}/summary   - RSVP counts and headcount
    7. GET       /api/guests/by-household/{household_id}
    8. PATCH/DELETE /api/guests/item/{guest_id}
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from viah.auth.access import ensure_wedding_access
from viah.auth.verify import auth_dependency
from viah.features.guests import service
from viah.features.guests.domain import (
    BulkGuestResult,
    Guest,
    GuestCreate,
    GuestImportRequest,
    GuestSummary,
    GuestUpdate,
    Household,
    HouseholdCreate,
    HouseholdUpdate,
)
from viah.features.guests.repository import GuestRepository, HouseholdRepository
from viah.features.guests.service import HouseholdMismatchError
from viah.infrastructure.observability.logging import get_logger

router = APIRouter(prefix="/api", tags=["guests"])
logger = get_logger(__name__)


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


def _mismatch(e: HouseholdMismatchError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail={"code": e.code, "message": str(e)}
    )


async def _load_household(claims: dict, household_id: str) -> Household:
    household = await HouseholdRepository.get(household_id)
    if not household:
        raise _not_found("Household")
    await ensure_wedding_access(claims, household.wedding_id)
    return household


async def _load_guest(claims: dict, guest_id: str) -> Guest:
    guest = await GuestRepository.get(guest_id)
    if not guest:
        raise _not_found("Guest")
    await ensure_wedding_access(claims, guest.wedding_id)
    return guest


# Households


@router.get("/households/{wedding_id}", response_model=list[Household])
async def list_households(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await HouseholdRepository.list_for_wedding(wedding_id)


@router.post("/households/{wedding_id}", response_model=Household, status_code=status.HTTP_201_CREATED)
async def create_household(
    wedding_id: str, payload: HouseholdCreate, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    return await HouseholdRepository.create(wedding_id, payload)


@router.get("/households/item/{household_id}", response_model=Household)
async def get_household(household_id: str, claims: dict = Depends(auth_dependency)):
    return await _load_household(claims, household_id)


@router.patch("/households/item/{household_id}", response_model=Household)
async def update_household(
    household_id: str, payload: HouseholdUpdate, claims: dict = Depends(auth_dependency)
):
    await _load_household(claims, household_id)
    household = await HouseholdRepository.update(household_id, payload)
    if not household:
        raise _not_found("Household")
    return household


@router.delete("/households/item/{household_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_household(household_id: str, claims: dict = Depends(auth_dependency)):
    await _load_household(claims, household_id)
    await HouseholdRepository.delete(household_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Guests


@router.get("/guests/by-household/{household_id}", response_model=list[Guest])
async def list_household_guests(household_id: str, claims: dict = Depends(auth_dependency)):
    await _load_household(claims, household_id)
    return await GuestRepository.list_for_household(household_id)


@router.get("/guests/{wedding_id}", response_model=list[Guest])
async def list_guests(
    wedding_id: str,
    side: str | None = Query(default=None),
    rsvp_status: str | None = Query(default=None),
    claims: dict = Depends(auth_dependency),
):
    await ensure_wedding_access(claims, wedding_id)
    guests = await GuestRepository.list_for_wedding(wedding_id)
    return [
        guest
        for guest in guests
        if (side is None or guest.side == side) and (rsvp_status is None or guest.rsvp_status == rsvp_status)
    ]


@router.get("/guests/{wedding_id}/summary", response_model=GuestSummary)
async def summarize_guests(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return service.guest_summary(await GuestRepository.list_for_wedding(wedding_id))


@router.post("/guests/{wedding_id}", response_model=Guest, status_code=status.HTTP_201_CREATED)
async def create_guest(wedding_id: str, payload: GuestCreate, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    try:
        return await service.add_guest(wedding_id, payload)
    except HouseholdMismatchError as e:
        raise _mismatch(e) from e


@router.post("/guests/{wedding_id}/bulk", response_model=BulkGuestResult)
async def import_guests(
    wedding_id: str, payload: GuestImportRequest, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    return await service.import_guests(wedding_id, payload.guests)


@router.patch("/guests/item/{guest_id}", response_model=Guest)
async def update_guest(guest_id: str, payload: GuestUpdate, claims: dict = Depends(auth_dependency)):
    guest = await _load_guest(claims, guest_id)
    try:
        updated = await service.update_guest(guest, payload)
    except HouseholdMismatchError as e:
        raise _mismatch(e) from e
    if not updated:
        raise _not_found("Guest")
    if payload.rsvp_status is not None and payload.rsvp_status != guest.rsvp_status:
        logger.info("Guest RSVP changed", guest_id=guest_id, rsvp_status=payload.rsvp_status)
    return updated


@router.delete("/guests/item/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(guest_id: str, claims: dict = Depends(auth_dependency)):
    await _load_guest(claims, guest_id)
    await GuestRepository.delete(guest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
