"""
Vendor and booking routes.

Usage:
    1. POST  /api/vendors/submit              - New listing (409 on likely duplicates)
    2. GET   /api/vendors/{vendor_id}         - Vendor profile
    3. POST  /api/bookings                    - Couple requests a vendor
    4. GET   /api/bookings/wedding/{id}       - Couple's bookings
    5. GET   /api/bookings/vendor/{id}        - Vendor's booking requests
    6. PATCH /api/bookings/{booking_id}       - Vendor status / couple notes
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from viah.auth.access import ensure_vendor_access, ensure_wedding_access, resolve_participant
from viah.auth.verify import auth_dependency
from viah.features.vendors.domain import Booking, BookingCreate, BookingUpdate, Vendor, VendorSubmission
from viah.features.vendors.repository import BookingRepository, VendorRepository
from viah.features.vendors.service import (
    BookingNotFoundError,
    BookingPermissionError,
    DuplicateVendorError,
    create_booking,
    submit_vendor,
    update_booking,
)

router = APIRouter(prefix="/api", tags=["vendors"])


@router.post("/vendors/submit", response_model=Vendor, status_code=status.HTTP_201_CREATED)
async def submit(payload: VendorSubmission, claims: dict = Depends(auth_dependency)):
    try:
        return await submit_vendor(claims["sub"], payload)
    except DuplicateVendorError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": e.code,
                "message": str(e),
                "matches": [asdict(match) for match in e.matches],
            },
        ) from e


@router.get("/vendors/{vendor_id}", response_model=Vendor)
async def get_vendor(vendor_id: str, claims: dict = Depends(auth_dependency)):
    vendor = await VendorRepository.get(vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")
    return vendor


@router.post("/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def request_booking(payload: BookingCreate, claims: dict = Depends(auth_dependency)):
    wedding = await ensure_wedding_access(claims, payload.wedding_id)
    vendor = await VendorRepository.get(payload.vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")
    return await create_booking(wedding, vendor, payload)


@router.get("/bookings/wedding/{wedding_id}", response_model=list[Booking])
async def wedding_bookings(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await BookingRepository.list_for_wedding(wedding_id)


@router.get("/bookings/vendor/{vendor_id}", response_model=list[Booking])
async def vendor_bookings(vendor_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_vendor_access(claims, vendor_id)
    return await BookingRepository.list_for_vendor(vendor_id)


@router.patch("/bookings/{booking_id}", response_model=Booking)
async def patch_booking(
    booking_id: str, payload: BookingUpdate, claims: dict = Depends(auth_dependency)
):
    booking = await BookingRepository.get(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

    actor = await resolve_participant(claims, booking.wedding_id, booking.vendor_id)
    vendor = await VendorRepository.get(booking.vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")

    try:
        return await update_booking(
            booking, payload, actor=actor, actor_id=claims["sub"], vendor=vendor
        )
    except BookingPermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail={"code": e.code, "message": str(e)}
        ) from e
    except BookingNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
