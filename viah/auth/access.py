"""
access.py
---------
Ownership checks shared by the feature routers.

A wedding belongs to the user who created it (weddings.user_id). A vendor
profile belongs to its claiming user (vendors.user_id) or to a token whose
`vendor_id` claim names it. Conversation participants are the owning couple
and the vendor.
"""

from fastapi import HTTPException, status

from viah.features.planning.domain import Wedding
from viah.features.planning.repository import WeddingRepository
from viah.features.vendors.domain import Vendor
from viah.features.vendors.repository import VendorRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def owns_vendor(claims: dict, vendor: Vendor) -> bool:
    return claims.get("vendor_id") == vendor.id or (
        vendor.user_id is not None and vendor.user_id == claims.get("sub")
    )


async def ensure_wedding_access(claims: dict, wedding_id: str) -> Wedding:
    """Load the wedding or fail with 404/403 for non-owners."""
    wedding = await WeddingRepository.get(wedding_id)
    if not wedding:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wedding not found")

    if wedding.user_id != claims.get("sub"):
        logger.warning("Wedding access denied", user_id=claims.get("sub"), wedding_id=wedding_id)
        raise _forbidden("You do not have access to this wedding")

    return wedding


async def ensure_vendor_access(claims: dict, vendor_id: str) -> Vendor:
    """Load the vendor or fail with 404/403 when the caller does not manage it."""
    vendor = await VendorRepository.get(vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")

    if not owns_vendor(claims, vendor):
        logger.warning("Vendor access denied", user_id=claims.get("sub"), vendor_id=vendor_id)
        raise _forbidden("You do not have access to this vendor account")

    return vendor


async def resolve_participant(claims: dict, wedding_id: str, vendor_id: str) -> str:
    """
    Return "couple" or "vendor" for a caller taking part in the
    (wedding, vendor) thread, or raise 403/404.
    """
    wedding = await WeddingRepository.get(wedding_id)
    if not wedding:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wedding not found")
    if wedding.user_id == claims.get("sub"):
        return "couple"

    vendor = await VendorRepository.get(vendor_id)
    if vendor and owns_vendor(claims, vendor):
        return "vendor"

    raise _forbidden("You are not a participant in this conversation")
