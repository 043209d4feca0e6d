"""
Domain subpackage for vendors and bookings.
"""

from .models import (
    Booking,
    BookingCreate,
    BookingStatus,
    BookingUpdate,
    DuplicateMatch,
    Vendor,
    VendorSubmission,
)

__all__ = [
    "Booking",
    "BookingCreate",
    "BookingStatus",
    "BookingUpdate",
    "DuplicateMatch",
    "Vendor",
    "VendorSubmission",
]
