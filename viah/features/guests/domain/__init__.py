"""
Domain subpackage for the guest list.
"""

from .models import (
    BulkGuestError,
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

__all__ = [
    "BulkGuestError",
    "BulkGuestResult",
    "Guest",
    "GuestCreate",
    "GuestImportRequest",
    "GuestSummary",
    "GuestUpdate",
    "Household",
    "HouseholdCreate",
    "HouseholdUpdate",
]
