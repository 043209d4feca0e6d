"""
Vendor and booking records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from viah.models.records import Record

BookingStatus = Literal["pending", "confirmed", "declined", "cancelled"]


class Vendor(Record):
    id: str
    user_id: str | None = None
    name: str
    categories: list[str] = Field(default_factory=list)
    city: str
    email: str | None = None
    phone: str | None = None
    starting_price: float | None = None

    @property
    def primary_category(self) -> str | None:
        return self.categories[0] if self.categories else None


class VendorSubmission(BaseModel):
    name: str = Field(..., min_length=1)
    categories: list[str] = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    email: str | None = None
    phone: str | None = None
    starting_price: float | None = Field(default=None, ge=0)
    confirm_not_duplicate: bool = False


class Booking(Record):
    id: str
    wedding_id: str
    event_id: str | None = None
    vendor_id: str
    status: BookingStatus = "pending"
    time_slot: str | None = None
    request_date: datetime | None = None
    confirmed_date: datetime | None = None
    declined_date: datetime | None = None
    estimated_cost: float | None = None
    couple_notes: str | None = None
    vendor_notes: str | None = None


class BookingCreate(BaseModel):
    wedding_id: str
    vendor_id: str
    event_id: str | None = None
    time_slot: str | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    couple_notes: str | None = None


class BookingUpdate(BaseModel):
    status: BookingStatus | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    couple_notes: str | None = None
    vendor_notes: str | None = None


@dataclass(slots=True)
class DuplicateMatch:
    """An existing vendor that looks like the one being submitted."""

    vendor_id: str
    vendor_name: str
    confidence: float
    reasons: list[str] = field(default_factory=list)
