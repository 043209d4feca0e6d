"""
Household and guest records.

A household is the unit invitations go to ("The Patel Family", four seats);
guests may belong to one or stand alone.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from viah.models.records import Record

Side = Literal["bride", "groom", "mutual"]
RelationshipTier = Literal["immediate_family", "extended_family", "friend", "parents_friend"]
PriorityTier = Literal["must_invite", "should_invite", "nice_to_have"]
RsvpStatus = Literal["pending", "confirmed", "declined"]


class Household(Record):
    id: str
    wedding_id: str
    name: str
    contact_email: str | None = None
    max_count: int = 1
    affiliation: Side = "bride"
    relationship_tier: RelationshipTier = "friend"
    priority_tier: PriorityTier = "should_invite"
    created_at: datetime | None = None


class Guest(Record):
    id: str
    wedding_id: str
    household_id: str | None = None
    name: str
    email: str | None = None
    phone: str | None = None
    side: Side = "mutual"
    relationship_tier: RelationshipTier | None = None
    event_ids: list[str] = Field(default_factory=list)
    rsvp_status: RsvpStatus = "pending"
    plus_one: bool = False
    dietary_restrictions: str | None = None


class HouseholdCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact_email: str | None = Field(default=None, max_length=320)
    max_count: int = Field(default=1, ge=1)
    affiliation: Side = "bride"
    relationship_tier: RelationshipTier = "friend"
    priority_tier: PriorityTier = "should_invite"


class HouseholdUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    contact_email: str | None = Field(default=None, max_length=320)
    max_count: int | None = Field(default=None, ge=1)
    affiliation: Side | None = None
    relationship_tier: RelationshipTier | None = None
    priority_tier: PriorityTier | None = None


class GuestCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    household_id: str | None = None
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=40)
    side: Side = "mutual"
    relationship_tier: RelationshipTier | None = None
    event_ids: list[str] = Field(default_factory=list)
    rsvp_status: RsvpStatus = "pending"
    plus_one: bool = False
    dietary_restrictions: str | None = None


class GuestUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    household_id: str | None = None
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=40)
    side: Side | None = None
    relationship_tier: RelationshipTier | None = None
    event_ids: list[str] | None = None
    rsvp_status: RsvpStatus | None = None
    plus_one: bool | None = None
    dietary_restrictions: str | None = None


class GuestImportRequest(BaseModel):
    guests: list[Any] = Field(..., max_length=2000)


class BulkGuestError(BaseModel):
    index: int
    data: Any = None
    error: str


class BulkGuestResult(BaseModel):
    """Outcome of an import: rows that failed validation do not stop the rest."""

    success: int
    failed: int
    guests: list[Guest]
    errors: list[BulkGuestError] = Field(default_factory=list)


class GuestSummary(BaseModel):
    total: int = 0
    confirmed: int = 0
    pending: int = 0
    declined: int = 0
    plus_ones: int = 0
    expected_headcount: int = 0
    by_side: dict[str, int] = Field(default_factory=dict)
