"""
Vendor lead records and request payloads.
"""

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, Field

from viah.models.records import Record

LeadStatus = Literal[
    "new", "contacted", "qualified", "proposal_sent", "negotiating", "won", "lost", "nurturing"
]
LeadPriority = Literal["hot", "warm", "medium", "cold"]

LEAD_STATUSES: tuple[str, ...] = get_args(LeadStatus)
LEAD_PRIORITIES: tuple[str, ...] = get_args(LeadPriority)
CLOSED_LEAD_STATUSES = frozenset({"won", "lost"})


class VendorLead(Record):
    id: str
    vendor_id: str
    wedding_id: str | None = None
    booking_id: str | None = None
    couple_name: str
    couple_email: str | None = None
    couple_phone: str | None = None
    source_type: str = "manual"
    status: LeadStatus = "new"
    priority: LeadPriority = "medium"
    event_date: datetime | None = None
    estimated_budget: float | None = None
    guest_count: int | None = None
    notes: str | None = None
    urgency_score: int = 50
    budget_fit_score: int = 50
    engagement_score: int = 50
    qualification_score: int = 25
    overall_score: int = 50
    next_follow_up_at: datetime | None = None
    last_contacted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LeadActivity(Record):
    id: str
    lead_id: str
    activity_type: str
    description: str
    performed_by: str | None = None
    created_at: datetime | None = None


class LeadCreate(BaseModel):
    couple_name: str = Field(..., min_length=1, max_length=200)
    couple_email: str | None = Field(default=None, max_length=320)
    couple_phone: str | None = None
    source_type: str = "manual"
    event_date: datetime | None = None
    estimated_budget: float | None = Field(default=None, ge=0)
    guest_count: int | None = Field(default=None, ge=0)
    city: str | None = None
    tradition: str | None = None
    notes: str | None = None
    next_follow_up_at: datetime | None = None


class LeadUpdate(BaseModel):
    status: LeadStatus | None = None
    priority: LeadPriority | None = None
    notes: str | None = None
    next_follow_up_at: datetime | None = None
    engagement_score: int | None = Field(default=None, ge=0, le=100)


class ActivityCreate(BaseModel):
    activity_type: str = Field(default="note", min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=2000)
