"""
Wedding and event records.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from viah.models.records import Record


class Wedding(Record):
    id: str
    user_id: str
    tradition: str
    role: str = "couple"
    partner1_name: str | None = None
    partner2_name: str | None = None
    couple_email: str | None = None
    wedding_date: datetime | None = None
    location: str
    guest_count_estimate: int | None = None
    total_budget: float | None = None
    status: str = "planning"
    created_at: datetime | None = None

    @property
    def couple_name(self) -> str:
        names = [n for n in (self.partner1_name, self.partner2_name) if n]
        return " & ".join(names) if names else "Couple"


class Event(Record):
    id: str
    wedding_id: str
    name: str
    type: str
    date: datetime | None = None
    time: str | None = None
    location: str | None = None
    guest_count: int | None = None
    order: int = 0


class WeddingCreate(BaseModel):
    tradition: str
    role: str = "couple"
    partner1_name: str | None = None
    partner2_name: str | None = None
    couple_email: str | None = None
    wedding_date: datetime | None = None
    location: str
    guest_count_estimate: int | None = Field(default=None, ge=0)
    total_budget: float | None = Field(default=None, ge=0)


class WeddingUpdate(BaseModel):
    tradition: str | None = None
    partner1_name: str | None = None
    partner2_name: str | None = None
    couple_email: str | None = None
    wedding_date: datetime | None = None
    location: str | None = None
    guest_count_estimate: int | None = Field(default=None, ge=0)
    total_budget: float | None = Field(default=None, ge=0)
    status: str | None = None


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: str
    date: datetime | None = None
    time: str | None = None
    location: str | None = None
    guest_count: int | None = Field(default=None, ge=0)
    order: int = 0


class EventUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    type: str | None = None
    date: datetime | None = None
    time: str | None = None
    location: str | None = None
    guest_count: int | None = Field(default=None, ge=0)
    order: int | None = None
