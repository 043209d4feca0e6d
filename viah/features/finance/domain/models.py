"""
Budget categories, expenses and vendor contracts.

Contract.payment_milestones is stored as JSONB but historically arrived
either as a JSON-encoded string or as an array. It is parsed exactly once,
here, into a typed list; downstream code never sees the raw shape.
"""

import json
from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from viah.infrastructure.observability.logging import get_logger
from viah.models.records import Record

logger = get_logger(__name__)

PaymentStatus = Literal["unpaid", "partial", "paid"]


class BudgetCategory(Record):
    id: str
    wedding_id: str
    slug: str
    display_name: str
    allocated_amount: float = 0.0


class Expense(Record):
    id: str
    wedding_id: str
    event_id: str | None = None
    category_id: str | None = None
    parent_category: str | None = None
    description: str
    amount: float
    amount_paid: float = 0.0
    payment_status: PaymentStatus = "unpaid"
    status: str = "estimated"
    expense_date: datetime | None = None
    created_at: datetime | None = None


class PaymentMilestone(BaseModel):
    name: str = "Payment"
    amount: float = 0.0
    due_date: datetime | None = Field(
        default=None, validation_alias=AliasChoices("due_date", "dueDate")
    )
    status: str = "pending"
    paid_date: datetime | None = Field(
        default=None, validation_alias=AliasChoices("paid_date", "paidDate")
    )


def parse_milestones(raw: Any) -> list[dict[str, Any]]:
    """
    Normalise a persisted milestone field to a list of objects.

    A JSON string is decoded; a list is taken as is; anything else, and
    malformed JSON, yields an empty list. Non-object entries are dropped.
    """
    if isinstance(raw, str | bytes):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


class Contract(Record):
    id: str
    wedding_id: str
    event_id: str | None = None
    vendor_id: str
    total_amount: float
    payment_milestones: list[PaymentMilestone] = Field(default_factory=list)
    status: str = "active"

    @field_validator("payment_milestones", mode="before")
    @classmethod
    def _parse_milestones(cls, value: Any) -> list[PaymentMilestone]:
        if isinstance(value, list):
            value = [m.model_dump() if isinstance(m, PaymentMilestone) else m for m in value]
        milestones = []
        for entry in parse_milestones(value):
            try:
                milestones.append(PaymentMilestone.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping malformed payment milestone", error=str(e))
        return milestones


class CategoryCreate(BaseModel):
    slug: str = Field(..., pattern=r"^[a-z0-9_-]+$")
    display_name: str = Field(..., min_length=1)
    allocated_amount: float = Field(default=0.0, ge=0)


class CategoryUpdate(BaseModel):
    display_name: str | None = Field(default=None, min_length=1)
    allocated_amount: float | None = Field(default=None, ge=0)


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    amount_paid: float = Field(default=0.0, ge=0)
    payment_status: PaymentStatus = "unpaid"
    status: str = "estimated"
    event_id: str | None = None
    category_id: str | None = None
    parent_category: str | None = None
    expense_date: datetime | None = None


class ExpenseUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1)
    amount: float | None = Field(default=None, ge=0)
    amount_paid: float | None = Field(default=None, ge=0)
    payment_status: PaymentStatus | None = None
    status: str | None = None
    event_id: str | None = None
    category_id: str | None = None
    parent_category: str | None = None
    expense_date: datetime | None = None


class ContractCreate(BaseModel):
    vendor_id: str
    event_id: str | None = None
    total_amount: float = Field(..., ge=0)
    payment_milestones: list[PaymentMilestone] = Field(default_factory=list)
    status: str = "active"


class ContractUpdate(BaseModel):
    total_amount: float | None = Field(default=None, ge=0)
    payment_milestones: list[PaymentMilestone] | None = None
    status: str | None = None
