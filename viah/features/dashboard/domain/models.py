"""
Dashboard widget records and request payloads.
"""

from typing import Any

from pydantic import BaseModel, Field

from viah.models.records import Record


class DashboardWidget(Record):
    id: str
    wedding_id: str
    widget_type: str
    position: int = 0
    is_visible: bool = True
    config: dict[str, Any] = Field(default_factory=dict)


class WidgetUpdate(BaseModel):
    """Only layout fields are client-editable; anything else in the body is ignored."""

    is_visible: bool | None = None
    position: int | None = Field(default=None, ge=0)
    config: dict[str, Any] | None = None


class WidgetReorderRequest(BaseModel):
    wedding_id: str
    widget_ids: list[str] = Field(..., min_length=1)
