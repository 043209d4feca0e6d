"""
Notification entries shown in the couple's header bell.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class Notification(BaseModel):
    id: str
    type: Literal["unread_message"] = "unread_message"
    title: str
    description: str
    link: str
    created_at: datetime | None = None


class NotificationSummary(BaseModel):
    notifications: list[Notification] = Field(default_factory=list)
    total_count: int = 0
    unread_message_count: int = 0
