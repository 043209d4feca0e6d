"""
Messaging records and the derived conversation shapes.

Message and ConversationStatus mirror table rows. Conversation is the
read model the inbox works with: one (wedding, vendor, optional event)
thread with its unread count, latest message and booking context.
VendorGroup is the two-level navigation node built from conversations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from viah.models.records import Record

SenderType = Literal["couple", "vendor", "system"]
ParticipantType = Literal["couple", "vendor"]
MessageType = Literal[
    "message", "booking_request", "booking_confirmed", "booking_declined", "status_update"
]
ConversationState = Literal["open", "closed"]


class Message(Record):
    id: str
    conversation_id: str
    wedding_id: str
    vendor_id: str
    event_id: str | None = None
    sender_id: str
    sender_type: SenderType
    content: str
    attachments: list[Any] | None = None
    is_read: bool = False
    message_type: MessageType = "message"
    booking_id: str | None = None
    created_at: datetime | None = None


class MessageCreate(BaseModel):
    wedding_id: str
    vendor_id: str
    event_id: str | None = None
    content: str = Field(..., max_length=5000)
    attachments: list[Any] | None = None

    @field_validator("content")
    @classmethod
    def _strip_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message content cannot be empty")
        return value


class ConversationStatus(Record):
    conversation_id: str
    wedding_id: str | None = None
    vendor_id: str | None = None
    event_id: str | None = None
    status: ConversationState = "open"
    closed_by: str | None = None
    closed_by_type: ParticipantType | None = None
    closure_reason: str | None = None
    closed_at: datetime | None = None

    @property
    def is_closed(self) -> bool:
        return self.status == "closed"


class CloseConversationRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class LastMessage(BaseModel):
    content: str
    sender_type: SenderType
    created_at: datetime | None = None


class Conversation(BaseModel):
    conversation_id: str
    wedding_id: str
    vendor_id: str
    event_id: str | None = None
    vendor_name: str | None = None
    vendor_category: str | None = None
    event_name: str | None = None
    couple_name: str | None = None
    unread_count: int = 0
    total_messages: int = 0
    last_message: LastMessage | None = None
    first_message_at: datetime | None = None
    last_message_at: datetime | None = None
    booking_id: str | None = None
    booking_status: str | None = None


@dataclass(slots=True)
class VendorGroup:
    """All conversations with one vendor, in input order, with their summed unread count."""

    vendor_id: str
    vendor_name: str | None
    vendor_category: str | None
    events: list[Conversation] = field(default_factory=list)
    total_unread: int = 0
