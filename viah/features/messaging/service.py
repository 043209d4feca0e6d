"""
Messaging service - conversation listing, sending and the open -> closed
state machine.

Sending is allowed only while a conversation is open. Closing is one-way:
there is no reopen operation, and closing twice returns the first closure.
Errors carry a stable `code` so the HTTP layer and the client can branch
on kind rather than on message text.
"""

import asyncio
from collections.abc import Iterable

from viah.features.messaging.domain import (
    Conversation,
    ConversationStatus,
    LastMessage,
    Message,
    MessageCreate,
)
from viah.features.messaging.hub import CONVERSATION_CLOSED, MESSAGE_CREATED, conversation_hub
from viah.features.messaging.ids import generate_conversation_id, parse_conversation_id
from viah.features.messaging.repository import ConversationStatusRepository, MessageRepository
from viah.features.notifications.cache import invalidate_couple_summary
from viah.features.planning.domain import Event
from viah.features.planning.repository import EventRepository, WeddingRepository
from viah.features.vendors.domain import Booking, Vendor
from viah.features.vendors.repository import BookingRepository, VendorRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

CLOSED_CONVERSATION_MESSAGE = "This inquiry has been closed and no new messages can be sent."


class MessagingError(Exception):
    """Base error for messaging operations; `code` is the machine-readable kind."""

    code = "messaging_error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class ConversationClosedError(MessagingError):
    code = "conversation_closed"

    def __init__(self, conversation_id: str):
        super().__init__(CLOSED_CONVERSATION_MESSAGE)
        self.conversation_id = conversation_id


class MessageNotFoundError(MessagingError):
    code = "message_not_found"


class CloseNotAllowedError(MessagingError):
    code = "close_not_allowed"


# =================================================================
# Status / state machine
# =================================================================


async def get_conversation_status(conversation_id: str) -> ConversationStatus:
    """Stored status, or an implicit open status for conversations never closed."""
    parse_conversation_id(conversation_id)
    status = await ConversationStatusRepository.get(conversation_id)
    return status or ConversationStatus(conversation_id=conversation_id, status="open")


async def close_conversation(
    conversation_id: str, *, closed_by: str, closed_by_type: str, reason: str | None = None
) -> ConversationStatus:
    """
    Close an inquiry. Only the couple side may close; closing is idempotent.

    Raises:
        CloseNotAllowedError: caller is not the couple
    """
    ref = parse_conversation_id(conversation_id)
    if closed_by_type != "couple":
        raise CloseNotAllowedError("Only the couple can close this inquiry")

    existing = await ConversationStatusRepository.get(conversation_id)
    if existing and existing.is_closed:
        logger.info("Conversation already closed", conversation_id=conversation_id)
        return existing

    status = await ConversationStatusRepository.close(
        conversation_id=conversation_id,
        wedding_id=ref.wedding_id,
        vendor_id=ref.vendor_id,
        event_id=ref.event_id,
        closed_by=closed_by,
        closed_by_type=closed_by_type,
        reason=reason,
    )
    conversation_hub.publish(conversation_id, CONVERSATION_CLOSED, status.model_dump(mode="json"))
    return status


# =================================================================
# Messages
# =================================================================


async def send_message(payload: MessageCreate, *, sender_id: str, sender_type: str) -> Message:
    """
    Persist a participant message.

    Raises:
        ConversationClosedError: the conversation was closed, possibly by the
            other party after this sender last looked
    """
    conversation_id = generate_conversation_id(
        payload.wedding_id, payload.vendor_id, payload.event_id
    )

    status = await ConversationStatusRepository.get(conversation_id)
    if status and status.is_closed:
        logger.info(
            "Message rejected for closed conversation",
            conversation_id=conversation_id,
            sender_type=sender_type,
        )
        raise ConversationClosedError(conversation_id)

    message = await MessageRepository.create(
        conversation_id=conversation_id,
        wedding_id=payload.wedding_id,
        vendor_id=payload.vendor_id,
        event_id=payload.event_id,
        sender_id=sender_id,
        sender_type=sender_type,
        content=payload.content,
        attachments=payload.attachments,
    )
    await _message_created(message)

    logger.info(
        "Message sent",
        conversation_id=conversation_id,
        sender_type=sender_type,
        message_id=message.id,
    )
    return message


async def post_system_message(
    *,
    wedding_id: str,
    vendor_id: str,
    event_id: str | None,
    sender_id: str,
    content: str,
    message_type: str,
    booking_id: str | None = None,
) -> Message:
    """Booking lifecycle notices; recorded even when the thread is closed."""
    message = await MessageRepository.create(
        conversation_id=generate_conversation_id(wedding_id, vendor_id, event_id),
        wedding_id=wedding_id,
        vendor_id=vendor_id,
        event_id=event_id,
        sender_id=sender_id,
        sender_type="system",
        content=content,
        message_type=message_type,
        booking_id=booking_id,
    )
    await _message_created(message)
    return message


async def _message_created(message: Message) -> None:
    conversation_hub.publish(message.conversation_id, MESSAGE_CREATED, message.model_dump(mode="json"))
    if message.sender_type != "couple":
        await invalidate_couple_summary(message.wedding_id)


async def list_messages(conversation_id: str) -> list[Message]:
    parse_conversation_id(conversation_id)
    return await MessageRepository.list_for_conversation(conversation_id)


async def mark_message_read(message_id: str) -> Message:
    message = await MessageRepository.mark_read(message_id)
    if not message:
        raise MessageNotFoundError("Message not found")
    if message.sender_type != "couple":
        await invalidate_couple_summary(message.wedding_id)
    return message


async def mark_conversation_read(conversation_id: str, reader_type: str) -> int:
    ref = parse_conversation_id(conversation_id)
    updated = await MessageRepository.mark_conversation_read(conversation_id, reader_type)
    if updated and reader_type == "couple":
        await invalidate_couple_summary(ref.wedding_id)
    return updated


async def unread_count(conversation_id: str, recipient_type: str) -> int:
    parse_conversation_id(conversation_id)
    return await MessageRepository.count_unread(conversation_id, recipient_type)


# =================================================================
# Conversation listings
# =================================================================


def _index_bookings(bookings: Iterable[Booking]) -> dict[tuple[str, str | None], Booking]:
    """Latest booking per (vendor, event); bookings arrive newest first."""
    index: dict[tuple[str, str | None], Booking] = {}
    for booking in bookings:
        index.setdefault((booking.vendor_id, booking.event_id), booking)
        index.setdefault((booking.vendor_id, None), booking)
    return index


def _build_conversation(
    row: dict,
    *,
    vendors: dict[str, Vendor],
    events: dict[str, Event],
    bookings: dict[tuple[str, str | None], Booking],
    couple_names: dict[str, str] | None = None,
) -> Conversation:
    vendor_id = str(row["vendor_id"])
    event_id = str(row["event_id"]) if row.get("event_id") else None
    wedding_id = str(row["wedding_id"])
    vendor = vendors.get(vendor_id)
    event = events.get(event_id) if event_id else None
    booking = bookings.get((vendor_id, event_id))

    last_message = None
    if row.get("last_message_content") is not None:
        last_message = LastMessage(
            content=row["last_message_content"],
            sender_type=row["last_message_sender_type"],
            created_at=row.get("last_message_at"),
        )

    return Conversation(
        conversation_id=row["conversation_id"],
        wedding_id=wedding_id,
        vendor_id=vendor_id,
        event_id=event_id,
        vendor_name=vendor.name if vendor else None,
        vendor_category=vendor.primary_category if vendor else None,
        event_name=event.name if event else None,
        couple_name=(couple_names or {}).get(wedding_id),
        unread_count=int(row.get("unread_count") or 0),
        total_messages=int(row.get("total_messages") or 0),
        last_message=last_message,
        first_message_at=row.get("first_message_at"),
        last_message_at=row.get("last_message_at"),
        booking_id=booking.id if booking else None,
        booking_status=booking.status if booking else None,
    )


async def list_wedding_conversations(wedding_id: str) -> list[Conversation]:
    """
    Every conversation the couple has, most recent activity first, followed
    by threads implied by bookings that have no messages yet.
    """
    summaries, events, bookings = await asyncio.gather(
        MessageRepository.conversation_summaries("wedding_id", wedding_id, "couple"),
        EventRepository.list_for_wedding(wedding_id),
        BookingRepository.list_for_wedding(wedding_id),
    )
    vendor_ids = {str(row["vendor_id"]) for row in summaries} | {b.vendor_id for b in bookings}
    vendors = await VendorRepository.get_many(sorted(vendor_ids))
    events_by_id = {event.id: event for event in events}
    booking_index = _index_bookings(bookings)

    conversations = [
        _build_conversation(row, vendors=vendors, events=events_by_id, bookings=booking_index)
        for row in summaries
    ]

    seen = {conversation.conversation_id for conversation in conversations}
    for booking in bookings:
        conversation_id = generate_conversation_id(wedding_id, booking.vendor_id, booking.event_id)
        if conversation_id in seen:
            continue
        seen.add(conversation_id)
        conversations.append(
            _build_conversation(
                {
                    "conversation_id": conversation_id,
                    "wedding_id": wedding_id,
                    "vendor_id": booking.vendor_id,
                    "event_id": booking.event_id,
                },
                vendors=vendors,
                events=events_by_id,
                bookings=booking_index,
            )
        )

    return conversations


async def list_vendor_conversations(vendor_id: str) -> list[Conversation]:
    """Conversations from the vendor's side; unread counts are messages the vendor has not read."""
    summaries = await MessageRepository.conversation_summaries("vendor_id", vendor_id, "vendor")
    wedding_ids = sorted({str(row["wedding_id"]) for row in summaries})
    event_ids = sorted({str(row["event_id"]) for row in summaries if row.get("event_id")})

    vendors, weddings, events, bookings = await asyncio.gather(
        VendorRepository.get_many([vendor_id]),
        WeddingRepository.get_many(wedding_ids),
        EventRepository.get_many(event_ids),
        BookingRepository.list_for_vendor(vendor_id),
    )
    couple_names = {wedding_id: wedding.couple_name for wedding_id, wedding in weddings.items()}
    bookings_by_wedding: dict[str, list[Booking]] = {}
    for booking in bookings:
        bookings_by_wedding.setdefault(booking.wedding_id, []).append(booking)

    return [
        _build_conversation(
            row,
            vendors=vendors,
            events=events,
            bookings=_index_bookings(bookings_by_wedding.get(str(row["wedding_id"]), [])),
            couple_names=couple_names,
        )
        for row in summaries
    ]
