"""
Vendor lead inbox: every couple thread the vendor has, including booking
requests nobody has replied to yet.
"""

import asyncio
from collections.abc import Iterable

from viah.features.messaging.domain import Conversation
from viah.features.messaging.ids import generate_conversation_id
from viah.features.messaging.service import list_vendor_conversations
from viah.features.planning.repository import EventRepository, WeddingRepository
from viah.features.vendors.domain import Booking
from viah.features.vendors.repository import BookingRepository

# A booking request with no thread counts as one unread item.
PENDING_BOOKING_UNREAD = 1


def _activity_key(entry: Conversation) -> tuple[bool, float]:
    last = entry.last_message_at
    return (last is not None, last.timestamp() if last else 0.0)


def merge_inbox(
    conversations: Iterable[Conversation],
    bookings: Iterable[Booking],
    *,
    couple_names: dict[str, str],
    event_names: dict[str, str],
) -> list[Conversation]:
    """Most unread first, then most recent activity; undated entries sink."""
    entries = list(conversations)
    seen = {entry.conversation_id for entry in entries}

    for booking in bookings:
        conversation_id = generate_conversation_id(booking.wedding_id, booking.vendor_id, booking.event_id)
        if conversation_id in seen:
            continue
        seen.add(conversation_id)
        entries.append(
            Conversation(
                conversation_id=conversation_id,
                wedding_id=booking.wedding_id,
                vendor_id=booking.vendor_id,
                event_id=booking.event_id,
                event_name=event_names.get(booking.event_id) if booking.event_id else None,
                couple_name=couple_names.get(booking.wedding_id),
                unread_count=PENDING_BOOKING_UNREAD,
                last_message_at=booking.request_date,
                booking_id=booking.id,
                booking_status=booking.status,
            )
        )

    entries.sort(key=_activity_key, reverse=True)
    entries.sort(key=lambda entry: entry.unread_count, reverse=True)
    return entries


async def build_lead_inbox(vendor_id: str) -> list[Conversation]:
    conversations, bookings = await asyncio.gather(
        list_vendor_conversations(vendor_id),
        BookingRepository.list_for_vendor(vendor_id),
    )
    weddings, events = await asyncio.gather(
        WeddingRepository.get_many(sorted({b.wedding_id for b in bookings})),
        EventRepository.get_many(sorted({b.event_id for b in bookings if b.event_id})),
    )
    return merge_inbox(
        conversations,
        bookings,
        couple_names={wedding_id: wedding.couple_name for wedding_id, wedding in weddings.items()},
        event_names={event_id: event.name for event_id, event in events.items()},
    )
