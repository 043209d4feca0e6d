"""
Couple notification summary with a short-lived Redis cache.
"""

import asyncio

from viah.features.messaging.ids import InvalidConversationIdError, parse_conversation_id
from viah.features.messaging.repository import MessageRepository
from viah.features.notifications.builder import build_notification_summary
from viah.features.notifications.cache import get_cached_summary, store_summary
from viah.features.notifications.models import NotificationSummary
from viah.features.planning.repository import EventRepository
from viah.features.vendors.repository import VendorRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


async def get_couple_notifications(wedding_id: str) -> NotificationSummary:
    cached = await get_cached_summary(wedding_id)
    if cached is not None:
        return NotificationSummary.model_validate(cached)

    unread = await MessageRepository.unread_for_wedding(wedding_id)
    vendor_ids, event_ids = set(), set()
    for message in unread:
        try:
            ref = parse_conversation_id(message.conversation_id)
        except InvalidConversationIdError:
            continue
        vendor_ids.add(ref.vendor_id)
        if ref.event_id:
            event_ids.add(ref.event_id)

    vendors, events = await asyncio.gather(
        VendorRepository.get_many(sorted(vendor_ids)),
        EventRepository.get_many(sorted(event_ids)),
    )
    summary = build_notification_summary(
        unread,
        vendor_names={vendor_id: vendor.name for vendor_id, vendor in vendors.items()},
        event_names={event_id: event.name for event_id, event in events.items()},
    )

    await store_summary(wedding_id, summary.model_dump(mode="json"))
    logger.debug(
        "Notification summary built",
        wedding_id=wedding_id,
        total_count=summary.total_count,
        unread_message_count=summary.unread_message_count,
    )
    return summary
