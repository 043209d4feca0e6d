"""
Turn unread vendor messages into one notification per conversation.
"""

from collections.abc import Iterable
from datetime import datetime

from viah.features.messaging.domain import Message
from viah.features.messaging.ids import InvalidConversationIdError, parse_conversation_id
from viah.features.notifications.models import Notification, NotificationSummary
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

PREVIEW_LENGTH = 100
UNKNOWN_VENDOR = "Unknown Vendor"


def preview(content: str, limit: int = PREVIEW_LENGTH) -> str:
    return content[:limit] + ("..." if len(content) > limit else "")


def notification_title(unread: int, vendor_name: str, event_name: str | None) -> str:
    plural = "s" if unread > 1 else ""
    suffix = f" for {event_name}" if event_name else ""
    return f"{unread} unread message{plural} from {vendor_name}{suffix}"


def _timestamp(value: datetime | None) -> float:
    return value.timestamp() if value else float("-inf")


def build_notification_summary(
    unread_messages: Iterable[Message],
    *,
    vendor_names: dict[str, str],
    event_names: dict[str, str],
) -> NotificationSummary:
    """
    Group unread messages by conversation; each entry previews the newest
    message and the list is ordered newest first.
    """
    by_conversation: dict[str, list[Message]] = {}
    for message in unread_messages:
        by_conversation.setdefault(message.conversation_id, []).append(message)

    notifications = []
    unread_total = 0
    for conversation_id, messages in by_conversation.items():
        try:
            ref = parse_conversation_id(conversation_id)
        except InvalidConversationIdError:
            logger.warning("Skipping message with malformed conversation id", conversation_id=conversation_id)
            continue

        latest = max(messages, key=lambda m: _timestamp(m.created_at))
        unread_total += len(messages)
        notifications.append(
            Notification(
                id=f"msg-{conversation_id}",
                title=notification_title(
                    len(messages),
                    vendor_names.get(ref.vendor_id, UNKNOWN_VENDOR),
                    event_names.get(ref.event_id) if ref.event_id else None,
                ),
                description=preview(latest.content),
                link=f"/messages?conversation={conversation_id}",
                created_at=latest.created_at,
            )
        )

    notifications.sort(key=lambda n: _timestamp(n.created_at), reverse=True)
    return NotificationSummary(
        notifications=notifications,
        total_count=len(notifications),
        unread_message_count=unread_total,
    )
