from datetime import UTC, datetime, timedelta

from viah.features.messaging.domain import Message
from viah.features.notifications.builder import (
    build_notification_summary,
    notification_title,
    preview,
)

NOW = datetime(2026, 5, 1, 9, 0, tzinfo=UTC)


def _message(message_id: str, conversation_id: str, content: str, minutes_ago: int) -> Message:
    return Message(
        id=message_id,
        conversation_id=conversation_id,
        wedding_id="w1",
        vendor_id=conversation_id.split("-vendor-")[1].split("-event-")[0],
        sender_id="vendor-user",
        sender_type="vendor",
        content=content,
        created_at=NOW - timedelta(minutes=minutes_ago),
    )


def test_preview_truncates_long_content():
    assert preview("x" * 100) == "x" * 100
    assert preview("x" * 101) == "x" * 100 + "..."


def test_title_pluralises_and_names_event():
    assert notification_title(1, "DJ Rhythm", None) == "1 unread message from DJ Rhythm"
    assert notification_title(3, "DJ Rhythm", "Sangeet") == "3 unread messages from DJ Rhythm for Sangeet"


def test_summary_groups_per_conversation_newest_first():
    messages = [
        _message("m1", "w1-vendor-v1", "Older", 30),
        _message("m2", "w1-vendor-v1", "Latest from caterer", 5),
        _message("m3", "w1-vendor-v2-event-e1", "Photographer here", 10),
    ]

    summary = build_notification_summary(
        messages,
        vendor_names={"v1": "Royal Caterers"},
        event_names={"e1": "Mehndi"},
    )

    assert summary.total_count == 2
    assert summary.unread_message_count == 3
    first, second = summary.notifications
    assert first.id == "msg-w1-vendor-v1"
    assert first.title == "2 unread messages from Royal Caterers"
    assert first.description == "Latest from caterer"
    assert first.link == "/messages?conversation=w1-vendor-v1"
    assert second.title == "1 unread message from Unknown Vendor for Mehndi"


def test_summary_without_messages():
    summary = build_notification_summary([], vendor_names={}, event_names={})

    assert summary.notifications == []
    assert summary.total_count == 0
    assert summary.unread_message_count == 0
