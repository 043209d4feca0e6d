"""
Conversation identifiers.

A conversation is never stored as its own row; its id is derived from the
thread's participants:

    {wedding_id}-vendor-{vendor_id}                    whole-wedding thread
    {wedding_id}-vendor-{vendor_id}-event-{event_id}   event-specific thread
"""

from typing import NamedTuple

VENDOR_SEPARATOR = "-vendor-"
EVENT_SEPARATOR = "-event-"


class InvalidConversationIdError(ValueError):
    """Raised when a conversation id does not follow the derived id scheme."""


class ConversationRef(NamedTuple):
    wedding_id: str
    vendor_id: str
    event_id: str | None = None


def generate_conversation_id(wedding_id: str, vendor_id: str, event_id: str | None = None) -> str:
    conversation_id = f"{wedding_id}{VENDOR_SEPARATOR}{vendor_id}"
    if event_id:
        conversation_id += f"{EVENT_SEPARATOR}{event_id}"
    return conversation_id


def parse_conversation_id(conversation_id: str) -> ConversationRef:
    parts = conversation_id.split(VENDOR_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidConversationIdError(f"Invalid conversation id: {conversation_id!r}")

    wedding_id, remainder = parts
    vendor_parts = remainder.split(EVENT_SEPARATOR)
    if len(vendor_parts) == 1:
        return ConversationRef(wedding_id, remainder)
    if len(vendor_parts) == 2 and all(vendor_parts):
        return ConversationRef(wedding_id, vendor_parts[0], vendor_parts[1])

    raise InvalidConversationIdError(f"Invalid conversation id: {conversation_id!r}")
