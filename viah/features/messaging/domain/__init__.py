"""
Domain subpackage for vendor/couple messaging.
"""

from .models import (
    CloseConversationRequest,
    Conversation,
    ConversationState,
    ConversationStatus,
    LastMessage,
    Message,
    MessageCreate,
    MessageType,
    ParticipantType,
    SenderType,
    VendorGroup,
)

__all__ = [
    "CloseConversationRequest",
    "Conversation",
    "ConversationState",
    "ConversationStatus",
    "LastMessage",
    "Message",
    "MessageCreate",
    "MessageType",
    "ParticipantType",
    "SenderType",
    "VendorGroup",
]
