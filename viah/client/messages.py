"""
Messaging inbox state for a couple: vendor-grouped navigation, one-shot
initial selection, and a send path that never calls the API for a closed,
empty or unselected conversation.
"""

from dataclasses import dataclass, field

from viah.client.api_client import ViahApiClient
from viah.client.errors import ConversationClosedError
from viah.client.query_cache import QueryCache
from viah.features.messaging.domain import Conversation, VendorGroup
from viah.features.messaging.grouping import auto_expand, group_conversations, pick_initial_conversation
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def conversations_key(wedding_id: str) -> tuple:
    return ("conversations", wedding_id)


def messages_key(conversation_id: str) -> tuple:
    return ("messages", conversation_id)


def status_key(conversation_id: str) -> tuple:
    return ("conversation-status", conversation_id)


@dataclass
class NavigationState:
    groups: list[VendorGroup] = field(default_factory=list)
    expanded_vendors: set[str] = field(default_factory=set)
    selected: Conversation | None = None
    closed: bool = False
    auto_selected: bool = False


class MessagesController:
    def __init__(self, client: ViahApiClient, cache: QueryCache, wedding_id: str):
        self._client = client
        self._cache = cache
        self.wedding_id = wedding_id
        self.state = NavigationState()

    async def load(self) -> list[VendorGroup]:
        """
        Fetch (or reuse cached) conversations and regroup them. The first load
        that returns any conversation picks the initial thread; later loads
        and user selections never re-trigger that.
        """
        raw = await self._cache.fetch(
            conversations_key(self.wedding_id),
            lambda: self._client.list_wedding_conversations(self.wedding_id),
        )
        conversations = [Conversation.model_validate(item) for item in raw]
        self.state.groups = group_conversations(conversations)
        auto_expand(self.state.groups, self.state.expanded_vendors)

        if not self.state.auto_selected and self.state.groups:
            self.state.auto_selected = True
            initial = pick_initial_conversation(self.state.groups)
            if initial is not None and self.state.selected is None:
                await self._open(initial)

        return self.state.groups

    async def select(self, conversation_id: str) -> Conversation:
        """User selection; also consumes the one-shot auto-select."""
        self.state.auto_selected = True
        for group in self.state.groups:
            for conversation in group.events:
                if conversation.conversation_id == conversation_id:
                    await self._open(conversation)
                    return conversation
        raise KeyError(conversation_id)

    def toggle_vendor(self, vendor_id: str) -> bool:
        """Expand or collapse a vendor group; returns whether it is now expanded."""
        if vendor_id in self.state.expanded_vendors:
            self.state.expanded_vendors.discard(vendor_id)
            return False
        self.state.expanded_vendors.add(vendor_id)
        return True

    @property
    def can_send(self) -> bool:
        return self.state.selected is not None and not self.state.closed

    async def send(self, content: str) -> dict | None:
        """
        Send to the selected conversation. Returns None without a request when
        nothing is selected, the text is blank, or the thread is closed.

        Raises:
            ConversationClosedError: the other side closed it first; the
                controller switches to closed before re-raising
        """
        conversation = self.state.selected
        text = content.strip()
        if conversation is None or not text or self.state.closed:
            return None

        try:
            message = await self._client.send_message(
                wedding_id=conversation.wedding_id,
                vendor_id=conversation.vendor_id,
                event_id=conversation.event_id,
                content=text,
            )
        except ConversationClosedError:
            logger.info("Send rejected, conversation closed", conversation_id=conversation.conversation_id)
            self.state.closed = True
            self._cache.invalidate(status_key(conversation.conversation_id))
            raise

        self._cache.invalidate(messages_key(conversation.conversation_id))
        self._cache.invalidate(conversations_key(self.wedding_id))
        return message

    async def close(self, reason: str | None = None) -> dict | None:
        conversation = self.state.selected
        if conversation is None or self.state.closed:
            return None

        status = await self._client.close_conversation(conversation.conversation_id, reason)
        self.state.closed = True
        self._cache.set(status_key(conversation.conversation_id), status)
        self._cache.invalidate(conversations_key(self.wedding_id))
        return status

    async def _open(self, conversation: Conversation) -> None:
        self.state.selected = conversation
        conversation_id = conversation.conversation_id
        status = await self._cache.fetch(
            status_key(conversation_id),
            lambda: self._client.get_conversation_status(conversation_id),
        )
        self.state.closed = status.get("status") == "closed"

        if conversation.unread_count > 0:
            await self._client.mark_conversation_read(conversation_id)
            self._cache.invalidate(conversations_key(self.wedding_id))
