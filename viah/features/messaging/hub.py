"""
In-process publish/subscribe for conversation events.

Each websocket connection subscribes a bounded queue to one conversation.
Publishing never blocks the request that produced the event: a subscriber
whose queue is full misses that event and is expected to refetch.
"""

import asyncio
from collections import defaultdict
from typing import Any

from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

MESSAGE_CREATED = "message.created"
CONVERSATION_CLOSED = "conversation.closed"
QUEUE_MAXSIZE = 100


class ConversationHub:
    def __init__(self, queue_maxsize: int = QUEUE_MAXSIZE):
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)
        self._queue_maxsize = queue_maxsize

    def subscribe(self, conversation_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers[conversation_id].add(queue)
        logger.debug(
            "Conversation subscriber added",
            conversation_id=conversation_id,
            subscribers=len(self._subscribers[conversation_id]),
        )
        return queue

    def unsubscribe(self, conversation_id: str, queue: asyncio.Queue) -> None:
        subscribers = self._subscribers.get(conversation_id)
        if not subscribers:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[conversation_id]

    def subscriber_count(self, conversation_id: str) -> int:
        return len(self._subscribers.get(conversation_id, ()))

    def publish(self, conversation_id: str, event_type: str, data: dict[str, Any]) -> int:
        """Fan an envelope out to every subscriber; returns how many received it."""
        envelope = {"type": event_type, "data": data}
        delivered = 0
        for queue in list(self._subscribers.get(conversation_id, ())):
            try:
                queue.put_nowait(envelope)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    "Conversation subscriber queue full, event dropped",
                    conversation_id=conversation_id,
                    event_type=event_type,
                )
        return delivered


# Global hub instance
conversation_hub = ConversationHub()
