import asyncio

import pytest
from fastapi import WebSocketDisconnect

from viah.features.messaging.api.router import forward_events
from viah.features.messaging.hub import MESSAGE_CREATED, ConversationHub


@pytest.mark.asyncio
async def test_publish_reaches_only_that_conversation():
    hub = ConversationHub()
    first = hub.subscribe("c1")
    other = hub.subscribe("c2")

    delivered = hub.publish("c1", MESSAGE_CREATED, {"id": "m1"})

    assert delivered == 1
    assert await first.get() == {"type": "message.created", "data": {"id": "m1"}}
    assert other.empty()


def test_unsubscribe_removes_queue():
    hub = ConversationHub()
    queue = hub.subscribe("c1")

    hub.unsubscribe("c1", queue)

    assert hub.subscriber_count("c1") == 0
    assert hub.publish("c1", MESSAGE_CREATED, {}) == 0


def test_full_queue_drops_event_without_blocking():
    hub = ConversationHub(queue_maxsize=1)
    slow = hub.subscribe("c1")
    fast = hub.subscribe("c1")

    assert hub.publish("c1", MESSAGE_CREATED, {"n": 1}) == 2
    fast.get_nowait()
    assert hub.publish("c1", MESSAGE_CREATED, {"n": 2}) == 1
    assert slow.qsize() == 1


class _GoneSocket:
    def __init__(self):
        self.sent = []

    async def send_json(self, data):
        self.sent.append(data)
        raise WebSocketDisconnect(code=1006)


@pytest.mark.asyncio
async def test_forwarder_stops_quietly_when_socket_is_gone():
    hub = ConversationHub()
    queue = hub.subscribe("c1")
    socket = _GoneSocket()
    hub.publish("c1", MESSAGE_CREATED, {"id": "m1"})

    task = asyncio.create_task(forward_events(socket, queue, "c1"))
    await asyncio.wait_for(task, timeout=1)

    assert task.done() and task.exception() is None
    assert socket.sent == [{"type": "message.created", "data": {"id": "m1"}}]
