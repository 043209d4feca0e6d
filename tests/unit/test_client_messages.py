import json

import httpx
import pytest

from viah.client.api_client import ViahApiClient
from viah.client.errors import ConversationClosedError
from viah.client.messages import MessagesController, messages_key, status_key
from viah.client.query_cache import QueryCache

WEDDING_ID = "w1"


def _conversation(vendor_id: str, event_id: str | None = None, unread: int = 0) -> dict:
    conversation_id = f"{WEDDING_ID}-vendor-{vendor_id}" + (f"-event-{event_id}" if event_id else "")
    return {
        "conversation_id": conversation_id,
        "wedding_id": WEDDING_ID,
        "vendor_id": vendor_id,
        "event_id": event_id,
        "vendor_name": vendor_id.upper(),
        "unread_count": unread,
    }


class FakeApi:
    """Minimal in-memory stand-in for the messaging endpoints."""

    def __init__(self, conversations: list[dict], closed: set[str] | None = None):
        self.conversations = conversations
        self.closed = closed or set()
        self.requests: list[httpx.Request] = []

    def calls(self, method: str, fragment: str = "") -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and fragment in r.url.path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path == f"/api/conversations/wedding/{WEDDING_ID}":
            return httpx.Response(200, json=self.conversations)
        if request.method == "GET" and path.endswith("/status"):
            conversation_id = path.split("/")[3]
            state = "closed" if conversation_id in self.closed else "open"
            return httpx.Response(200, json={"conversation_id": conversation_id, "status": state})
        if request.method == "PATCH" and path.endswith("/read"):
            return httpx.Response(200, json={"updated": 1})
        if request.method == "PATCH" and path.endswith("/close"):
            conversation_id = path.split("/")[3]
            self.closed.add(conversation_id)
            return httpx.Response(200, json={"conversation_id": conversation_id, "status": "closed"})
        if request.method == "POST" and path == "/api/messages":
            body = json.loads(request.content)
            conversation_id = f"{body['wedding_id']}-vendor-{body['vendor_id']}" + (
                f"-event-{body['event_id']}" if body["event_id"] else ""
            )
            if conversation_id in self.closed:
                return httpx.Response(
                    403, json={"detail": {"code": "conversation_closed", "message": "closed"}}
                )
            return httpx.Response(201, json={"id": "m1", "content": body["content"]})
        return httpx.Response(404, json={"detail": "Not found"})


def _controller(api: FakeApi) -> tuple[MessagesController, QueryCache]:
    client = ViahApiClient("http://viah.test", token="t", transport=httpx.MockTransport(api))
    cache = QueryCache()
    return MessagesController(client, cache, WEDDING_ID), cache


@pytest.mark.asyncio
async def test_first_load_selects_unread_conversation_and_marks_it_read():
    api = FakeApi([_conversation("v1"), _conversation("v2", "e1", unread=2), _conversation("v2", "e2")])
    controller, _ = _controller(api)

    groups = await controller.load()

    assert [g.vendor_id for g in groups] == ["v2", "v1"]
    assert controller.state.selected.conversation_id == "w1-vendor-v2-event-e1"
    assert controller.state.expanded_vendors == {"v2"}
    assert len(api.calls("PATCH", "/read")) == 1


@pytest.mark.asyncio
async def test_auto_select_happens_once():
    api = FakeApi([_conversation("v1"), _conversation("v2", unread=1)])
    controller, cache = _controller(api)
    await controller.load()

    await controller.select("w1-vendor-v1")
    cache.invalidate(("conversations",))
    await controller.load()

    assert controller.state.selected.conversation_id == "w1-vendor-v1"


@pytest.mark.asyncio
async def test_empty_inbox_leaves_auto_select_pending():
    api = FakeApi([])
    controller, cache = _controller(api)

    await controller.load()
    assert controller.state.selected is None
    assert not controller.state.auto_selected

    api.conversations = [_conversation("v1")]
    cache.invalidate(("conversations",))
    await controller.load()

    assert controller.state.selected.conversation_id == "w1-vendor-v1"


@pytest.mark.asyncio
async def test_select_unknown_conversation():
    controller, _ = _controller(FakeApi([_conversation("v1")]))
    await controller.load()

    with pytest.raises(KeyError):
        await controller.select("w1-vendor-missing")


@pytest.mark.asyncio
async def test_send_guards_make_no_request():
    api = FakeApi([_conversation("v1")], closed={"w1-vendor-v1"})
    controller, _ = _controller(api)

    assert await controller.send("hello") is None
    await controller.load()
    assert controller.state.closed
    assert not controller.can_send
    assert await controller.send("hello") is None
    assert api.calls("POST") == []


@pytest.mark.asyncio
async def test_blank_message_is_not_sent():
    api = FakeApi([_conversation("v1")])
    controller, _ = _controller(api)
    await controller.load()

    assert await controller.send("   ") is None
    assert api.calls("POST") == []


@pytest.mark.asyncio
async def test_send_invalidates_messages_and_conversations():
    api = FakeApi([_conversation("v1")])
    controller, cache = _controller(api)
    await controller.load()
    cache.set(messages_key("w1-vendor-v1"), [])

    message = await controller.send("  Are you free in May?  ")

    assert message == {"id": "m1", "content": "Are you free in May?"}
    assert messages_key("w1-vendor-v1") not in cache
    assert ("conversations", WEDDING_ID) not in cache


@pytest.mark.asyncio
async def test_send_after_remote_close_switches_to_closed():
    api = FakeApi([_conversation("v1")])
    controller, cache = _controller(api)
    await controller.load()
    api.closed.add("w1-vendor-v1")

    with pytest.raises(ConversationClosedError):
        await controller.send("hello?")

    assert controller.state.closed
    assert status_key("w1-vendor-v1") not in cache
    assert await controller.send("again") is None
    assert len(api.calls("POST")) == 1


@pytest.mark.asyncio
async def test_close_updates_status_cache():
    api = FakeApi([_conversation("v1")])
    controller, cache = _controller(api)
    await controller.load()

    status = await controller.close("Booked elsewhere")

    assert status["status"] == "closed"
    assert controller.state.closed
    assert cache.get(status_key("w1-vendor-v1"))["status"] == "closed"
    assert json.loads(api.calls("PATCH", "/close")[0].content) == {"reason": "Booked elsewhere"}


def test_toggle_vendor():
    controller, _ = _controller(FakeApi([]))

    assert controller.toggle_vendor("v1") is True
    assert controller.toggle_vendor("v1") is False
