from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from viah.db.helpers import DatabaseError
from viah.features.messaging.domain import ConversationStatus, Message
from viah.features.messaging.hub import conversation_hub
from viah.features.messaging.repository import ConversationStatusRepository, MessageRepository
from viah.main import app

client = TestClient(app)

CONVERSATION_ID = "w1-vendor-v1"
COUPLE_CLAIMS = {"sub": "user-123"}
VENDOR_CLAIMS = {"sub": "vendor-user", "vendor_id": "v1"}
STRANGER_CLAIMS = {"sub": "someone-else"}


@pytest.fixture
def closed_thread(monkeypatch):
    monkeypatch.setattr(
        ConversationStatusRepository,
        "get",
        AsyncMock(
            return_value=ConversationStatus(
                conversation_id=CONVERSATION_ID,
                wedding_id="w1",
                vendor_id="v1",
                status="closed",
                closed_by="user-123",
                closed_by_type="couple",
            )
        ),
    )


@pytest.fixture
def open_thread(monkeypatch):
    monkeypatch.setattr(ConversationStatusRepository, "get", AsyncMock(return_value=None))


def test_send_to_closed_conversation_returns_structured_error(
    apply_auth_override, known_records, closed_thread, monkeypatch
):
    apply_auth_override(app, VENDOR_CLAIMS)
    create = AsyncMock()
    monkeypatch.setattr(MessageRepository, "create", create)

    response = client.post("/api/messages", json={"wedding_id": "w1", "vendor_id": "v1", "content": "Hi"})

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "conversation_closed"
    create.assert_not_awaited()


def test_couple_sends_message(apply_auth_override, known_records, open_thread, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    message = Message(
        id="m1",
        conversation_id=CONVERSATION_ID,
        wedding_id="w1",
        vendor_id="v1",
        sender_id="user-123",
        sender_type="couple",
        content="Are you free on 12 June?",
    )
    monkeypatch.setattr(MessageRepository, "create", AsyncMock(return_value=message))

    response = client.post(
        "/api/messages", json={"wedding_id": "w1", "vendor_id": "v1", "content": "Are you free on 12 June?"}
    )

    assert response.status_code == 201
    assert response.json()["sender_type"] == "couple"


def test_empty_message_rejected(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.post("/api/messages", json={"wedding_id": "w1", "vendor_id": "v1", "content": "  "})

    assert response.status_code == 422


def test_vendor_cannot_close_inquiry(apply_auth_override, known_records, open_thread):
    apply_auth_override(app, VENDOR_CLAIMS)

    response = client.patch(f"/api/conversations/{CONVERSATION_ID}/close", json={"reason": "Busy"})

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "close_not_allowed"


def test_closing_closed_inquiry_is_idempotent(apply_auth_override, known_records, closed_thread, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    close = AsyncMock()
    monkeypatch.setattr(ConversationStatusRepository, "close", close)

    response = client.patch(f"/api/conversations/{CONVERSATION_ID}/close")

    assert response.status_code == 200
    assert response.json()["status"] == "closed"
    close.assert_not_awaited()


def test_status_for_never_closed_conversation(apply_auth_override, known_records, open_thread):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.get(f"/api/conversations/{CONVERSATION_ID}/status")

    assert response.status_code == 200
    assert response.json()["status"] == "open"


def test_malformed_conversation_id(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.get("/api/conversations/garbage/status")

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_conversation_id"


def test_non_participant_is_forbidden(apply_auth_override, known_records):
    apply_auth_override(app, STRANGER_CLAIMS)

    response = client.get(f"/api/messages/{CONVERSATION_ID}")

    assert response.status_code == 403


def test_requests_without_token_are_rejected():
    response = client.get(f"/api/messages/{CONVERSATION_ID}")

    assert response.status_code in (401, 403)


def test_database_errors_map_to_structured_500(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(
        MessageRepository,
        "list_for_conversation",
        AsyncMock(side_effect=DatabaseError("connection refused", "list_messages")),
    )

    response = client.get(f"/api/messages/{CONVERSATION_ID}")

    assert response.status_code == 500
    assert response.json() == {"detail": {"code": "database_error", "message": "A database error occurred"}}


def test_socket_rejects_missing_token():
    with client.websocket_connect(f"/ws/conversations/{CONVERSATION_ID}") as websocket:
        event = websocket.receive_json()

    assert event["type"] == "error"


def test_socket_answers_ping(known_records, monkeypatch):
    monkeypatch.setattr("viah.features.messaging.api.router.verify_jwt", lambda token: dict(COUPLE_CLAIMS))

    with client.websocket_connect(f"/ws/conversations/{CONVERSATION_ID}?token=t") as websocket:
        websocket.send_text("ping")
        assert websocket.receive_json() == {"type": "pong", "data": {}}


def test_socket_releases_subscription_on_disconnect(known_records, monkeypatch):
    monkeypatch.setattr("viah.features.messaging.api.router.verify_jwt", lambda token: dict(COUPLE_CLAIMS))

    with client.websocket_connect(f"/ws/conversations/{CONVERSATION_ID}?token=t") as websocket:
        websocket.send_text("ping")
        websocket.receive_json()
        assert conversation_hub.subscriber_count(CONVERSATION_ID) == 1

    assert conversation_hub.subscriber_count(CONVERSATION_ID) == 0
