"""
Messaging routes.

Usage:
    1. GET   /api/conversations/wedding/{wedding_id}           - Couple inbox (flat)
    2. GET   /api/conversations/wedding/{wedding_id}/grouped   - Couple inbox grouped by vendor
    3. GET   /api/conversations/vendor/{vendor_id}             - Vendor inbox
    4. GET   /api/conversations/{conversation_id}/status       - open/closed
    5. PATCH /api/conversations/{conversation_id}/close        - Close an inquiry (couple only)
    6. PATCH /api/conversations/{conversation_id}/read         - Mark the other side's messages read
    7. GET   /api/messages/{conversation_id}                   - Thread, oldest first
    8. POST  /api/messages                                     - Send (403 conversation_closed when closed)
    9. PATCH /api/messages/{message_id}/read                   - Mark one message read
   10. GET   /api/messages/{conversation_id}/unread/{recipient_type}
   11. WS    /ws/conversations/{conversation_id}?token=...     - Live message.created / conversation.closed
"""

import asyncio
import contextlib
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from viah.auth.access import ensure_vendor_access, ensure_wedding_access, resolve_participant
from viah.auth.verify import auth_dependency, verify_jwt
from viah.features.messaging import service
from viah.features.messaging.domain import (
    CloseConversationRequest,
    Conversation,
    ConversationStatus,
    Message,
    MessageCreate,
)
from viah.features.messaging.grouping import group_conversations
from viah.features.messaging.hub import conversation_hub
from viah.features.messaging.ids import ConversationRef, InvalidConversationIdError, parse_conversation_id
from viah.features.messaging.repository import MessageRepository
from viah.infrastructure.observability.logging import get_logger

router = APIRouter(prefix="/api", tags=["messaging"])
ws_router = APIRouter(tags=["messaging"])
logger = get_logger(__name__)


def _error_detail(exc: service.MessagingError) -> dict:
    return {"code": exc.code, "message": str(exc)}


def _parse_or_400(conversation_id: str) -> ConversationRef:
    try:
        return parse_conversation_id(conversation_id)
    except InvalidConversationIdError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "invalid_conversation_id", "message": str(e)},
        ) from e


async def _participant_for(conversation_id: str, claims: dict) -> str:
    ref = _parse_or_400(conversation_id)
    return await resolve_participant(claims, ref.wedding_id, ref.vendor_id)


@router.get("/conversations/wedding/{wedding_id}", response_model=list[Conversation])
async def get_wedding_conversations(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await service.list_wedding_conversations(wedding_id)


@router.get("/conversations/wedding/{wedding_id}/grouped")
async def get_grouped_wedding_conversations(
    wedding_id: str, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    conversations = await service.list_wedding_conversations(wedding_id)
    return group_conversations(conversations)


@router.get("/conversations/vendor/{vendor_id}", response_model=list[Conversation])
async def get_vendor_conversations(vendor_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_vendor_access(claims, vendor_id)
    return await service.list_vendor_conversations(vendor_id)


@router.get("/conversations/{conversation_id}/status", response_model=ConversationStatus)
async def get_conversation_status(conversation_id: str, claims: dict = Depends(auth_dependency)):
    await _participant_for(conversation_id, claims)
    return await service.get_conversation_status(conversation_id)


@router.patch("/conversations/{conversation_id}/close", response_model=ConversationStatus)
async def close_conversation(
    conversation_id: str,
    payload: CloseConversationRequest | None = None,
    claims: dict = Depends(auth_dependency),
):
    participant = await _participant_for(conversation_id, claims)
    try:
        return await service.close_conversation(
            conversation_id,
            closed_by=claims["sub"],
            closed_by_type=participant,
            reason=payload.reason if payload else None,
        )
    except service.CloseNotAllowedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=_error_detail(e)) from e


@router.patch("/conversations/{conversation_id}/read")
async def mark_conversation_read(conversation_id: str, claims: dict = Depends(auth_dependency)):
    participant = await _participant_for(conversation_id, claims)
    updated = await service.mark_conversation_read(conversation_id, participant)
    return {"conversation_id": conversation_id, "marked_read": updated}


@router.get("/messages/{conversation_id}", response_model=list[Message])
async def get_messages(conversation_id: str, claims: dict = Depends(auth_dependency)):
    await _participant_for(conversation_id, claims)
    return await service.list_messages(conversation_id)


@router.post("/messages", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(payload: MessageCreate, claims: dict = Depends(auth_dependency)):
    sender_type = await resolve_participant(claims, payload.wedding_id, payload.vendor_id)
    try:
        return await service.send_message(payload, sender_id=claims["sub"], sender_type=sender_type)
    except service.ConversationClosedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=_error_detail(e)) from e


@router.patch("/messages/{message_id}/read", response_model=Message)
async def mark_message_read(message_id: str, claims: dict = Depends(auth_dependency)):
    message = await MessageRepository.get(message_id)
    if not message:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": service.MessageNotFoundError.code, "message": "Message not found"},
        )
    await resolve_participant(claims, message.wedding_id, message.vendor_id)
    try:
        return await service.mark_message_read(message_id)
    except service.MessageNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_error_detail(e)) from e


@router.get("/messages/{conversation_id}/unread/{recipient_type}")
async def get_unread_count(
    conversation_id: str,
    recipient_type: Literal["couple", "vendor"],
    claims: dict = Depends(auth_dependency),
):
    await _participant_for(conversation_id, claims)
    return {"count": await service.unread_count(conversation_id, recipient_type)}


async def forward_events(websocket: WebSocket, queue: asyncio.Queue, conversation_id: str) -> None:
    """Relay hub envelopes to one socket until it goes away."""
    try:
        while True:
            envelope = await queue.get()
            await websocket.send_json(envelope)
    except WebSocketDisconnect:
        logger.debug("Socket closed while forwarding", conversation_id=conversation_id)


@ws_router.websocket("/ws/conversations/{conversation_id}")
async def conversation_socket(websocket: WebSocket, conversation_id: str):
    """
    Stream conversation events as {"type": ..., "data": ...} envelopes.

    Browsers cannot set headers on websocket upgrades, so the bearer token
    travels as the `token` query parameter. Clients may send "ping" and get
    {"type": "pong"} back.
    """
    await websocket.accept()
    try:
        claims = verify_jwt(websocket.query_params.get("token", ""))
        await _participant_for(conversation_id, claims)
    except HTTPException as e:
        await websocket.send_json({"type": "error", "data": {"message": str(e.detail)}})
        await websocket.close(code=1008)
        return

    queue = conversation_hub.subscribe(conversation_id)
    logger.info("Conversation socket connected", conversation_id=conversation_id, user_id=claims["sub"])

    async def receive_pings():
        async for raw in websocket.iter_text():
            if raw.strip().lower() == "ping":
                await websocket.send_json({"type": "pong", "data": {}})

    forwarder = asyncio.create_task(forward_events(websocket, queue, conversation_id))
    try:
        await receive_pings()
    finally:
        forwarder.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await forwarder
        conversation_hub.unsubscribe(conversation_id, queue)
        logger.info("Conversation socket disconnected", conversation_id=conversation_id)
