"""
Buyer/seller chat: REST history plus a WebSocket relay.
"""
import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..core.exceptions import BadRequestError, NotFoundError, PermissionDeniedError
from ..models.chat import ChatDocument, MessageDocument
from ..repositories import ChatRepository, MessageRepository, UserRepository
from ..schemas.chat import SendMessageRequest, StartChatRequest
from ..services.chat_relay import chat_manager
from ..utils.dependencies import (
    CurrentUser,
    PageParams,
    build_pagination,
    get_chat_repository,
    get_current_user,
    get_message_repository,
    get_user_repository,
    validate_object_id,
)
from ..utils.serializers import serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])
ws_router = APIRouter(tags=["Chat"])


async def _get_participant_chat(chats: ChatRepository, chat_id: str, user: CurrentUser) -> Dict[str, Any]:
    validate_object_id(chat_id, "chat")
    chat = await chats.find_by_id(chat_id)
    if not chat or not chat.get("is_active", True):
        raise NotFoundError("Chat not found")
    if not chats.is_participant(chat, user.id):
        raise PermissionDeniedError("Not a participant of this chat")
    return chat


@router.get("")
async def list_chats(
    params: PageParams = Depends(),
    current: CurrentUser = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository),
):
    result = await chats.find_for_user(current.id, limit=params.limit, skip=params.skip)
    return {
        "success": True,
        "chats": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.post("")
async def start_chat(
    payload: StartChatRequest,
    current: CurrentUser = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository),
    users: UserRepository = Depends(get_user_repository),
):
    """Open a conversation with another user, reusing an existing one when present."""
    other_oid = validate_object_id(payload.participant_id, "user")
    product_oid = validate_object_id(payload.product_id, "product") if payload.product_id else None
    if payload.participant_id == current.id:
        raise BadRequestError("Cannot start a chat with yourself")

    other = await users.find_by_id(other_oid)
    if not other or not other.get("is_active", True):
        raise NotFoundError("User not found")

    participants = [current.object_id, other_oid]
    chat = await chats.find_between(participants, product_oid)
    created = chat is None
    if created:
        chat = await chats.create(ChatDocument(participants=participants, product=product_oid).to_document())
        logger.info(f"💬 Chat {chat['_id']} started between {current.id} and {payload.participant_id}")

    return {"success": True, "created": created, "chat": serialize_doc(chat)}


@router.get("/{chat_id}/messages")
async def list_messages(
    chat_id: str,
    params: PageParams = Depends(),
    current: CurrentUser = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository),
    messages: MessageRepository = Depends(get_message_repository),
):
    """Chat history, oldest first. Reading marks the messages as read for the caller."""
    chat = await _get_participant_chat(chats, chat_id, current)
    result = await messages.find_by_chat(chat["_id"], limit=params.limit, skip=params.skip)
    await messages.mark_as_read(chat["_id"], current.id)
    return {
        "success": True,
        "messages": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.post("/{chat_id}/messages", status_code=201)
async def send_message(
    chat_id: str,
    payload: SendMessageRequest,
    current: CurrentUser = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository),
    messages: MessageRepository = Depends(get_message_repository),
):
    chat = await _get_participant_chat(chats, chat_id, current)
    message_doc = MessageDocument(chat=chat["_id"], sender=current.object_id, **payload.model_dump())
    message = serialize_doc(await messages.add_message(message_doc.to_document()))

    await chat_manager.relay(chat_id, None, message)
    return {"success": True, "message": message}


@ws_router.websocket("/ws/chat")
async def chat_socket(websocket: WebSocket):
    """
    Relay channel. Clients send ``{"event": ..., "data": {...}}`` frames:

    - ``join_chat`` with ``chat_id`` subscribes the socket to that room
    - ``send_message`` with ``chat_id`` forwards ``data`` as ``receive_message`` to the room's other sockets
    """
    await websocket.accept()
    logger.info(f"User connected: {id(websocket)}")
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                await websocket.send_json({"event": "error", "data": {"message": "Invalid JSON"}})
                continue

            if not isinstance(frame, dict):
                frame = {}
            event = frame.get("event")
            data = frame.get("data") or {}
            chat_id = data.get("chat_id") if isinstance(data, dict) else None
            if not chat_id:
                await websocket.send_json({"event": "error", "data": {"message": "chat_id is required"}})
                continue

            if event == "join_chat":
                chat_manager.join(str(chat_id), websocket)
                await websocket.send_json({"event": "joined", "data": {"chat_id": chat_id}})
            elif event == "send_message":
                await chat_manager.relay(str(chat_id), websocket, data)
            else:
                await websocket.send_json({"event": "error", "data": {"message": f"Unknown event: {event}"}})
    except WebSocketDisconnect:
        logger.info(f"User disconnected: {id(websocket)}")
    finally:
        chat_manager.disconnect(websocket)
