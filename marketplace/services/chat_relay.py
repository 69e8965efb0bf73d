"""
In-process chat relay for WebSocket clients.

Clients join rooms keyed by chat id; a message sent to a room is forwarded
to every other socket in it. Membership lives in memory only.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ChatConnectionManager:
    def __init__(self):
        self.rooms: Dict[str, Set[WebSocket]] = defaultdict(set)

    def join(self, chat_id: str, websocket: WebSocket) -> None:
        self.rooms[chat_id].add(websocket)

    def leave(self, chat_id: str, websocket: WebSocket) -> None:
        members = self.rooms.get(chat_id)
        if members is None:
            return
        members.discard(websocket)
        if not members:
            del self.rooms[chat_id]

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a socket from every room it joined."""
        for chat_id in [c for c, members in self.rooms.items() if websocket in members]:
            self.leave(chat_id, websocket)

    async def relay(self, chat_id: str, sender: Optional[WebSocket], data: Dict[str, Any]) -> int:
        """
        Forward ``data`` as a ``receive_message`` event to the room, skipping the sender.

        Returns:
            Number of sockets the message was delivered to
        """
        delivered = 0
        for member in list(self.rooms.get(chat_id, ())):
            if member is sender:
                continue
            try:
                await member.send_json({"event": "receive_message", "data": data})
                delivered += 1
            except Exception as e:
                logger.warning(f"⚠️  Dropping chat socket after send failure: {e}")
                self.disconnect(member)
        return delivered


chat_manager = ChatConnectionManager()
