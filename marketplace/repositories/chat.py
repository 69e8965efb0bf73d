"""
Chat and message repositories.
"""
from typing import Any, Dict, List, Optional

from ..models.base import utcnow
from ..utils.serializers import to_object_id
from .base import BaseRepository


class ChatRepository(BaseRepository):
    collection_name = "chats"

    async def find_for_user(self, user_id: Any, **options) -> Dict[str, Any]:
        filter = {"participants": to_object_id(user_id), "is_active": True}
        return await self.find_all(filter, sort=[("updated_at", -1)], **options)

    async def find_between(self, participants: List[Any], product_id: Any = None) -> Optional[Dict[str, Any]]:
        """Existing active chat with exactly these participants (and product, if given)."""
        ids = [to_object_id(p) for p in participants]
        filter: Dict[str, Any] = {
            "participants": {"$all": ids, "$size": len(ids)},
            "is_active": True,
            "product": to_object_id(product_id) if product_id is not None else None,
        }
        return await self.find_one(filter)

    @staticmethod
    def is_participant(chat: Dict[str, Any], user_id: Any) -> bool:
        return to_object_id(user_id) in chat.get("participants", [])


class MessageRepository(BaseRepository):
    collection_name = "messages"

    async def find_by_chat(self, chat_id: Any, **options) -> Dict[str, Any]:
        filter = {"chat": to_object_id(chat_id), "is_active": True}
        return await self.find_all(filter, sort=[("created_at", 1)], **options)

    async def add_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a message and point the chat's ``last_message`` at it."""
        created = await self.create(message)
        await ChatRepository(self.db).update_by_id(created["chat"], {"last_message": created["_id"]})
        return created

    async def mark_as_read(self, chat_id: Any, user_id: Any) -> int:
        """Add a read receipt for ``user_id`` to every message it has not read yet."""
        user_oid = to_object_id(user_id)
        return await self.update_many(
            {"chat": to_object_id(chat_id), "read_by.user": {"$ne": user_oid}, "sender": {"$ne": user_oid}},
            {"$push": {"read_by": {"user": user_oid, "read_at": utcnow()}}},
        )
