"""
Chat and message data models for database documents.
"""
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from .base import MongoModel, utcnow


class ChatDocument(MongoModel):
    """Conversation between participants, optionally about a product."""
    participants: List[ObjectId] = Field(..., min_length=2)
    product: Optional[ObjectId] = None
    last_message: Optional[ObjectId] = None
    is_active: bool = True


class ReadReceipt(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: ObjectId
    read_at: datetime = Field(default_factory=utcnow)


class MessageDocument(MongoModel):
    chat: ObjectId
    sender: ObjectId
    content: str = Field(..., min_length=1, max_length=1000)
    message_type: Literal["text", "image", "file"] = "text"
    attachments: List[str] = Field(default_factory=list)
    read_by: List[ReadReceipt] = Field(default_factory=list)
    is_active: bool = True
