"""
Chat API schemas.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class StartChatRequest(BaseModel):
    participant_id: str = Field(..., description="User to chat with")
    product_id: Optional[str] = Field(None, description="Product the conversation is about")


class SendMessageRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    message_type: Literal["text", "image", "file"] = "text"
    attachments: List[str] = Field(default_factory=list)
