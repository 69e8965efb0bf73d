"""
Review data models for database documents.
"""
from datetime import datetime
from typing import List

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from .base import MongoModel, utcnow


class HelpfulVote(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: ObjectId
    created_at: datetime = Field(default_factory=utcnow)


class ReviewDocument(MongoModel):
    """
    One review per (product, user, order).
    Reviews are tied to an order, so they are always marked verified.
    """
    product: ObjectId
    user: ObjectId
    order: ObjectId
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1, max_length=100)
    comment: str = Field(..., min_length=1, max_length=1000)
    images: List[str] = Field(default_factory=list)
    helpful: List[HelpfulVote] = Field(default_factory=list)
    verified: bool = True
    is_active: bool = True
