"""
Cart data models for database documents.
"""
from datetime import datetime
from typing import Any, Dict, List

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from .base import MongoModel, utcnow


class CartItem(BaseModel):
    """A product line inside a cart."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    product: ObjectId
    quantity: int = Field(default=1, ge=1)
    added_at: datetime = Field(default_factory=utcnow)


class CartDocument(MongoModel):
    """One cart per user."""
    user: ObjectId
    items: List[CartItem] = Field(default_factory=list)


def total_items(cart: Dict[str, Any]) -> int:
    """Sum of quantities across a cart document."""
    return sum(item.get("quantity", 0) for item in cart.get("items", []))
