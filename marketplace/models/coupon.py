"""
Coupon data models for database documents.
"""
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import MongoModel, utcnow


class CouponUsage(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: ObjectId
    used_at: datetime = Field(default_factory=utcnow)
    order_amount: float
    discount_amount: float


class CouponDocument(MongoModel):
    """Discount coupon; ``usage_limit`` of None means unlimited."""
    code: str
    description: str
    type: Literal["percentage", "fixed"]
    value: float = Field(..., ge=0)
    minimum_amount: float = Field(default=0, ge=0)
    maximum_discount: Optional[float] = Field(None, ge=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    used_count: int = Field(default=0, ge=0)
    user_limit: int = Field(default=1, ge=1)
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True
    created_by: ObjectId
    used_by: List[CouponUsage] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v):
        return v.strip().upper()
