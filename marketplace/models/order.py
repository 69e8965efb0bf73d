"""
Order data models for database documents.
These represent the actual structure of documents stored in MongoDB.
"""
import random
import string
import time
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from .base import MongoModel, utcnow

ORDER_STATUSES = (
    "pending",
    "confirmed",
    "processing",
    "packed",
    "shipped",
    "out_for_delivery",
    "delivered",
    "cancelled",
    "returned",
)
CANCELLABLE_STATUSES = ("pending", "confirmed", "processing")
PAYMENT_METHODS = ("cod", "upi", "card", "wallet")

_BASE36 = string.digits + string.ascii_uppercase


def generate_order_number() -> str:
    """
    Human-facing order number: ``TM`` + last six digits of the millisecond
    timestamp + five random base-36 characters.
    """
    timestamp = str(int(time.time() * 1000))
    suffix = "".join(random.choices(_BASE36, k=5))
    return f"TM{timestamp[-6:]}{suffix}"


class OrderItemDocument(BaseModel):
    """Order line; price and name are captured at checkout time."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    product: ObjectId
    seller: Optional[ObjectId] = None
    name: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class ShippingAddress(BaseModel):
    """Shipping address information."""
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)
    country: str = Field(default="India")


class PaymentInfo(BaseModel):
    method: str
    status: str = "pending"
    paid_at: Optional[datetime] = None
    payment_id: Optional[str] = None


class TrackingInfo(BaseModel):
    courier: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    last_updated: Optional[datetime] = None


class OrderStatusHistory(BaseModel):
    """Order status change history."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: str
    updated_at: datetime = Field(default_factory=utcnow)
    updated_by: Optional[ObjectId] = None
    reason: Optional[str] = None
    location: Optional[str] = None
    estimated_delivery: Optional[datetime] = None


class OrderDocument(MongoModel):
    """
    Order document model representing the MongoDB document structure.
    This matches how orders are stored in the database.
    """
    order_number: str = Field(default_factory=generate_order_number)
    user: ObjectId
    items: List[OrderItemDocument] = Field(..., min_length=1)
    shipping_address: ShippingAddress
    payment_method: str
    payment_info: PaymentInfo

    subtotal: float = Field(..., ge=0)
    shipping_cost: float = Field(default=100, ge=0)
    tax: float = Field(default=0, ge=0)
    discount: float = Field(default=0, ge=0)
    coupon_code: Optional[str] = None
    total: float = Field(..., ge=0)

    status: str = Field(default="pending")
    status_history: List[OrderStatusHistory] = Field(default_factory=list)
    tracking_info: Optional[TrackingInfo] = None
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
