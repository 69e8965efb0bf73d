"""
Checkout, order and payment API schemas.
"""
from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from ..models.order import ORDER_STATUSES

PaymentMethod = Literal["cod", "upi", "card", "wallet"]


class ShippingAddressRequest(BaseModel):
    """Shipping address information."""
    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=6, max_length=20)
    street: str = Field(..., min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: str = Field(..., min_length=3, max_length=12)
    country: str = Field(default="India")


class CheckoutRequest(BaseModel):
    shipping_address: ShippingAddressRequest
    payment_method: PaymentMethod
    notes: Optional[str] = Field(None, max_length=500)
    coupon_code: Optional[str] = Field(None, max_length=50)


class TrackingInfoRequest(BaseModel):
    courier: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None


class UpdateOrderStatusRequest(BaseModel):
    """Request schema for updating order status."""
    status: str = Field(..., description="New order status")
    reason: Optional[str] = Field(None, max_length=500, description="Reason for status change")
    location: Optional[str] = Field(None, max_length=200)
    estimated_delivery: Optional[datetime] = None
    tracking_info: Optional[TrackingInfoRequest] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        status = v.strip().lower()
        if status not in ORDER_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {list(ORDER_STATUSES)}")
        return status


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class CreatePaymentRequest(BaseModel):
    order_id: str = Field(..., description="Order to pay for")

    @field_validator("order_id")
    @classmethod
    def validate_order_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid order ID format")
        return v
