"""
User data models for database documents.
"""
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import MongoModel, utcnow

ROLES = ("buyer", "seller", "admin")
Role = Literal["buyer", "seller", "admin"]


class SellerNotification(BaseModel):
    """Notification pushed to a seller (product approvals, new orders)."""
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    type: str = Field(..., description="Notification type, e.g. product_approval or new_order")
    message: str = Field(..., description="Human-readable message")
    product_id: Optional[ObjectId] = Field(None, description="Related product")
    order_id: Optional[ObjectId] = Field(None, description="Related order")
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)


class SellerInfo(BaseModel):
    """Seller profile, present only for users with the seller role."""
    business_name: Optional[str] = Field(None, max_length=200)
    tribe: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    verified: bool = Field(default=False)
    notifications: List[SellerNotification] = Field(default_factory=list)


class Address(BaseModel):
    """Postal address kept on the profile."""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = "India"


class UserDocument(MongoModel):
    """
    User document model representing the MongoDB document structure.
    """
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., description="Unique, stored lower-case")
    phone: Optional[str] = Field(None, description="Unique when present")
    password_hash: str
    role: Role = Field(default="buyer")
    avatar: Optional[str] = None
    address: Optional[Address] = None
    seller_info: Optional[SellerInfo] = None
    wishlist: List[ObjectId] = Field(default_factory=list)
    is_active: bool = Field(default=True)
    email_verified: bool = Field(default=False)
    last_login: Optional[datetime] = None
    reset_token_hash: Optional[str] = None
    reset_token_expires: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

    def to_document(self):
        doc = super().to_document()
        # A sparse unique index only skips documents where the field is absent
        if doc.get("phone") is None:
            doc.pop("phone", None)
        # Seller fields are written with dotted paths, which fail under a null parent
        if doc.get("seller_info") is None:
            doc.pop("seller_info", None)
        return doc
