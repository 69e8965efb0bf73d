"""
Profile and wishlist request schemas.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator
from bson import ObjectId

from .auth import SellerInfoRequest


class AddressRequest(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = "India"


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=6, max_length=20)
    avatar: Optional[str] = None
    address: Optional[AddressRequest] = None
    seller_info: Optional[SellerInfoRequest] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class WishlistAddRequest(BaseModel):
    product_id: str = Field(..., description="Product ID")

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid product ID format")
        return v
