"""
Authentication request schemas.
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class SellerInfoRequest(BaseModel):
    business_name: Optional[str] = Field(None, max_length=200)
    tribe: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)


class RegisterRequest(BaseModel):
    """Self-registration; admins are never created through this route."""
    name: str = Field(..., min_length=1, max_length=100, description="Full name")
    email: EmailStr = Field(..., description="Login e-mail")
    password: str = Field(..., min_length=6, max_length=128, description="Plain-text password")
    phone: Optional[str] = Field(None, min_length=6, max_length=20)
    role: Literal["buyer", "seller"] = Field(default="buyer")
    seller_info: Optional[SellerInfoRequest] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)
