"""
Coupon API schemas.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ValidateCouponRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    cart_amount: float = Field(..., ge=0)


class CreateCouponRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    type: Literal["percentage", "fixed"]
    value: float = Field(..., ge=0)
    minimum_amount: float = Field(default=0, ge=0)
    maximum_discount: Optional[float] = Field(None, ge=0)
    usage_limit: Optional[int] = Field(None, ge=1, description="Omit for unlimited")
    user_limit: int = Field(default=1, ge=1)
    valid_from: datetime
    valid_until: datetime

    @model_validator(mode="after")
    def check_window(self):
        if self.valid_until <= self.valid_from:
            raise ValueError("valid_until must be after valid_from")
        if self.type == "percentage" and self.value > 100:
            raise ValueError("Percentage coupons cannot exceed 100")
        return self


class CouponStatusRequest(BaseModel):
    is_active: bool
