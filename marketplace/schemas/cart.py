"""
Cart request schemas.
"""
from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from ..config.settings import get_settings

settings = get_settings()


class _CartLine(BaseModel):
    product_id: str = Field(..., description="Product ID")

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid product ID format")
        return v


class AddToCartRequest(_CartLine):
    quantity: int = Field(default=1, ge=1, le=settings.max_cart_item_quantity)


class UpdateCartItemRequest(_CartLine):
    """A quantity of zero or less removes the line."""
    quantity: int = Field(..., le=settings.max_cart_item_quantity)
