"""
Product and review API schemas for request validation.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

MAX_IMAGES = 10

SortField = Literal["created_at", "price", "name", "rating"]
SortOrder = Literal["asc", "desc"]


def _limit_images(v):
    if v is not None and len(v) > MAX_IMAGES:
        raise ValueError(f"Maximum {MAX_IMAGES} images allowed")
    return v


class CreateProductRequest(BaseModel):
    """Request schema for listing a new product."""
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: str = Field(..., min_length=1, max_length=5000, description="Product description")
    price: float = Field(..., ge=0, description="Product price")
    category: str = Field(..., min_length=1, max_length=100, description="Product category")
    images: List[str] = Field(default_factory=list, description="List of image URLs")
    stock: int = Field(default=0, ge=0, description="Available stock quantity")

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        return _limit_images(v)


class UpdateProductRequest(BaseModel):
    """Partial product update. ``is_active`` may only be changed by an admin."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    images: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        return _limit_images(v)


class CreateReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1, max_length=100)
    comment: str = Field(..., min_length=1, max_length=1000)
    images: List[str] = Field(default_factory=list)
    order_id: Optional[str] = Field(None, description="Order the review is for; defaults to the latest one")
