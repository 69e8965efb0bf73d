"""
Product data models for database documents.
These represent the actual structure of documents stored in MongoDB.
"""
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import Field

from .base import MongoModel


class ProductDocument(MongoModel):
    """
    Product document model representing the MongoDB document structure.
    This matches how products are stored in the database.
    """
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: str = Field(..., min_length=1, max_length=5000, description="Product description")
    price: float = Field(..., ge=0, description="Product price")
    category: str = Field(..., min_length=1, max_length=100, description="Product category")
    seller: ObjectId = Field(..., description="Seller user ID")
    images: List[str] = Field(default_factory=list, description="List of image URLs")
    stock: int = Field(default=0, ge=0, description="Available stock quantity")
    is_active: bool = Field(default=True)

    # Moderation
    is_approved: bool = Field(default=False)
    approved_at: Optional[datetime] = None
    approved_by: Optional[ObjectId] = None
    admin_remarks: Optional[str] = None

    # Denormalized from reviews
    rating: float = Field(default=0, ge=0, le=5)
    num_reviews: int = Field(default=0, ge=0)
