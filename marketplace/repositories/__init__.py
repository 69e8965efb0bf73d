"""
Repository layer: one class per collection, each a thin wrapper over Motor.

Usage:
    repo = UserRepository(db)
    user = await repo.find_by_email("user@example.com")
"""
from .base import BaseRepository
from .user import UserRepository
from .product import ProductRepository
from .cart import CartRepository
from .order import OrderRepository
from .review import ReviewRepository
from .coupon import CouponRepository
from .chat import ChatRepository, MessageRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ProductRepository",
    "CartRepository",
    "OrderRepository",
    "ReviewRepository",
    "CouponRepository",
    "ChatRepository",
    "MessageRepository",
]
