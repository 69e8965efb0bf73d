"""
Models package for database document structures.
These models represent how data is stored in MongoDB.
"""
from .base import MongoModel, utcnow
from .user import ROLES, Address, SellerInfo, SellerNotification, UserDocument
from .product import ProductDocument
from .cart import CartDocument, CartItem, total_items
from .order import (
    CANCELLABLE_STATUSES,
    ORDER_STATUSES,
    PAYMENT_METHODS,
    OrderDocument,
    OrderItemDocument,
    OrderStatusHistory,
    PaymentInfo,
    ShippingAddress,
    TrackingInfo,
    generate_order_number,
)
from .review import HelpfulVote, ReviewDocument
from .coupon import CouponDocument, CouponUsage
from .chat import ChatDocument, MessageDocument, ReadReceipt

__all__ = [
    "MongoModel",
    "utcnow",

    # User models
    "ROLES",
    "Address",
    "SellerInfo",
    "SellerNotification",
    "UserDocument",

    # Product models
    "ProductDocument",

    # Cart models
    "CartDocument",
    "CartItem",
    "total_items",

    # Order models
    "CANCELLABLE_STATUSES",
    "ORDER_STATUSES",
    "PAYMENT_METHODS",
    "OrderDocument",
    "OrderItemDocument",
    "OrderStatusHistory",
    "PaymentInfo",
    "ShippingAddress",
    "TrackingInfo",
    "generate_order_number",

    # Review models
    "HelpfulVote",
    "ReviewDocument",

    # Coupon models
    "CouponDocument",
    "CouponUsage",

    # Chat models
    "ChatDocument",
    "MessageDocument",
    "ReadReceipt",
]
