"""
Business logic that spans more than one repository.
"""
from .chat_relay import ChatConnectionManager, chat_manager
from .checkout import CheckoutService, find_unavailable_items
from .coupons import calculate_discount, validate_coupon
from .orders import can_view_order, cancel_order, is_item_seller, update_order_status
from .pricing import calculate_subtotal, price_order, round_half_up
from .quick_actions import quick_actions_for
from .reviews import create_review, find_review_order, recompute_product_rating

__all__ = [
    "ChatConnectionManager",
    "chat_manager",
    "CheckoutService",
    "find_unavailable_items",
    "calculate_discount",
    "validate_coupon",
    "can_view_order",
    "cancel_order",
    "is_item_seller",
    "update_order_status",
    "calculate_subtotal",
    "price_order",
    "round_half_up",
    "quick_actions_for",
    "create_review",
    "find_review_order",
    "recompute_product_rating",
]
