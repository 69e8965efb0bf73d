"""
Coupon eligibility and discount rules.
"""
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ..models.base import utcnow
from ..utils.serializers import to_object_id


def _format_amount(amount: float) -> str:
    return f"{amount:g}"


def validate_coupon(
    coupon: Dict[str, Any], user_id: Any, cart_amount: float, now: Optional[datetime] = None
) -> Tuple[bool, Optional[str]]:
    """
    Check whether ``user_id`` may apply ``coupon`` to a cart worth ``cart_amount``.

    Checks run in a fixed order and the first failure wins:
    active flag, validity window, global usage limit, minimum amount, per-user limit.

    Returns:
        ``(True, None)`` when usable, otherwise ``(False, reason)``
    """
    now = now or utcnow()

    if not coupon.get("is_active", False):
        return False, "Coupon is not active"

    if now < coupon["valid_from"] or now > coupon["valid_until"]:
        return False, "Coupon has expired or not yet valid"

    usage_limit = coupon.get("usage_limit")
    if usage_limit and coupon.get("used_count", 0) >= usage_limit:
        return False, "Coupon usage limit exceeded"

    minimum_amount = coupon.get("minimum_amount", 0)
    if cart_amount < minimum_amount:
        return False, f"Minimum order amount should be ₹{_format_amount(minimum_amount)}"

    user_oid = to_object_id(user_id)
    user_usage = sum(1 for usage in coupon.get("used_by", []) if usage.get("user") == user_oid)
    if user_usage >= coupon.get("user_limit", 1):
        return False, "You have already used this coupon"

    return True, None


def calculate_discount(coupon: Dict[str, Any], amount: float) -> float:
    """
    Discount for ``amount``: a percentage capped by ``maximum_discount``,
    or a fixed value. Never more than ``amount`` itself.
    """
    if coupon["type"] == "percentage":
        discount = amount * coupon["value"] / 100
        maximum = coupon.get("maximum_discount")
        if maximum and discount > maximum:
            discount = maximum
    else:
        discount = coupon["value"]

    return min(discount, amount)
