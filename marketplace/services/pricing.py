"""
Order pricing.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional

from ..config.settings import get_settings


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, not 2)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_subtotal(items: Iterable[Dict[str, Any]]) -> float:
    """Sum of ``price * quantity`` over order or cart lines."""
    return sum(item["price"] * item["quantity"] for item in items)


def price_order(
    items: Iterable[Dict[str, Any]],
    discount: float = 0,
    shipping_cost: Optional[float] = None,
    tax_rate: Optional[float] = None,
) -> Dict[str, float]:
    """
    Price a list of ``{"price", "quantity"}`` lines.

    Tax is charged on the subtotal before any discount. The total never goes below zero.

    Returns:
        ``{"subtotal", "shipping_cost", "tax", "discount", "total"}``
    """
    settings = get_settings()
    shipping_cost = settings.shipping_cost if shipping_cost is None else shipping_cost
    tax_rate = settings.tax_rate if tax_rate is None else tax_rate

    subtotal = calculate_subtotal(items)
    tax = round_half_up(subtotal * tax_rate)
    total = max(subtotal + shipping_cost + tax - discount, 0)

    return {
        "subtotal": subtotal,
        "shipping_cost": shipping_cost,
        "tax": tax,
        "discount": discount,
        "total": total,
    }
