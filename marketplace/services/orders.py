"""
Order status changes shared by the seller, buyer and admin routes.
"""
import logging
from typing import Any, Dict, Optional

from ..core.exceptions import BadRequestError
from ..models.base import utcnow
from ..models.order import CANCELLABLE_STATUSES, OrderStatusHistory
from ..repositories import OrderRepository, ProductRepository
from ..utils.serializers import to_object_id

logger = logging.getLogger(__name__)


def is_item_seller(order: Dict[str, Any], user_id: Any) -> bool:
    seller_oid = to_object_id(user_id)
    return any(item.get("seller") == seller_oid for item in order.get("items", []))


def can_view_order(order: Dict[str, Any], user_id: Any, role: str) -> bool:
    """Buyers see their own orders, sellers orders holding their items, admins everything."""
    if role == "admin":
        return True
    return order.get("user") == to_object_id(user_id) or is_item_seller(order, user_id)


async def update_order_status(
    orders: OrderRepository,
    order_id: Any,
    status: str,
    updated_by: Any,
    reason: Optional[str] = None,
    location: Optional[str] = None,
    estimated_delivery: Optional[Any] = None,
    tracking_info: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Set any valid status and append it to the history.
    No transition rules are enforced.
    """
    entry = OrderStatusHistory(
        status=status,
        updated_by=to_object_id(updated_by),
        reason=reason,
        location=location,
        estimated_delivery=estimated_delivery,
    ).model_dump()

    extra: Dict[str, Any] = {}
    if tracking_info:
        extra["tracking_info"] = {**tracking_info, "last_updated": utcnow()}

    order = await orders.push_status(order_id, status, entry, extra)
    if order:
        logger.info(f"📦 Order status updated: {order_id} -> {status}")
    return order


async def cancel_order(
    orders: OrderRepository,
    products: ProductRepository,
    order: Dict[str, Any],
    user_id: Any,
    reason: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Cancel an order that has not left processing yet and put its stock back.

    Raises:
        BadRequestError: If the order is past the cancellable statuses
    """
    if order.get("status") not in CANCELLABLE_STATUSES:
        raise BadRequestError(f"Order cannot be cancelled once it is {order.get('status')}")

    reason = reason or "Cancelled by customer"
    entry = OrderStatusHistory(status="cancelled", updated_by=to_object_id(user_id), reason=reason).model_dump()
    cancelled = await orders.push_status(order["_id"], "cancelled", entry, {"cancellation_reason": reason})

    for item in order.get("items", []):
        await products.increment_stock(item["product"], item["quantity"])

    logger.info(f"❌ Order {order.get('order_number')} cancelled by {user_id}")
    return cancelled
