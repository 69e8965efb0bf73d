"""
Simulated payment gateway.
"""
import logging
import secrets

from fastapi import APIRouter, Depends

from ..core.exceptions import BadRequestError, NotFoundError, PermissionDeniedError
from ..models.base import utcnow
from ..models.order import OrderStatusHistory
from ..repositories import OrderRepository
from ..schemas.order import CreatePaymentRequest
from ..utils.dependencies import CurrentUser, get_current_user, get_order_repository
from ..utils.serializers import serialize_doc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


def generate_payment_id() -> str:
    return f"pay_{secrets.token_hex(8)}"


@router.post("/create")
async def create_payment(
    payload: CreatePaymentRequest,
    current: CurrentUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    """
    Record a successful online payment for one of the caller's orders.
    A pending order moves to confirmed. Cash-on-delivery orders are paid on delivery.
    """
    order = await orders.find_by_id(payload.order_id)
    if not order:
        raise NotFoundError("Order not found")
    if str(order.get("user")) != current.id:
        raise PermissionDeniedError("Not authorized to pay for this order")
    if order.get("status") == "cancelled":
        raise BadRequestError("Cannot pay for a cancelled order")
    if order.get("payment_method") == "cod":
        raise BadRequestError("Cash on delivery orders are paid on delivery")

    payment_info = dict(order.get("payment_info") or {})
    payment_id = payment_info.get("payment_id") or generate_payment_id()
    update = {
        "$set": {
            "payment_info.status": "completed",
            "payment_info.paid_at": payment_info.get("paid_at") or utcnow(),
            "payment_info.payment_id": payment_id,
        }
    }
    if order.get("status") == "pending":
        update["$set"]["status"] = "confirmed"
        update["$push"] = {
            "status_history": OrderStatusHistory(
                status="confirmed", updated_by=current.object_id, reason="Payment received"
            ).model_dump()
        }

    updated = await orders.update_by_id(order["_id"], update, raw=True)
    logger.info(f"💳 Payment {payment_id} recorded for order {order.get('order_number')}")
    return {
        "success": True,
        "message": "Payment created",
        "payment_id": payment_id,
        "order": serialize_doc(updated),
    }
