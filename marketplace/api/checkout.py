"""
Checkout endpoints.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import MarketplaceError
from ..schemas.order import CheckoutRequest
from ..services.checkout import CheckoutService
from ..utils.dependencies import CurrentUser, get_checkout_service, get_current_user
from ..utils.serializers import serialize_doc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.get("/validate")
async def validate_checkout(
    current: CurrentUser = Depends(get_current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    await checkout.validate_cart(current.id)
    return {"success": True, "message": "Cart is valid for checkout"}


@router.post("", status_code=201)
async def place_order(
    payload: CheckoutRequest,
    current: CurrentUser = Depends(get_current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Turn the caller's cart into an order"""
    try:
        order = await checkout.place_order(
            current.id,
            shipping_address=payload.shipping_address.model_dump(),
            payment_method=payload.payment_method,
            notes=payload.notes,
            coupon_code=payload.coupon_code,
        )
        return {"success": True, "message": "Order created successfully", "order": serialize_doc(order)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Checkout failed for user {current.id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create order: {str(e)}")
