"""
Order history, tracking and status endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.exceptions import MarketplaceError, NotFoundError, PermissionDeniedError
from ..repositories import OrderRepository, ProductRepository
from ..schemas.order import CancelOrderRequest, UpdateOrderStatusRequest
from ..services.orders import can_view_order, cancel_order, is_item_seller, update_order_status
from ..utils.dependencies import (
    CurrentUser,
    PageParams,
    build_pagination,
    get_current_user,
    get_order_repository,
    get_product_repository,
    require_seller,
    validate_object_id,
)
from ..utils.serializers import serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("")
async def list_my_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    params: PageParams = Depends(),
    current: CurrentUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    """Get the caller's orders, newest first"""
    try:
        result = await orders.find_by_buyer(current.id, status=status, limit=params.limit, skip=params.skip)
        return {
            "success": True,
            "orders": serialize_docs(result["data"]),
            "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
        }
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to fetch orders for user {current.id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch orders: {str(e)}")


@router.get("/seller")
async def list_seller_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    params: PageParams = Depends(),
    seller: CurrentUser = Depends(require_seller),
    orders: OrderRepository = Depends(get_order_repository),
):
    result = await orders.find_by_seller(seller.id, status=status, limit=params.limit, skip=params.skip)
    return {
        "success": True,
        "orders": serialize_docs(result["data"]),
        "stats": await orders.get_stats(seller.id),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    current: CurrentUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    """Get a specific order by ID"""
    try:
        validate_object_id(order_id, "order")

        order = await orders.find_by_id_with_items(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if not can_view_order(order, current.id, current.role):
            raise PermissionDeniedError("Not authorized to view this order")

        return {"success": True, "order": serialize_doc(order)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to fetch order {order_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch order: {str(e)}")


@router.get("/{order_id}/tracking")
async def track_order(
    order_id: str,
    current: CurrentUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    validate_object_id(order_id, "order")
    order = await orders.find_by_id(order_id)
    if not order:
        raise NotFoundError("Order not found")
    if not can_view_order(order, current.id, current.role):
        raise PermissionDeniedError("Not authorized to view this order")

    return {
        "success": True,
        "tracking": serialize_doc({
            "order_number": order.get("order_number"),
            "status": order.get("status"),
            "status_history": order.get("status_history", []),
            "tracking_info": order.get("tracking_info"),
        }),
    }


@router.put("/{order_id}/status")
async def set_order_status(
    order_id: str,
    payload: UpdateOrderStatusRequest,
    current: CurrentUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    """Update order status (seller of an item, or admin)"""
    try:
        validate_object_id(order_id, "order")

        order = await orders.find_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if not (current.is_admin or is_item_seller(order, current.id)):
            raise PermissionDeniedError("Not authorized to update this order")

        updated = await update_order_status(
            orders,
            order_id,
            payload.status,
            current.id,
            reason=payload.reason,
            location=payload.location,
            estimated_delivery=payload.estimated_delivery,
            tracking_info=payload.tracking_info.model_dump(exclude_none=True) if payload.tracking_info else None,
        )
        return {"success": True, "message": "Order status updated successfully", "order": serialize_doc(updated)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to update order status {order_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update order status: {str(e)}")


@router.put("/{order_id}/cancel")
async def cancel_my_order(
    order_id: str,
    payload: Optional[CancelOrderRequest] = None,
    current: CurrentUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    validate_object_id(order_id, "order")
    order = await orders.find_by_id(order_id)
    if not order:
        raise NotFoundError("Order not found")
    if str(order.get("user")) != current.id:
        raise PermissionDeniedError("Not authorized to cancel this order")

    cancelled = await cancel_order(orders, products, order, current.id, payload.reason if payload else None)
    return {"success": True, "message": "Order cancelled successfully", "order": serialize_doc(cancelled)}
