"""
Administrator dashboard, moderation and analytics.
"""
import logging
from datetime import timedelta
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.exceptions import BadRequestError, MarketplaceError, NotFoundError
from ..models.base import utcnow
from ..models.user import SellerNotification
from ..repositories import OrderRepository, ProductRepository, UserRepository
from ..schemas.admin import ProductApprovalRequest, ProductStatusRequest, UserRoleRequest, UserStatusRequest
from ..schemas.order import UpdateOrderStatusRequest
from ..services.orders import update_order_status
from ..utils.dependencies import (
    CurrentUser,
    PageParams,
    build_pagination,
    get_order_repository,
    get_product_repository,
    get_user_repository,
    require_admin,
    validate_object_id,
)
from ..utils.serializers import PRIVATE_USER_FIELDS, public_user, serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])

ANALYTICS_WINDOW_DAYS = 30
USER_LIST_PROJECTION = {field: 0 for field in PRIVATE_USER_FIELDS}


@router.get("/dashboard")
async def dashboard(
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
    orders: OrderRepository = Depends(get_order_repository),
):
    try:
        stats = {
            "total_users": await users.count(),
            "total_products": await products.count(),
            "total_orders": await orders.count(),
            "total_revenue": await orders.get_total_revenue(),
            "pending_approvals": await users.count_by_role("seller", **{"seller_info.verified": False}),
            "active_artisans": await users.count_by_role(
                "seller", **{"seller_info.verified": True, "is_active": True}
            ),
        }
        return {"success": True, "stats": stats}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to build dashboard stats: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build dashboard stats: {str(e)}")


# Users

@router.get("/users")
async def list_users(
    role: Optional[Literal["buyer", "seller", "admin"]] = Query(None),
    verified: Optional[bool] = Query(None, description="Seller verification state"),
    params: PageParams = Depends(),
    users: UserRepository = Depends(get_user_repository),
):
    filter: Dict[str, Any] = {}
    if role:
        filter["role"] = role
    if verified is not None:
        filter["seller_info.verified"] = verified

    result = await users.find_all(filter, limit=params.limit, skip=params.skip, projection=USER_LIST_PROJECTION)
    return {
        "success": True,
        "users": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit, total_key="total_users"),
    }


async def _get_seller(users: UserRepository, user_id: str) -> Dict[str, Any]:
    validate_object_id(user_id, "user")
    user = await users.find_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.get("role") != "seller":
        raise BadRequestError("User is not a seller")
    if not user.get("seller_info"):
        await users.ensure_seller_info(user_id)
    return user


@router.put("/users/{user_id}/approve")
async def approve_seller(user_id: str, users: UserRepository = Depends(get_user_repository)):
    await _get_seller(users, user_id)
    user = await users.update_by_id(user_id, {"seller_info.verified": True})
    logger.info(f"✅ Seller approved: {user_id}")
    return {"success": True, "message": "Seller approved successfully", "user": public_user(user)}


@router.put("/users/{user_id}/reject")
async def reject_seller(user_id: str, users: UserRepository = Depends(get_user_repository)):
    await _get_seller(users, user_id)
    user = await users.update_by_id(user_id, {"seller_info.verified": False, "is_active": False})
    logger.info(f"🚫 Seller rejected: {user_id}")
    return {"success": True, "message": "Seller rejected and account deactivated", "user": public_user(user)}


@router.put("/users/{user_id}/role")
async def set_user_role(user_id: str, payload: UserRoleRequest, users: UserRepository = Depends(get_user_repository)):
    validate_object_id(user_id, "user")
    if payload.role == "seller":
        await users.ensure_seller_info(user_id)
    user = await users.update_by_id(user_id, {"role": payload.role})
    if not user:
        raise NotFoundError("User not found")
    return {"success": True, "message": "User role updated successfully", "user": public_user(user)}


@router.put("/users/{user_id}/status")
async def set_user_status(
    user_id: str,
    payload: UserStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository),
):
    validate_object_id(user_id, "user")
    if user_id == admin.id and not payload.is_active:
        raise BadRequestError("You cannot deactivate your own account")

    user = await users.update_by_id(user_id, {"is_active": payload.is_active})
    if not user:
        raise NotFoundError("User not found")
    state = "activated" if payload.is_active else "deactivated"
    return {"success": True, "message": f"User {state} successfully", "user": public_user(user)}


# Products

@router.get("/products")
async def list_all_products(
    status: Optional[Literal["active", "inactive"]] = Query(None),
    params: PageParams = Depends(),
    products: ProductRepository = Depends(get_product_repository),
):
    filter: Dict[str, Any] = {}
    if status:
        filter["is_active"] = status == "active"

    result = await products.find_all_with_seller(filter, limit=params.limit, skip=params.skip)
    return {
        "success": True,
        "products": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit, total_key="total_products"),
    }


@router.put("/products/{product_id}/status")
async def set_product_status(
    product_id: str, payload: ProductStatusRequest, products: ProductRepository = Depends(get_product_repository)
):
    validate_object_id(product_id, "product")
    update = payload.model_dump(exclude_none=True)
    product = await products.update_by_id(product_id, update)
    if not product:
        raise NotFoundError("Product not found")
    state = "activated" if payload.is_active else "deactivated"
    return {"success": True, "message": f"Product {state} successfully", "product": serialize_doc(product)}


@router.put("/products/{product_id}/approve")
async def approve_product(
    product_id: str,
    payload: Optional[ProductApprovalRequest] = None,
    admin: CurrentUser = Depends(require_admin),
    products: ProductRepository = Depends(get_product_repository),
    users: UserRepository = Depends(get_user_repository),
):
    """Approve and publish a product, then tell its seller."""
    validate_object_id(product_id, "product")
    update: Dict[str, Any] = {
        "is_approved": True,
        "is_active": True,
        "approved_at": utcnow(),
        "approved_by": admin.object_id,
    }
    if payload and payload.admin_remarks:
        update["admin_remarks"] = payload.admin_remarks

    product = await products.update_by_id(product_id, update)
    if not product:
        raise NotFoundError("Product not found")

    notification = SellerNotification(
        type="product_approval",
        message=f'Your product "{product["name"]}" has been approved and is now live on the marketplace.',
        product_id=product["_id"],
    )
    if not await users.push_notification(product["seller"], notification.model_dump(by_alias=True)):
        logger.warning(f"⚠️  Seller {product['seller']} has no seller profile; approval notice not stored")

    logger.info(f"✅ Product approved: {product_id}")
    return {"success": True, "message": "Product approved successfully", "product": serialize_doc(product)}


# Orders

@router.get("/orders")
async def list_all_orders(
    status: Optional[str] = Query(None),
    params: PageParams = Depends(),
    orders: OrderRepository = Depends(get_order_repository),
):
    if status:
        result = await orders.find_by_status(status, limit=params.limit, skip=params.skip)
    else:
        result = await orders.find_all({}, limit=params.limit, skip=params.skip)
    return {
        "success": True,
        "orders": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit, total_key="total_orders"),
    }


@router.put("/orders/{order_id}/status")
async def set_any_order_status(
    order_id: str,
    payload: UpdateOrderStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    orders: OrderRepository = Depends(get_order_repository),
):
    validate_object_id(order_id, "order")
    order = await update_order_status(
        orders,
        order_id,
        payload.status,
        admin.id,
        reason=payload.reason,
        location=payload.location,
        estimated_delivery=payload.estimated_delivery,
        tracking_info=payload.tracking_info.model_dump(exclude_none=True) if payload.tracking_info else None,
    )
    if not order:
        raise NotFoundError("Order not found")
    return {"success": True, "message": "Order status updated successfully", "order": serialize_doc(order)}


@router.get("/analytics")
async def analytics(orders: OrderRepository = Depends(get_order_repository)):
    try:
        since = utcnow() - timedelta(days=ANALYTICS_WINDOW_DAYS)
        return {
            "success": True,
            "analytics": serialize_doc({
                "revenue_data": await orders.get_revenue_by_day(since),
                "category_sales": await orders.get_category_sales(),
                "top_sellers": await orders.get_top_sellers(),
            }),
        }
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to build analytics: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build analytics: {str(e)}")
