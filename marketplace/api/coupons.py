"""
Coupon validation and admin management.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import BadRequestError, MarketplaceError, NotFoundError
from ..models.coupon import CouponDocument
from ..repositories import CouponRepository
from ..schemas.coupon import CouponStatusRequest, CreateCouponRequest, ValidateCouponRequest
from ..services.coupons import calculate_discount, validate_coupon
from ..utils.dependencies import (
    CurrentUser,
    PageParams,
    build_pagination,
    get_coupon_repository,
    get_current_user,
    require_admin,
    validate_object_id,
)
from ..utils.serializers import serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coupons", tags=["Coupons"])


@router.post("/validate")
async def check_coupon(
    payload: ValidateCouponRequest,
    current: CurrentUser = Depends(get_current_user),
    coupons: CouponRepository = Depends(get_coupon_repository),
):
    """Preview a coupon against a cart amount. Always 200; ``valid`` carries the verdict."""
    coupon = await coupons.find_by_code(payload.code)
    if not coupon:
        return {"success": True, "valid": False, "discount": 0, "message": "Invalid coupon code"}

    valid, reason = validate_coupon(coupon, current.id, payload.cart_amount)
    if not valid:
        return {"success": True, "valid": False, "discount": 0, "message": reason}

    return {
        "success": True,
        "valid": True,
        "discount": calculate_discount(coupon, payload.cart_amount),
        "message": "Coupon applied successfully",
    }


@router.post("", status_code=201)
async def create_coupon(
    payload: CreateCouponRequest,
    admin: CurrentUser = Depends(require_admin),
    coupons: CouponRepository = Depends(get_coupon_repository),
):
    try:
        if await coupons.find_by_code(payload.code):
            raise BadRequestError("Coupon code already exists")

        coupon_doc = CouponDocument(created_by=admin.object_id, **payload.model_dump())
        coupon = await coupons.create(coupon_doc.to_document())
        logger.info(f"🎟️  Coupon created: {coupon['code']}")
        return {"success": True, "message": "Coupon created successfully", "coupon": serialize_doc(coupon)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to create coupon: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create coupon: {str(e)}")


@router.get("")
async def list_coupons(
    params: PageParams = Depends(),
    admin: CurrentUser = Depends(require_admin),
    coupons: CouponRepository = Depends(get_coupon_repository),
):
    result = await coupons.find_all({}, limit=params.limit, skip=params.skip, projection={"used_by": 0})
    return {
        "success": True,
        "coupons": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.put("/{coupon_id}/status")
async def set_coupon_status(
    coupon_id: str,
    payload: CouponStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    coupons: CouponRepository = Depends(get_coupon_repository),
):
    validate_object_id(coupon_id, "coupon")
    coupon = await coupons.update_by_id(coupon_id, {"is_active": payload.is_active})
    if not coupon:
        raise NotFoundError("Coupon not found")
    state = "activated" if payload.is_active else "deactivated"
    return {"success": True, "message": f"Coupon {state} successfully", "coupon": serialize_doc(coupon)}
