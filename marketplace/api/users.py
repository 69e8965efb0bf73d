"""
Profile, password and wishlist endpoints for the signed-in user.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import AuthenticationError, BadRequestError, MarketplaceError, NotFoundError
from ..core.security import hash_password, verify_password
from ..repositories import ProductRepository, UserRepository
from ..schemas.user import ChangePasswordRequest, UpdateProfileRequest, WishlistAddRequest
from ..utils.dependencies import (
    CurrentUser,
    get_current_user,
    get_product_repository,
    get_user_repository,
    validate_object_id,
)
from ..utils.serializers import public_user, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me")
async def get_profile(current: CurrentUser = Depends(get_current_user), users: UserRepository = Depends(get_user_repository)):
    user = await users.get_public_profile(current.id)
    if not user:
        raise NotFoundError("User not found")
    return {"success": True, "user": user}


@router.put("/profile")
async def update_profile(
    payload: UpdateProfileRequest,
    current: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    """Update profile fields; e-mail and phone must stay unique across other users."""
    try:
        update = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not update:
            raise BadRequestError("No fields to update")

        if "email" in update:
            update["email"] = update["email"].strip().lower()
            if await users.email_exists(update["email"], exclude_user_id=current.id):
                raise BadRequestError("Email is already in use")
        if "phone" in update and await users.phone_exists(update["phone"], exclude_user_id=current.id):
            raise BadRequestError("Phone number is already in use")

        if "seller_info" in update:
            if current.role != "seller":
                raise BadRequestError("Only sellers have seller details")
            await users.ensure_seller_info(current.id)
            # Keep verification state and notifications untouched
            seller_info = update.pop("seller_info")
            update.update({f"seller_info.{k}": v for k, v in seller_info.items()})

        user = await users.update_by_id(current.id, update)
        if not user:
            raise NotFoundError("User not found")

        logger.info(f"Profile updated: {current.id}")
        return {"success": True, "message": "Profile updated successfully", "user": public_user(user)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to update profile {current.id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")


@router.put("/password")
async def change_password(
    payload: ChangePasswordRequest,
    current: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = await users.find_by_id(current.id)
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(payload.current_password, user.get("password_hash")):
        raise AuthenticationError("Current password is incorrect")

    await users.update_by_id(current.id, {"password_hash": hash_password(payload.new_password)})
    logger.info(f"🔐 Password changed for user {current.id}")
    return {"success": True, "message": "Password updated successfully"}


@router.get("/wishlist")
async def get_wishlist(current: CurrentUser = Depends(get_current_user), users: UserRepository = Depends(get_user_repository)):
    user = await users.find_by_id_with_wishlist(current.id)
    if not user:
        raise NotFoundError("User not found")
    return {"success": True, "wishlist": serialize_docs(user["wishlist"])}


@router.post("/wishlist/add")
async def add_to_wishlist(
    payload: WishlistAddRequest,
    current: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    product = await products.find_by_id(payload.product_id)
    if not product or not product.get("is_active", False):
        raise NotFoundError("Product not found")

    user = await users.add_to_wishlist(current.id, product["_id"])
    if not user:
        raise NotFoundError("User not found")
    return {
        "success": True,
        "message": "Added to wishlist",
        "wishlist": [str(pid) for pid in user.get("wishlist", [])],
    }


@router.delete("/wishlist/remove/{product_id}")
async def remove_from_wishlist(
    product_id: str,
    current: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    validate_object_id(product_id, "product")
    user = await users.remove_from_wishlist(current.id, product_id)
    if not user:
        raise NotFoundError("User not found")
    return {
        "success": True,
        "message": "Removed from wishlist",
        "wishlist": [str(pid) for pid in user.get("wishlist", [])],
    }
