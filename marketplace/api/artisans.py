"""
Public artisan (verified seller) profiles.
"""
from fastapi import APIRouter, Depends

from ..core.exceptions import NotFoundError
from ..repositories import ProductRepository, UserRepository
from ..utils.dependencies import (
    PageParams,
    build_pagination,
    get_product_repository,
    get_user_repository,
    validate_object_id,
)
from ..utils.serializers import public_user, serialize_docs

router = APIRouter(prefix="/artisans", tags=["Artisans"])

ARTISAN_HIDDEN_FIELDS = ("email", "phone", "wishlist", "address", "last_login")


def artisan_profile(user):
    profile = public_user(user)
    for field in ARTISAN_HIDDEN_FIELDS:
        profile.pop(field, None)
    if profile.get("seller_info"):
        profile["seller_info"] = {k: v for k, v in profile["seller_info"].items() if k != "notifications"}
    return profile


@router.get("")
async def list_artisans(
    params: PageParams = Depends(),
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    result = await users.find_verified_sellers(limit=params.limit, skip=params.skip)
    artisans = []
    for seller in result["data"]:
        profile = artisan_profile(seller)
        profile["product_count"] = await products.count({"seller": seller["_id"], "is_active": True})
        artisans.append(profile)

    return {
        "success": True,
        "artisans": artisans,
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.get("/{artisan_id}")
async def get_artisan(
    artisan_id: str,
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    validate_object_id(artisan_id, "artisan")
    seller = await users.find_by_id(artisan_id)
    if (
        not seller
        or seller.get("role") != "seller"
        or not seller.get("is_active", True)
        or not (seller.get("seller_info") or {}).get("verified", False)
    ):
        raise NotFoundError("Artisan not found")

    listed = await products.find_active_by_seller(artisan_id)
    return {"success": True, "artisan": artisan_profile(seller), "products": serialize_docs(listed["data"])}
