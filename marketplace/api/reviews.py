"""
Review listing and moderation endpoints.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..core.exceptions import NotFoundError, PermissionDeniedError
from ..repositories import ProductRepository, ReviewRepository
from ..services.reviews import recompute_product_rating
from ..utils.dependencies import (
    CurrentUser,
    PageParams,
    build_pagination,
    get_current_user,
    get_product_repository,
    get_review_repository,
    validate_object_id,
)
from ..utils.serializers import serialize_docs, to_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("")
async def list_reviews(
    product: Optional[str] = Query(None, description="Filter by product ID"),
    user: Optional[str] = Query(None, description="Filter by author ID"),
    params: PageParams = Depends(),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    filter: Dict[str, Any] = {"is_active": True}
    if product:
        filter["product"] = validate_object_id(product, "product")
    if user:
        filter["user"] = validate_object_id(user, "user")

    result = await reviews.find_all(filter, limit=params.limit, skip=params.skip)
    return {
        "success": True,
        "reviews": serialize_docs(result["data"]),
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.post("/{review_id}/helpful")
async def toggle_helpful(
    review_id: str,
    current: CurrentUser = Depends(get_current_user),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    """Mark a review helpful, or undo the caller's earlier vote."""
    validate_object_id(review_id, "review")
    review = await reviews.toggle_helpful(review_id, current.id)
    if not review or not review.get("is_active", False):
        raise NotFoundError("Review not found")

    voted = any(vote["user"] == to_object_id(current.id) for vote in review.get("helpful", []))
    return {"success": True, "helpful_count": len(review.get("helpful", [])), "marked_helpful": voted}


@router.delete("/{review_id}")
async def delete_review(
    review_id: str,
    current: CurrentUser = Depends(get_current_user),
    reviews: ReviewRepository = Depends(get_review_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    validate_object_id(review_id, "review")
    review = await reviews.find_by_id(review_id)
    if not review or not review.get("is_active", False):
        raise NotFoundError("Review not found")
    if not (current.is_admin or str(review.get("user")) == current.id):
        raise PermissionDeniedError("Not authorized to delete this review")

    await reviews.soft_delete(review_id)
    await recompute_product_rating(reviews, products, review["product"])
    logger.info(f"Review deleted: {review_id}")
    return {"success": True, "message": "Review deleted successfully"}
