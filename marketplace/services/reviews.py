"""
Review creation and product rating upkeep.
"""
import logging
from typing import Any, Dict, Optional

from ..core.exceptions import BadRequestError, NotFoundError
from ..models.review import ReviewDocument
from ..repositories import OrderRepository, ProductRepository, ReviewRepository
from ..utils.serializers import to_object_id

logger = logging.getLogger(__name__)


async def recompute_product_rating(
    reviews: ReviewRepository, products: ProductRepository, product_id: Any
) -> Dict[str, Any]:
    """Refresh a product's ``rating`` and ``num_reviews`` from its active reviews."""
    summary = await reviews.get_product_rating(product_id)
    await products.set_rating(product_id, summary["average"], summary["total"])
    return summary


async def find_review_order(
    orders: OrderRepository, user_id: Any, product_id: Any, order_id: Optional[Any] = None
) -> Optional[Dict[str, Any]]:
    """
    The caller's order that makes them eligible to review ``product_id``.

    With ``order_id`` only that order counts; otherwise the newest
    non-cancelled order containing the product is used.
    """
    filter: Dict[str, Any] = {
        "user": to_object_id(user_id),
        "items.product": to_object_id(product_id),
        "status": {"$ne": "cancelled"},
    }
    if order_id is not None:
        filter["_id"] = to_object_id(order_id)
        return await orders.find_one(filter)

    result = await orders.find_all(filter, limit=1)
    return result["data"][0] if result["data"] else None


async def create_review(
    reviews: ReviewRepository,
    products: ProductRepository,
    orders: OrderRepository,
    user_id: Any,
    product_id: Any,
    payload: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Store a verified review and refresh the product rating.

    Raises:
        NotFoundError: If the product does not exist or is inactive
        BadRequestError: If the caller never ordered the product, or already reviewed it for that order
    """
    product = await products.find_by_id(product_id)
    if not product or not product.get("is_active", False):
        raise NotFoundError("Product not found")

    order = await find_review_order(orders, user_id, product_id, payload.get("order_id"))
    if not order:
        raise BadRequestError("You can only review products you have ordered")

    if await reviews.find_existing(product_id, user_id, order["_id"]):
        raise BadRequestError("You have already reviewed this product")

    review_doc = ReviewDocument(
        product=product["_id"],
        user=to_object_id(user_id),
        order=order["_id"],
        rating=payload["rating"],
        title=payload["title"],
        comment=payload["comment"],
        images=payload.get("images") or [],
    )
    review = await reviews.create(review_doc.to_document())
    logger.info(f"⭐ Review {review['_id']} added to product {product_id}")

    await recompute_product_rating(reviews, products, product["_id"])
    return review
