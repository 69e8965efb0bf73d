"""
Review repository: product reviews, helpful votes and rating aggregates.
"""
from typing import Any, Dict, Optional

from ..models.base import utcnow
from ..utils.serializers import to_object_id
from .base import BaseRepository

REVIEWER_FIELDS = {"name": 1, "avatar": 1}


def round_half_up_2dp(value: float) -> float:
    """Two-decimal rounding that rounds .xx5 up rather than to even."""
    return int(value * 100 + 0.5) / 100


class ReviewRepository(BaseRepository):
    collection_name = "reviews"

    async def find_by_product(self, product_id: Any, **options) -> Dict[str, Any]:
        """Active reviews of a product, each with a ``user`` summary (name, avatar)."""
        result = await self.find_all({"product": to_object_id(product_id), "is_active": True}, **options)

        user_ids = list({r["user"] for r in result["data"]})
        if user_ids:
            cursor = self.db["users"].find({"_id": {"$in": user_ids}}, REVIEWER_FIELDS)
            users = {u["_id"]: u for u in await cursor.to_list(length=None)}
            result["data"] = [{**r, "user": users.get(r["user"], r["user"])} for r in result["data"]]
        return result

    async def find_by_user(self, user_id: Any, **options) -> Dict[str, Any]:
        return await self.find_all({"user": to_object_id(user_id), "is_active": True}, **options)

    async def find_existing(self, product_id: Any, user_id: Any, order_id: Any) -> Optional[Dict[str, Any]]:
        return await self.find_one({
            "product": to_object_id(product_id),
            "user": to_object_id(user_id),
            "order": to_object_id(order_id),
        })

    async def get_product_rating(self, product_id: Any) -> Dict[str, Any]:
        """
        Rating summary for a product.

        Returns:
            ``{"average": float (2 dp, 0 when unrated), "total": int, "distribution": {rating: count}}``
        """
        stats = await self.aggregate([
            {"$match": {"product": to_object_id(product_id), "is_active": True}},
            {"$group": {"_id": "$rating", "count": {"$sum": 1}}},
            {"$sort": {"_id": -1}},
        ])

        total = sum(s["count"] for s in stats)
        weighted = sum(s["_id"] * s["count"] for s in stats)
        return {
            "average": round_half_up_2dp(weighted / total) if total else 0,
            "total": total,
            "distribution": {str(s["_id"]): s["count"] for s in stats},
        }

    async def toggle_helpful(self, review_id: Any, user_id: Any) -> Optional[Dict[str, Any]]:
        """Add the user's helpful vote, or remove it if already present. Deleted reviews are left untouched."""
        review = await self.find_by_id(review_id)
        if not review or not review.get("is_active", False):
            return None

        user_oid = to_object_id(user_id)
        if any(vote["user"] == user_oid for vote in review.get("helpful", [])):
            update = {"$pull": {"helpful": {"user": user_oid}}}
        else:
            update = {"$push": {"helpful": {"user": user_oid, "created_at": utcnow()}}}
        return await self.update_by_id(review_id, update, raw=True)
