"""
Product repository: catalogue queries, stock and statistics.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..config.settings import get_settings
from ..core.exceptions import InsufficientStockError, RepositoryError
from ..models.base import utcnow
from ..utils.serializers import to_object_id
from .base import BaseRepository

SELLER_SUMMARY_FIELDS = {
    "name": 1,
    "email": 1,
    "phone": 1,
    "avatar": 1,
    "seller_info.business_name": 1,
    "seller_info.tribe": 1,
    "seller_info.verified": 1,
    "seller_info.description": 1,
}


def build_search_filter(search_term: str) -> Dict[str, Any]:
    """Case-insensitive match on name or description, literal text only."""
    pattern = re.escape(search_term)
    return {
        "$or": [
            {"name": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]
    }


class ProductRepository(BaseRepository):
    collection_name = "products"

    async def find_by_category(self, category: str, **options) -> Dict[str, Any]:
        return await self.find_all({"category": category, "is_active": True}, **options)

    async def find_by_seller(self, seller_id: Any, **options) -> Dict[str, Any]:
        return await self.find_all({"seller": to_object_id(seller_id)}, **options)

    async def find_active_by_seller(self, seller_id: Any, **options) -> Dict[str, Any]:
        return await self.find_all({"seller": to_object_id(seller_id), "is_active": True}, **options)

    async def search(self, search_term: str, **options) -> Dict[str, Any]:
        return await self.find_all({"is_active": True, **build_search_filter(search_term)}, **options)

    async def find_by_price_range(self, min_price: float, max_price: float, **options) -> Dict[str, Any]:
        filter = {"is_active": True, "price": {"$gte": min_price, "$lte": max_price}}
        return await self.find_all(filter, **options)

    async def find_low_stock(self, threshold: Optional[int] = None, **options) -> Dict[str, Any]:
        if threshold is None:
            threshold = get_settings().low_stock_threshold
        return await self.find_all({"is_active": True, "stock": {"$lte": threshold}}, **options)

    async def attach_sellers(self, products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Replace each product's ``seller`` id with a seller summary document."""
        seller_ids = list({p["seller"] for p in products if p.get("seller") is not None})
        if not seller_ids:
            return products
        cursor = self.db["users"].find({"_id": {"$in": seller_ids}}, SELLER_SUMMARY_FIELDS)
        sellers = {s["_id"]: s for s in await cursor.to_list(length=None)}
        return [{**p, "seller": sellers.get(p.get("seller"), p.get("seller"))} for p in products]

    async def find_all_with_seller(self, filter: Optional[Dict[str, Any]] = None, **options) -> Dict[str, Any]:
        result = await self.find_all(filter, **options)
        result["data"] = await self.attach_sellers(result["data"])
        return result

    async def find_by_id_with_seller(self, product_id: Any) -> Optional[Dict[str, Any]]:
        product = await self.find_by_id(product_id)
        if not product:
            return None
        return (await self.attach_sellers([product]))[0]

    async def update_stock(self, product_id: Any, quantity: int) -> Optional[Dict[str, Any]]:
        """
        Adjust stock by ``quantity`` (negative to decrement).

        Raises:
            InsufficientStockError: If the result would be negative
        """
        product = await self.find_by_id(product_id)
        if not product:
            return None

        new_stock = product.get("stock", 0) + quantity
        if new_stock < 0:
            raise InsufficientStockError(f"Insufficient stock for {product.get('name', 'product')}")
        return await self.update_by_id(product_id, {"stock": new_stock})

    async def decrement_stock_if_available(self, product_id: Any, quantity: int) -> Optional[Dict[str, Any]]:
        """
        Decrement stock only when at least ``quantity`` is left.

        Returns:
            Updated product, or None when the product is missing or short of stock
        """
        object_id = to_object_id(product_id)
        if object_id is None:
            return None
        try:
            return await self.collection.find_one_and_update(
                {"_id": object_id, "stock": {"$gte": quantity}},
                {"$inc": {"stock": -quantity}, "$set": {"updated_at": utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise RepositoryError(f"Error updating stock: {e}") from e

    async def increment_stock(self, product_id: Any, quantity: int) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(product_id, {"$inc": {"stock": quantity}}, raw=True)

    async def get_featured(self, limit: int = 10) -> List[Dict[str, Any]]:
        result = await self.find_all_with_seller({"is_active": True}, sort=[("created_at", -1)], limit=limit)
        return result["data"]

    async def find_by_ids(self, product_ids: Iterable[Any]) -> List[Dict[str, Any]]:
        """Active products among ``product_ids``; invalid ids are ignored."""
        valid_ids = [oid for oid in (to_object_id(i) for i in product_ids) if oid is not None]
        if not valid_ids:
            return []
        try:
            cursor = self.collection.find({"_id": {"$in": valid_ids}, "is_active": True})
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise RepositoryError(f"Error finding products by IDs: {e}") from e

    async def is_in_stock(self, product_id: Any, quantity: int = 1) -> bool:
        product = await self.find_by_id(product_id)
        if not product:
            return False
        return bool(product.get("is_active")) and product.get("stock", 0) >= quantity

    async def categories(self) -> List[str]:
        return sorted(await self.distinct("category", {"is_active": True}))

    async def set_rating(self, product_id: Any, rating: float, num_reviews: int) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(product_id, {"rating": rating, "num_reviews": num_reviews})

    async def get_stats(self, seller_id: Any = None) -> Dict[str, Any]:
        """
        Aggregate catalogue statistics, optionally for one seller.
        """
        match = {"seller": to_object_id(seller_id)} if seller_id is not None else {}
        stats = await self.aggregate([
            {"$match": match},
            {
                "$group": {
                    "_id": None,
                    "total_products": {"$sum": 1},
                    "active_products": {"$sum": {"$cond": ["$is_active", 1, 0]}},
                    "total_stock": {"$sum": "$stock"},
                    "avg_price": {"$avg": "$price"},
                    "min_price": {"$min": "$price"},
                    "max_price": {"$max": "$price"},
                }
            },
        ])
        if not stats:
            return {
                "total_products": 0,
                "active_products": 0,
                "total_stock": 0,
                "avg_price": 0,
                "min_price": 0,
                "max_price": 0,
            }
        stats[0].pop("_id", None)
        return stats[0]
