"""
Order repository: buyer/seller views, status history and analytics.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..utils.serializers import to_object_id
from .base import BaseRepository

ORDER_PRODUCT_FIELDS = {"name": 1, "price": 1, "images": 1, "category": 1}
COMPLETED_PAYMENT = {"payment_info.status": "completed"}


class OrderRepository(BaseRepository):
    collection_name = "orders"

    async def find_by_buyer(self, buyer_id: Any, status: Optional[str] = None, **options) -> Dict[str, Any]:
        filter: Dict[str, Any] = {"user": to_object_id(buyer_id)}
        if status:
            filter["status"] = status
        return await self.find_all(filter, **options)

    async def find_by_status(self, status: str, **options) -> Dict[str, Any]:
        return await self.find_all({"status": status}, **options)

    async def find_by_seller(self, seller_id: Any, status: Optional[str] = None, **options) -> Dict[str, Any]:
        filter: Dict[str, Any] = {"items.seller": to_object_id(seller_id)}
        if status:
            filter["status"] = status
        return await self.find_all(filter, **options)

    async def find_by_order_number(self, order_number: str) -> Optional[Dict[str, Any]]:
        return await self.find_by_field("order_number", order_number)

    async def find_by_id_with_items(self, order_id: Any) -> Optional[Dict[str, Any]]:
        """Order with each item's ``product`` expanded into a product summary."""
        order = await self.find_by_id(order_id)
        if not order:
            return None

        product_ids = [item["product"] for item in order.get("items", [])]
        cursor = self.db["products"].find({"_id": {"$in": product_ids}}, ORDER_PRODUCT_FIELDS)
        products = {p["_id"]: p for p in await cursor.to_list(length=None)}
        items = [{**item, "product": products.get(item["product"], item["product"])} for item in order["items"]]
        return {**order, "items": items}

    async def push_status(
        self,
        order_id: Any,
        status: str,
        history_entry: Dict[str, Any],
        extra: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Set ``status`` (plus any ``extra`` fields) and append a history entry."""
        return await self.update_by_id(
            order_id,
            {
                "$set": {"status": status, **(extra or {})},
                "$push": {"status_history": history_entry},
            },
            raw=True,
        )

    async def get_stats(self, seller_id: Any = None) -> Dict[str, Any]:
        match = {"items.seller": to_object_id(seller_id)} if seller_id is not None else {}
        stats = await self.aggregate([
            {"$match": match},
            {
                "$group": {
                    "_id": None,
                    "total_orders": {"$sum": 1},
                    "total_revenue": {"$sum": "$total"},
                    "avg_order_value": {"$avg": "$total"},
                }
            },
        ])
        if not stats:
            return {"total_orders": 0, "total_revenue": 0, "avg_order_value": 0}
        stats[0].pop("_id", None)
        return stats[0]

    async def get_total_revenue(self) -> float:
        result = await self.aggregate([
            {"$match": COMPLETED_PAYMENT},
            {"$group": {"_id": None, "total": {"$sum": "$total"}}},
        ])
        return result[0]["total"] if result else 0

    async def get_revenue_by_day(self, since: datetime) -> List[Dict[str, Any]]:
        return await self.aggregate([
            {"$match": {"created_at": {"$gte": since}, **COMPLETED_PAYMENT}},
            {
                "$group": {
                    "_id": {"$dateToString": {"format": "%Y-%m-%d", "date": "$created_at"}},
                    "revenue": {"$sum": "$total"},
                    "orders": {"$sum": 1},
                }
            },
            {"$sort": {"_id": 1}},
        ])

    async def get_category_sales(self, limit: int = 10) -> List[Dict[str, Any]]:
        return await self.aggregate([
            {"$unwind": "$items"},
            {
                "$lookup": {
                    "from": "products",
                    "localField": "items.product",
                    "foreignField": "_id",
                    "as": "product",
                }
            },
            {"$unwind": "$product"},
            {
                "$group": {
                    "_id": "$product.category",
                    "sales": {"$sum": {"$multiply": ["$items.price", "$items.quantity"]}},
                    "quantity": {"$sum": "$items.quantity"},
                }
            },
            {"$sort": {"sales": -1}},
            {"$limit": limit},
        ])

    async def get_top_sellers(self, limit: int = 10) -> List[Dict[str, Any]]:
        return await self.aggregate([
            {"$unwind": "$items"},
            {
                "$group": {
                    "_id": "$items.seller",
                    "earnings": {"$sum": {"$multiply": ["$items.price", "$items.quantity"]}},
                    "orders": {"$addToSet": "$_id"},
                }
            },
            {"$project": {"earnings": 1, "order_count": {"$size": "$orders"}}},
            {"$sort": {"earnings": -1}},
            {"$limit": limit},
            {
                "$lookup": {
                    "from": "users",
                    "localField": "_id",
                    "foreignField": "_id",
                    "as": "seller",
                }
            },
            {"$unwind": "$seller"},
            {
                "$project": {
                    "name": "$seller.name",
                    "business_name": "$seller.seller_info.business_name",
                    "earnings": 1,
                    "order_count": 1,
                }
            },
        ])
