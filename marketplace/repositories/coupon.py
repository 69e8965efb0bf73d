"""
Coupon repository.
"""
from typing import Any, Dict, Optional

from ..models.base import utcnow
from ..utils.serializers import to_object_id
from .base import BaseRepository


class CouponRepository(BaseRepository):
    collection_name = "coupons"

    async def find_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        return await self.find_by_field("code", code.strip().upper())

    async def record_usage(
        self, coupon_id: Any, user_id: Any, order_amount: float, discount_amount: float
    ) -> Optional[Dict[str, Any]]:
        usage = {
            "user": to_object_id(user_id),
            "used_at": utcnow(),
            "order_amount": order_amount,
            "discount_amount": discount_amount,
        }
        return await self.update_by_id(
            coupon_id, {"$push": {"used_by": usage}, "$inc": {"used_count": 1}}, raw=True
        )
