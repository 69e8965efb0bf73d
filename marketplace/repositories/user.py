"""
User repository: lookups, wishlist and seller notifications.
"""
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..core.exceptions import RepositoryError
from ..models.base import utcnow
from ..models.user import SellerInfo
from ..utils.serializers import public_user, to_object_id
from .base import BaseRepository

WISHLIST_PRODUCT_FIELDS = {"name": 1, "price": 1, "images": 1, "category": 1, "stock": 1, "is_active": 1}


class UserRepository(BaseRepository):
    collection_name = "users"

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.find_by_field("email", email.strip().lower())

    async def find_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        return await self.find_by_field("phone", phone)

    async def find_by_role(self, role: str, **options) -> Dict[str, Any]:
        return await self.find_all({"role": role}, **options)

    async def find_verified_sellers(self, **options) -> Dict[str, Any]:
        filter = {
            "role": "seller",
            "seller_info.verified": True,
            "is_active": True,
        }
        return await self.find_all(filter, **options)

    async def find_active_users(self, **options) -> Dict[str, Any]:
        return await self.find_all({"is_active": True}, **options)

    async def update_last_login(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(user_id, {"last_login": utcnow()})

    async def verify_email(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(user_id, {"email_verified": True})

    async def add_to_wishlist(self, user_id: Any, product_id: Any) -> Optional[Dict[str, Any]]:
        """Add a product once; repeated adds leave the wishlist unchanged."""
        return await self.update_by_id(
            user_id, {"$addToSet": {"wishlist": to_object_id(product_id)}}, raw=True
        )

    async def remove_from_wishlist(self, user_id: Any, product_id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(
            user_id, {"$pull": {"wishlist": to_object_id(product_id)}}, raw=True
        )

    async def find_by_id_with_wishlist(self, user_id: Any) -> Optional[Dict[str, Any]]:
        """User document with ``wishlist`` expanded into product summaries."""
        user = await self.find_by_id(user_id)
        if not user:
            return None

        ids = user.get("wishlist", [])
        products: List[Dict[str, Any]] = []
        if ids:
            cursor = self.db["products"].find({"_id": {"$in": ids}}, WISHLIST_PRODUCT_FIELDS)
            found = {p["_id"]: p for p in await cursor.to_list(length=None)}
            # Keep wishlist order and drop products that no longer exist
            products = [found[i] for i in ids if i in found]

        return {**user, "wishlist": products}

    async def get_public_profile(self, user_id: Any) -> Optional[Dict[str, Any]]:
        user = await self.find_by_id(user_id)
        return public_user(user)

    async def email_exists(self, email: str, exclude_user_id: Any = None) -> bool:
        filter: Dict[str, Any] = {"email": email.strip().lower()}
        if exclude_user_id is not None:
            filter["_id"] = {"$ne": to_object_id(exclude_user_id)}
        return await self.exists(filter)

    async def phone_exists(self, phone: str, exclude_user_id: Any = None) -> bool:
        filter: Dict[str, Any] = {"phone": phone}
        if exclude_user_id is not None:
            filter["_id"] = {"$ne": to_object_id(exclude_user_id)}
        return await self.exists(filter)

    async def ensure_seller_info(self, user_id: Any) -> bool:
        """
        Give a user an empty seller profile when theirs is missing or null.

        Returns:
            True when a profile was created
        """
        user_oid = to_object_id(user_id)
        if user_oid is None:
            return False
        try:
            result = await self.collection.update_one(
                {"_id": user_oid, "seller_info": None},
                {"$set": {"seller_info": SellerInfo().model_dump(), "updated_at": utcnow()}},
            )
        except PyMongoError as e:
            raise RepositoryError(f"Error creating seller profile: {e}") from e
        return result.modified_count > 0

    async def push_notification(self, user_id: Any, notification: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Append a notification; users without a seller profile are left alone and None is returned."""
        user_oid = to_object_id(user_id)
        if user_oid is None:
            return None
        try:
            return await self.collection.find_one_and_update(
                {"_id": user_oid, "seller_info": {"$type": "object"}},
                {"$push": {"seller_info.notifications": notification}, "$set": {"updated_at": utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise RepositoryError(f"Error pushing notification: {e}") from e

    async def mark_notification_read(self, user_id: Any, notification_id: Any) -> bool:
        """
        Flag one notification as read.

        Returns:
            True when the notification exists on the user
        """
        user_oid = to_object_id(user_id)
        notification_oid = to_object_id(notification_id)
        if user_oid is None or notification_oid is None:
            return False
        try:
            result = await self.collection.update_one(
                {"_id": user_oid, "seller_info.notifications._id": notification_oid},
                {"$set": {"seller_info.notifications.$.is_read": True, "updated_at": utcnow()}},
            )
        except PyMongoError as e:
            raise RepositoryError(f"Error updating notification: {e}") from e
        return result.matched_count > 0

    async def mark_all_notifications_read(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(
            user_id,
            {"$set": {"seller_info.notifications.$[].is_read": True}},
            raw=True,
        )

    async def count_by_role(self, role: str, **extra) -> int:
        return await self.count({"role": role, **extra})
