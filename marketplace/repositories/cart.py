"""
Cart repository.
"""
from typing import Any, Dict, Optional

from ..core.exceptions import NotFoundError
from ..models.cart import CartDocument, CartItem
from ..utils.serializers import to_object_id
from .base import BaseRepository

CART_PRODUCT_FIELDS = {"name": 1, "price": 1, "images": 1, "stock": 1, "is_active": 1, "seller": 1, "category": 1}


class CartRepository(BaseRepository):
    collection_name = "carts"

    async def find_by_user(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return await self.find_by_field("user", to_object_id(user_id))

    async def get_or_create(self, user_id: Any) -> Dict[str, Any]:
        cart = await self.find_by_user(user_id)
        if cart:
            return cart
        return await self.create(CartDocument(user=to_object_id(user_id)).to_document())

    async def find_by_user_with_items(self, user_id: Any) -> Optional[Dict[str, Any]]:
        """
        Cart with each item's ``product`` replaced by a product summary.
        Items whose product has been removed from the database are dropped.
        """
        cart = await self.find_by_user(user_id)
        if not cart:
            return None

        product_ids = [item["product"] for item in cart.get("items", [])]
        products: Dict[Any, Dict[str, Any]] = {}
        if product_ids:
            cursor = self.db["products"].find({"_id": {"$in": product_ids}}, CART_PRODUCT_FIELDS)
            products = {p["_id"]: p for p in await cursor.to_list(length=None)}

        items = [
            {**item, "product": products[item["product"]]}
            for item in cart.get("items", [])
            if item["product"] in products
        ]
        return {**cart, "items": items}

    async def add_item(self, cart_id: Any, product_id: Any, quantity: int = 1) -> Optional[Dict[str, Any]]:
        """Add ``quantity`` of a product, merging with an existing line."""
        cart = await self.find_by_id(cart_id)
        if not cart:
            return None

        product_oid = to_object_id(product_id)
        items = list(cart.get("items", []))
        for item in items:
            if item["product"] == product_oid:
                item["quantity"] += quantity
                break
        else:
            items.append(CartItem(product=product_oid, quantity=quantity).model_dump())

        return await self.update_by_id(cart_id, {"items": items})

    async def update_quantity(self, cart_id: Any, product_id: Any, quantity: int) -> Optional[Dict[str, Any]]:
        """
        Set a line's quantity; zero or less removes the line.

        Raises:
            NotFoundError: If the product is not in the cart
        """
        cart = await self.find_by_id(cart_id)
        if not cart:
            return None

        product_oid = to_object_id(product_id)
        items = list(cart.get("items", []))
        if not any(item["product"] == product_oid for item in items):
            raise NotFoundError("Item not found in cart")

        if quantity <= 0:
            return await self.remove_item(cart_id, product_id)

        for item in items:
            if item["product"] == product_oid:
                item["quantity"] = quantity
        return await self.update_by_id(cart_id, {"items": items})

    async def remove_item(self, cart_id: Any, product_id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(
            cart_id, {"$pull": {"items": {"product": to_object_id(product_id)}}}, raw=True
        )

    async def clear_cart(self, cart_id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(cart_id, {"items": []})
