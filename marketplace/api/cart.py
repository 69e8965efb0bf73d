"""
Shopping cart endpoints.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import BadRequestError, MarketplaceError, NotFoundError
from ..models.cart import total_items
from ..repositories import CartRepository, ProductRepository
from ..schemas.cart import AddToCartRequest, UpdateCartItemRequest
from ..schemas.common import MessageResponse
from ..services.pricing import calculate_subtotal
from ..utils.dependencies import (
    CurrentUser,
    get_cart_repository,
    get_current_user,
    get_product_repository,
    validate_object_id,
)
from ..utils.serializers import serialize_doc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["Cart"])


async def _cart_view(carts: CartRepository, user_id: str) -> Dict[str, Any]:
    """Cart with product summaries, item count and subtotal."""
    cart = await carts.find_by_user_with_items(user_id)
    if cart is None:
        cart = await carts.get_or_create(user_id)

    lines = [{"price": item["product"].get("price", 0), "quantity": item["quantity"]} for item in cart.get("items", [])]
    view = serialize_doc(cart)
    view["total_items"] = total_items(cart)
    view["subtotal"] = calculate_subtotal(lines)
    return view


@router.get("")
async def get_cart(current: CurrentUser = Depends(get_current_user), carts: CartRepository = Depends(get_cart_repository)):
    return {"success": True, "cart": await _cart_view(carts, current.id)}


@router.post("/add")
async def add_to_cart(
    payload: AddToCartRequest,
    current: CurrentUser = Depends(get_current_user),
    carts: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    """Add a product, merging with any quantity already in the cart"""
    try:
        product = await products.find_by_id(payload.product_id)
        if not product or not product.get("is_active", False):
            raise NotFoundError("Product not found")

        cart = await carts.get_or_create(current.id)
        in_cart = next(
            (item["quantity"] for item in cart.get("items", []) if item["product"] == product["_id"]), 0
        )
        if product.get("stock", 0) < in_cart + payload.quantity:
            raise BadRequestError(
                "Insufficient stock",
                details={"available_stock": product.get("stock", 0), "in_cart": in_cart},
            )

        await carts.add_item(cart["_id"], product["_id"], payload.quantity)
        logger.info(f"🛒 User {current.id} added {payload.quantity} x {product['_id']} to cart")
        return {"success": True, "message": "Item added to cart", "cart": await _cart_view(carts, current.id)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to add to cart for user {current.id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to add to cart: {str(e)}")


@router.put("/update")
async def update_cart_item(
    payload: UpdateCartItemRequest,
    current: CurrentUser = Depends(get_current_user),
    carts: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    """Set a line's quantity; zero or less removes it"""
    try:
        cart = await carts.find_by_user(current.id)
        if not cart:
            raise NotFoundError("Cart not found")

        if payload.quantity > 0:
            product = await products.find_by_id(payload.product_id)
            if not product or not product.get("is_active", False):
                raise NotFoundError("Product not found")
            if product.get("stock", 0) < payload.quantity:
                raise BadRequestError("Insufficient stock", details={"available_stock": product.get("stock", 0)})

        await carts.update_quantity(cart["_id"], payload.product_id, payload.quantity)
        return {"success": True, "message": "Cart updated", "cart": await _cart_view(carts, current.id)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to update cart for user {current.id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update cart: {str(e)}")


@router.delete("/remove/{product_id}")
async def remove_from_cart(
    product_id: str,
    current: CurrentUser = Depends(get_current_user),
    carts: CartRepository = Depends(get_cart_repository),
):
    validate_object_id(product_id, "product")
    cart = await carts.find_by_user(current.id)
    if not cart:
        raise NotFoundError("Cart not found")

    await carts.remove_item(cart["_id"], product_id)
    return {"success": True, "message": "Item removed from cart", "cart": await _cart_view(carts, current.id)}


@router.delete("/clear", response_model=MessageResponse)
async def clear_cart(current: CurrentUser = Depends(get_current_user), carts: CartRepository = Depends(get_cart_repository)):
    cart = await carts.find_by_user(current.id)
    if cart:
        await carts.clear_cart(cart["_id"])
    return {"success": True, "message": "Cart cleared"}
