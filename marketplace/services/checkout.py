"""
Checkout: turn a buyer's cart into an order.

The steps run one after another against the database with no surrounding
transaction; a failure part-way leaves earlier writes in place.
"""
import logging
from typing import Any, Dict, List, Optional

from ..core.exceptions import BadRequestError, RepositoryError
from ..models.base import utcnow
from ..models.order import OrderDocument, OrderStatusHistory, PaymentInfo, ShippingAddress
from ..models.user import SellerNotification
from ..repositories import CartRepository, CouponRepository, OrderRepository, ProductRepository, UserRepository
from ..utils.serializers import to_object_id
from .coupons import calculate_discount, validate_coupon
from .pricing import calculate_subtotal, price_order

logger = logging.getLogger(__name__)


def find_unavailable_items(cart: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Cart lines whose product is inactive or short of stock."""
    unavailable = []
    for item in cart.get("items", []):
        product = item["product"]
        if not product.get("is_active", False) or product.get("stock", 0) < item["quantity"]:
            unavailable.append({
                "id": str(product["_id"]),
                "name": product.get("name"),
                "available": bool(product.get("is_active", False)),
                "requested_quantity": item["quantity"],
                "available_stock": product.get("stock", 0),
            })
    return unavailable


class CheckoutService:
    def __init__(
        self,
        carts: CartRepository,
        products: ProductRepository,
        orders: OrderRepository,
        coupons: CouponRepository,
        users: UserRepository,
    ):
        self.carts = carts
        self.products = products
        self.orders = orders
        self.coupons = coupons
        self.users = users

    async def _load_cart(self, user_id: Any) -> Dict[str, Any]:
        cart = await self.carts.find_by_user_with_items(user_id)
        if not cart or not cart.get("items"):
            raise BadRequestError("Cart is empty")
        return cart

    async def validate_cart(self, user_id: Any) -> Dict[str, Any]:
        """
        Check the cart is ready for checkout.

        Raises:
            BadRequestError: If the cart is empty, or with ``unavailable_items``
                in the details when any line cannot be fulfilled
        """
        cart = await self._load_cart(user_id)
        unavailable = find_unavailable_items(cart)
        if unavailable:
            raise BadRequestError(
                "Some items in your cart are no longer available",
                details={"unavailable_items": unavailable},
            )
        return cart

    async def _apply_coupon(self, code: str, user_id: Any, subtotal: float) -> Dict[str, Any]:
        coupon = await self.coupons.find_by_code(code)
        if not coupon:
            raise BadRequestError("Invalid coupon code")
        valid, reason = validate_coupon(coupon, user_id, subtotal)
        if not valid:
            raise BadRequestError(reason)
        return coupon

    async def place_order(
        self,
        user_id: Any,
        shipping_address: Dict[str, Any],
        payment_method: str,
        notes: Optional[str] = None,
        coupon_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create an order from the user's cart.

        Order of writes: insert order, decrement stock, record coupon usage,
        clear cart, notify sellers.

        Returns:
            The inserted order document
        """
        cart = await self._load_cart(user_id)

        for item in cart["items"]:
            product = item["product"]
            if not product.get("is_active", False) or product.get("stock", 0) < item["quantity"]:
                raise BadRequestError(
                    f"Product {product.get('name')} is no longer available or has insufficient stock"
                )

        lines = [
            {
                "product": item["product"]["_id"],
                "seller": item["product"].get("seller"),
                "name": item["product"].get("name"),
                "quantity": item["quantity"],
                "price": item["product"]["price"],
            }
            for item in cart["items"]
        ]

        coupon = None
        discount = 0
        if coupon_code:
            subtotal = calculate_subtotal(lines)
            coupon = await self._apply_coupon(coupon_code, user_id, subtotal)
            discount = calculate_discount(coupon, subtotal)

        totals = price_order(lines, discount=discount)

        buyer_oid = to_object_id(user_id)
        is_cod = payment_method == "cod"
        order_doc = OrderDocument(
            user=buyer_oid,
            items=lines,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            payment_info=PaymentInfo(
                method=payment_method,
                status="pending" if is_cod else "completed",
                paid_at=None if is_cod else utcnow(),
            ),
            coupon_code=coupon["code"] if coupon else None,
            notes=notes,
            status="pending",
            status_history=[OrderStatusHistory(status="pending", updated_by=buyer_oid, reason="Order placed")],
            **totals,
        )
        order = await self.orders.create(order_doc.to_document())
        logger.info(f"🧾 Order {order['order_number']} created for user {user_id} (total {order['total']})")

        for line in lines:
            updated = await self.products.decrement_stock_if_available(line["product"], line["quantity"])
            if updated is None:
                logger.warning(f"⚠️  Stock for product {line['product']} dropped below {line['quantity']} during checkout")

        if coupon:
            await self.coupons.record_usage(coupon["_id"], user_id, totals["subtotal"], discount)

        await self.carts.clear_cart(cart["_id"])
        await self._notify_sellers(order)
        return order

    async def _notify_sellers(self, order: Dict[str, Any]) -> None:
        seller_ids = {item["seller"] for item in order["items"] if item.get("seller") is not None}
        for seller_id in seller_ids:
            notification = SellerNotification(
                type="new_order",
                message=f"You have a new order {order['order_number']}.",
                order_id=order["_id"],
            )
            # The order is already placed; a lost notice must not fail checkout
            try:
                stored = await self.users.push_notification(seller_id, notification.model_dump(by_alias=True))
            except RepositoryError as e:
                logger.error(f"❌ Failed to notify seller {seller_id} of order {order['order_number']}: {str(e)}")
                continue
            if not stored:
                logger.warning(f"⚠️  Seller {seller_id} has no seller profile; order notice not stored")
