from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from marketplace.core.exceptions import BadRequestError, NotFoundError
from marketplace.repositories import OrderRepository, ProductRepository, ReviewRepository
from marketplace.services.orders import can_view_order, cancel_order, update_order_status
from marketplace.services.reviews import create_review


def make_order(status="pending", **extra):
    order = {
        "_id": ObjectId(),
        "order_number": "TM123456ABCDE",
        "user": ObjectId(),
        "status": status,
        "items": [{"product": ObjectId(), "seller": ObjectId(), "quantity": 2, "price": 500}],
    }
    order.update(extra)
    return order


@pytest.fixture
def orders():
    return AsyncMock(spec=OrderRepository)


@pytest.fixture
def products():
    return AsyncMock(spec=ProductRepository)


def test_can_view_order():
    order = make_order()
    assert can_view_order(order, order["user"], "buyer")
    assert can_view_order(order, order["items"][0]["seller"], "seller")
    assert can_view_order(order, ObjectId(), "admin")
    assert not can_view_order(order, ObjectId(), "buyer")


async def test_update_status_records_history(orders):
    order_id, admin_id = ObjectId(), ObjectId()

    await update_order_status(
        orders, order_id, "shipped", admin_id, location="Ranchi hub",
        tracking_info={"courier": "IndiaPost", "tracking_number": "EE123"},
    )

    called_id, status, entry, extra = orders.push_status.await_args.args
    assert (called_id, status) == (order_id, "shipped")
    assert entry["updated_by"] == admin_id
    assert entry["location"] == "Ranchi hub"
    assert extra["tracking_info"]["courier"] == "IndiaPost"
    assert extra["tracking_info"]["last_updated"] is not None


async def test_cancel_restores_stock(orders, products):
    order = make_order(status="confirmed")

    await cancel_order(orders, products, order, order["user"])

    _, status, entry, extra = orders.push_status.await_args.args
    assert status == "cancelled"
    assert extra == {"cancellation_reason": "Cancelled by customer"}
    products.increment_stock.assert_awaited_once_with(order["items"][0]["product"], 2)


async def test_cancel_after_shipping_is_refused(orders, products):
    with pytest.raises(BadRequestError):
        await cancel_order(orders, products, make_order(status="shipped"), ObjectId())
    orders.push_status.assert_not_called()
    products.increment_stock.assert_not_called()


class TestCreateReview:
    payload = {"rating": 5, "title": "Beautiful", "comment": "Lovely brass work"}

    @pytest.fixture
    def reviews(self):
        repo = AsyncMock(spec=ReviewRepository)
        repo.create.side_effect = lambda doc: {**doc, "_id": ObjectId()}
        repo.find_existing.return_value = None
        repo.get_product_rating.return_value = {"average": 5, "total": 1, "distribution": {"5": 1}}
        return repo

    async def test_requires_an_order(self, reviews, products, orders):
        products.find_by_id.return_value = {"_id": ObjectId(), "is_active": True}
        orders.find_all.return_value = {"data": [], "pagination": {}}

        with pytest.raises(BadRequestError) as exc_info:
            await create_review(reviews, products, orders, ObjectId(), ObjectId(), self.payload)
        assert exc_info.value.message == "You can only review products you have ordered"

    async def test_inactive_product(self, reviews, products, orders):
        products.find_by_id.return_value = {"_id": ObjectId(), "is_active": False}
        with pytest.raises(NotFoundError):
            await create_review(reviews, products, orders, ObjectId(), ObjectId(), self.payload)

    async def test_duplicate_review(self, reviews, products, orders):
        products.find_by_id.return_value = {"_id": ObjectId(), "is_active": True}
        orders.find_all.return_value = {"data": [make_order(status="delivered")], "pagination": {}}
        reviews.find_existing.return_value = {"_id": ObjectId()}

        with pytest.raises(BadRequestError) as exc_info:
            await create_review(reviews, products, orders, ObjectId(), ObjectId(), self.payload)
        assert exc_info.value.message == "You have already reviewed this product"

    async def test_creates_verified_review_and_updates_rating(self, reviews, products, orders):
        product = {"_id": ObjectId(), "is_active": True}
        order = make_order(status="delivered")
        products.find_by_id.return_value = product
        orders.find_all.return_value = {"data": [order], "pagination": {}}

        review = await create_review(reviews, products, orders, order["user"], product["_id"], self.payload)

        assert review["order"] == order["_id"]
        assert review["rating"] == 5
        products.set_rating.assert_awaited_once_with(product["_id"], 5, 1)
