from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from marketplace.core.rate_limit import api_rate_limiter
from marketplace.core.security import create_access_token
from marketplace.main import app
from marketplace.models.base import utcnow
from marketplace.repositories import (
    CartRepository,
    ChatRepository,
    CouponRepository,
    MessageRepository,
    OrderRepository,
    ProductRepository,
    ReviewRepository,
    UserRepository,
)
from marketplace.utils import dependencies as deps


def make_user(role="buyer", verified=False, **extra):
    user = {
        "_id": ObjectId(),
        "name": f"Test {role.capitalize()}",
        "email": f"{role}-{ObjectId()}@example.com",
        "password_hash": "not-a-real-hash",
        "role": role,
        "is_active": True,
        "wishlist": [],
        "created_at": utcnow(),
        "updated_at": utcnow(),
    }
    if role == "seller":
        user["seller_info"] = {
            "business_name": "Warli Works",
            "tribe": "Warli",
            "verified": verified,
            "notifications": [],
        }
    user.update(extra)
    return user


def make_product(seller_id=None, **extra):
    product = {
        "_id": ObjectId(),
        "name": "Dokra Elephant",
        "description": "Bell-metal figurine",
        "price": 1200.0,
        "category": "Handicrafts",
        "seller": seller_id or ObjectId(),
        "images": [],
        "stock": 5,
        "is_active": True,
        "is_approved": True,
        "rating": 0,
        "num_reviews": 0,
        "created_at": utcnow(),
        "updated_at": utcnow(),
    }
    product.update(extra)
    return product


def page_of(items, total=None, limit=12):
    total = len(items) if total is None else total
    return {"data": list(items), "pagination": {"total": total, "page": 1, "limit": limit, "pages": 1}}


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def mock_db():
    """Motor-like database whose collections return chainable cursors."""
    collections = {}

    def get_collection(name):
        if name not in collections:
            collection = MagicMock(name=f"collection:{name}")
            cursor = MagicMock(name=f"cursor:{name}")
            cursor.sort.return_value = cursor
            cursor.skip.return_value = cursor
            cursor.limit.return_value = cursor
            cursor.to_list = AsyncMock(return_value=[])
            collection.find.return_value = cursor
            collection.aggregate.return_value = cursor
            for method in (
                "insert_one",
                "insert_many",
                "find_one",
                "find_one_and_update",
                "find_one_and_delete",
                "update_one",
                "update_many",
                "delete_many",
                "count_documents",
                "distinct",
            ):
                setattr(collection, method, AsyncMock())
            collections[name] = collection
        return collections[name]

    db = MagicMock(name="db")
    db.__getitem__.side_effect = get_collection
    return db


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    api_rate_limiter.reset()
    yield
    api_rate_limiter.reset()


@pytest.fixture
def client():
    # Created without a context manager so the lifespan (and MongoDB) never starts
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def repos():
    mocks = SimpleNamespace(
        users=AsyncMock(spec=UserRepository),
        products=AsyncMock(spec=ProductRepository),
        carts=AsyncMock(spec=CartRepository),
        orders=AsyncMock(spec=OrderRepository),
        reviews=AsyncMock(spec=ReviewRepository),
        coupons=AsyncMock(spec=CouponRepository),
        chats=AsyncMock(spec=ChatRepository),
        messages=AsyncMock(spec=MessageRepository),
    )
    mocks.chats.is_participant = MagicMock(side_effect=ChatRepository.is_participant)

    app.dependency_overrides[deps.get_user_repository] = lambda: mocks.users
    app.dependency_overrides[deps.get_product_repository] = lambda: mocks.products
    app.dependency_overrides[deps.get_cart_repository] = lambda: mocks.carts
    app.dependency_overrides[deps.get_order_repository] = lambda: mocks.orders
    app.dependency_overrides[deps.get_review_repository] = lambda: mocks.reviews
    app.dependency_overrides[deps.get_coupon_repository] = lambda: mocks.coupons
    app.dependency_overrides[deps.get_chat_repository] = lambda: mocks.chats
    app.dependency_overrides[deps.get_message_repository] = lambda: mocks.messages
    yield mocks
    app.dependency_overrides.clear()


@pytest.fixture
def buyer():
    return make_user("buyer")


@pytest.fixture
def seller():
    return make_user("seller", verified=True)


@pytest.fixture
def admin():
    return make_user("admin")
