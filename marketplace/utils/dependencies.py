"""
FastAPI dependencies: repositories, authentication, role guards and pagination
"""
import logging
import math
from typing import Any, Callable, Dict, Optional

from bson import ObjectId
from fastapi import Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from ..config.database import get_database
from ..config.settings import get_settings
from ..core.exceptions import AuthenticationError, BadRequestError, MarketplaceError, PermissionDeniedError
from ..core.security import decode_access_token
from ..repositories import (
    CartRepository,
    ChatRepository,
    CouponRepository,
    MessageRepository,
    OrderRepository,
    ProductRepository,
    ReviewRepository,
    UserRepository,
)
from ..services.checkout import CheckoutService

logger = logging.getLogger(__name__)
settings = get_settings()


class CurrentUser(BaseModel):
    """Identity carried by a verified access token."""
    id: str
    role: str
    name: Optional[str] = None

    @property
    def object_id(self) -> ObjectId:
        return ObjectId(self.id)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def validate_object_id(object_id: str, resource_name: str = "resource") -> ObjectId:
    """
    Validate and convert string to ObjectId

    Raises:
        BadRequestError: If ObjectId format is invalid
    """
    if not ObjectId.is_valid(object_id):
        raise BadRequestError(f"Invalid {resource_name} ID")
    return ObjectId(object_id)


# Repository providers

def get_user_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> UserRepository:
    return UserRepository(db)


def get_product_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> ProductRepository:
    return ProductRepository(db)


def get_cart_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> CartRepository:
    return CartRepository(db)


def get_order_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> OrderRepository:
    return OrderRepository(db)


def get_review_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> ReviewRepository:
    return ReviewRepository(db)


def get_coupon_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> CouponRepository:
    return CouponRepository(db)


def get_chat_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> ChatRepository:
    return ChatRepository(db)


def get_message_repository(db: AsyncIOMotorDatabase = Depends(get_database)) -> MessageRepository:
    return MessageRepository(db)


def get_checkout_service(
    carts: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
    orders: OrderRepository = Depends(get_order_repository),
    coupons: CouponRepository = Depends(get_coupon_repository),
    users: UserRepository = Depends(get_user_repository),
) -> CheckoutService:
    return CheckoutService(carts, products, orders, coupons, users)


# Authentication

def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization")
    if not header:
        return None
    token = header.replace("Bearer ", "", 1).strip()
    return token or None


async def get_current_user(request: Request) -> CurrentUser:
    """
    Resolve the caller from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    token = _bearer_token(request)
    if not token:
        logger.info(f"Auth failed: No token provided for {request.method} {request.url.path}")
        raise AuthenticationError("No token, authorization denied")

    try:
        claims = decode_access_token(token)
    except AuthenticationError:
        logger.info(f"Auth failed: Invalid token for {request.method} {request.url.path}")
        raise
    return CurrentUser(id=claims["sub"], role=claims.get("role", "buyer"), name=claims.get("name"))


async def get_optional_user(request: Request) -> Optional[CurrentUser]:
    """Like get_current_user, but anonymous callers and bad tokens yield None."""
    token = _bearer_token(request)
    if not token:
        return None
    try:
        claims = decode_access_token(token)
    except MarketplaceError:
        return None
    return CurrentUser(id=claims["sub"], role=claims.get("role", "buyer"), name=claims.get("name"))


def require_roles(*roles: str, message: Optional[str] = None) -> Callable:
    """
    Dependency factory restricting a route to the given roles.

    Usage:
        admin: CurrentUser = Depends(require_roles("admin"))
    """
    denied = message or f"Access denied. {' or '.join(r.capitalize() for r in roles)} only resource."

    async def guard(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise PermissionDeniedError(denied)
        return user

    return guard


require_admin = require_roles("admin", message="Admin access required")
require_seller = require_roles("seller")


# Pagination

class PageParams:
    """``page``/``limit`` query parameters with the configured bounds."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def build_pagination(total: int, page: int, limit: int, total_key: str = "total") -> Dict[str, Any]:
    """Page metadata in the shape list endpoints return."""
    return {
        "current_page": page,
        "total_pages": math.ceil(total / limit) if limit else 1,
        total_key: total,
        "has_next": page * limit < total,
        "has_prev": page > 1,
    }
