"""
HTTP routers. ``api_router`` holds everything served under the API prefix.
"""
from fastapi import APIRouter

from . import (
    admin,
    artisans,
    auth,
    cart,
    categories,
    chat,
    checkout,
    coupons,
    notifications,
    orders,
    payments,
    products,
    quick_actions,
    reviews,
    users,
)
from .chat import ws_router
from .health import router as health_router

api_router = APIRouter()
for module in (
    auth,
    users,
    products,
    categories,
    cart,
    checkout,
    orders,
    reviews,
    coupons,
    payments,
    admin,
    artisans,
    notifications,
    quick_actions,
    chat,
):
    api_router.include_router(module.router)

__all__ = ["api_router", "health_router", "ws_router"]
