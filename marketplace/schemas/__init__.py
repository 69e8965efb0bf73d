"""
Schemas package for API request/response validation.
These models define the structure of data sent to and from the API endpoints.
"""

# Common schemas
from .common import ErrorResponse, HealthCheckResponse, MessageResponse, RootResponse

# Auth and user schemas
from .auth import ForgotPasswordRequest, LoginRequest, RegisterRequest, ResetPasswordRequest, SellerInfoRequest
from .user import AddressRequest, ChangePasswordRequest, UpdateProfileRequest, WishlistAddRequest

# Catalogue schemas
from .product import CreateProductRequest, CreateReviewRequest, UpdateProductRequest

# Cart and order schemas
from .cart import AddToCartRequest, UpdateCartItemRequest
from .order import (
    CancelOrderRequest,
    CheckoutRequest,
    CreatePaymentRequest,
    ShippingAddressRequest,
    TrackingInfoRequest,
    UpdateOrderStatusRequest,
)
from .coupon import CouponStatusRequest, CreateCouponRequest, ValidateCouponRequest

# Chat and admin schemas
from .chat import SendMessageRequest, StartChatRequest
from .admin import ProductApprovalRequest, ProductStatusRequest, UserRoleRequest, UserStatusRequest

__all__ = [
    "ErrorResponse",
    "HealthCheckResponse",
    "MessageResponse",
    "RootResponse",
    "ForgotPasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SellerInfoRequest",
    "AddressRequest",
    "ChangePasswordRequest",
    "UpdateProfileRequest",
    "WishlistAddRequest",
    "CreateProductRequest",
    "CreateReviewRequest",
    "UpdateProductRequest",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CancelOrderRequest",
    "CheckoutRequest",
    "CreatePaymentRequest",
    "ShippingAddressRequest",
    "TrackingInfoRequest",
    "UpdateOrderStatusRequest",
    "CouponStatusRequest",
    "CreateCouponRequest",
    "ValidateCouponRequest",
    "SendMessageRequest",
    "StartChatRequest",
    "ProductApprovalRequest",
    "ProductStatusRequest",
    "UserRoleRequest",
    "UserStatusRequest",
]
