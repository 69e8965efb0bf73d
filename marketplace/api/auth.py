"""
Registration, login and password reset.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import AuthenticationError, BadRequestError, MarketplaceError, NotFoundError, PermissionDeniedError
from ..core.security import create_access_token, generate_reset_token, hash_password, hash_reset_token, verify_password
from ..models.base import utcnow
from ..models.user import SellerInfo, UserDocument
from ..repositories import UserRepository
from ..schemas.auth import ForgotPasswordRequest, LoginRequest, RegisterRequest, ResetPasswordRequest
from ..schemas.common import MessageResponse
from ..utils.dependencies import CurrentUser, get_current_user, get_user_repository
from ..utils.serializers import public_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

FORGOT_PASSWORD_MESSAGE = "If an account exists for that e-mail, a reset link has been sent"


@router.post("/register", status_code=201)
async def register(payload: RegisterRequest, users: UserRepository = Depends(get_user_repository)):
    """Create a buyer or seller account and return a token for it."""
    try:
        if await users.email_exists(payload.email):
            raise BadRequestError("User already exists with this email")
        if payload.phone and await users.phone_exists(payload.phone):
            raise BadRequestError("User already exists with this phone number")

        seller_info = None
        if payload.role == "seller":
            seller_info = SellerInfo(**(payload.seller_info.model_dump() if payload.seller_info else {}))

        user_doc = UserDocument(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            password_hash=hash_password(payload.password),
            role=payload.role,
            seller_info=seller_info,
        )
        user = await users.create(user_doc.to_document())
        logger.info(f"👤 Registered {user['role']} {user['email']} (ID: {user['_id']})")

        return {
            "success": True,
            "message": "User registered successfully",
            "token": create_access_token(user),
            "user": public_user(user),
        }
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to register user: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to register user: {str(e)}")


@router.post("/login")
async def login(payload: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    try:
        user = await users.find_by_email(payload.email)
        if not user or not verify_password(payload.password, user.get("password_hash")):
            raise AuthenticationError("Invalid credentials")
        if not user.get("is_active", True):
            raise PermissionDeniedError("Account is deactivated")

        user = await users.update_last_login(user["_id"]) or user
        logger.info(f"🔑 Login: {user['email']}")

        return {
            "success": True,
            "message": "Login successful",
            "token": create_access_token(user),
            "user": public_user(user),
        }
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to log in: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to log in: {str(e)}")


@router.get("/me")
async def me(current: CurrentUser = Depends(get_current_user), users: UserRepository = Depends(get_user_repository)):
    user = await users.get_public_profile(current.id)
    if not user:
        raise NotFoundError("User not found")
    return {"success": True, "user": user}


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(payload: ForgotPasswordRequest, users: UserRepository = Depends(get_user_repository)):
    """
    Issue a password-reset token.

    Always answers 200 so the response does not reveal which e-mails are registered.
    There is no mail integration; the token is written to the log.
    """
    user = await users.find_by_email(payload.email)
    if user and user.get("is_active", True):
        token, token_hash, expires = generate_reset_token()
        await users.update_by_id(user["_id"], {"reset_token_hash": token_hash, "reset_token_expires": expires})
        logger.info(f"📧 Password reset token for {user['email']}: {token}")

    return {"success": True, "message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(
    token: str, payload: ResetPasswordRequest, users: UserRepository = Depends(get_user_repository)
):
    user = await users.find_one({
        "reset_token_hash": hash_reset_token(token),
        "reset_token_expires": {"$gt": utcnow()},
    })
    if not user:
        raise BadRequestError("Invalid or expired reset token")

    await users.update_by_id(
        user["_id"],
        {
            "password_hash": hash_password(payload.password),
            "reset_token_hash": None,
            "reset_token_expires": None,
        },
    )
    logger.info(f"🔐 Password reset for {user['email']}")
    return {"success": True, "message": "Password has been reset"}
