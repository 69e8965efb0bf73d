"""
Password hashing, JWT issuing/verification and password-reset tokens.
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config.settings import get_settings
from .exceptions import AuthenticationError

settings = get_settings()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def create_access_token(user: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """
    Issue a signed access token for a user document.

    Args:
        user: User document (needs ``_id``, ``role`` and ``name``)
        expires_minutes: Override of the configured lifetime

    Returns:
        Encoded JWT
    """
    lifetime = expires_minutes if expires_minutes is not None else settings.jwt_expire_minutes
    payload = {
        "sub": str(user["_id"]),
        "role": user.get("role", "buyer"),
        "name": user.get("name"),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError("Token is not valid", details=str(e))

    if not payload.get("sub"):
        raise AuthenticationError("Token is not valid")
    return payload


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> Tuple[str, str, datetime]:
    """
    Create a password-reset token.

    Returns:
        Tuple of (raw token for the user, hash to store, expiry timestamp)
    """
    token = secrets.token_urlsafe(32)
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_token_expire_minutes)
    return token, hash_reset_token(token), expires
