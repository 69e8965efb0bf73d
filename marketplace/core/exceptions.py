from typing import Any, Optional


class MarketplaceError(Exception):
    """
    Base exception for the marketplace application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class BadRequestError(MarketplaceError):
    """
    Raised when a request is well-formed but cannot be honoured.
    """
    def __init__(self, message: str = "Bad request", details: Optional[Any] = None):
        super().__init__(message, code="BAD_REQUEST", status_code=400, details=details)


class AuthenticationError(MarketplaceError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class PermissionDeniedError(MarketplaceError):
    """
    Raised when the caller is authenticated but not allowed to act.
    """
    def __init__(self, message: str = "Access denied", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)


class NotFoundError(MarketplaceError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class InsufficientStockError(MarketplaceError):
    """
    Raised when a stock change would leave a product below zero.
    """
    def __init__(self, message: str = "Insufficient stock", details: Optional[Any] = None):
        super().__init__(message, code="INSUFFICIENT_STOCK", status_code=400, details=details)


class RepositoryError(MarketplaceError):
    """
    Raised when the database driver fails underneath a repository call.
    """
    def __init__(self, message: str = "Database error", details: Optional[Any] = None):
        super().__init__(message, code="DATABASE_ERROR", status_code=500, details=details)
