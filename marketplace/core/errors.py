import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config.settings import get_settings
from ..schemas.common import ErrorResponse
from ..utils.serializers import convert_object_ids
from .exceptions import MarketplaceError

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_FAILED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "RATE_LIMITED",
    503: "SERVICE_UNAVAILABLE",
}


def _error_response(status_code: int, message: str, code: str, details=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, code=code, details=convert_object_ids(details)).model_dump()
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}", extra={"method": request.method, "path": request.url.path})
        return _error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 503, etc.)
        """
        message = "Route not found" if exc.status_code == 404 and exc.detail == "Not Found" else str(exc.detail)
        return _error_response(
            exc.status_code,
            message,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors.
        """
        return _error_response(422, "Input validation failed", "VALIDATION_ERROR", exc.errors())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {exc}",
            extra={"method": request.method, "path": request.url.path},
            exc_info=True,
        )
        message = "Something went wrong!" if get_settings().is_production else str(exc)
        return _error_response(500, message, "INTERNAL_ERROR")
