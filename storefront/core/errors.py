"""
storefront/core/errors.py

Purpose: Maps exceptions to the JSON error body

    {"status": "failure", "error": ..., "message": ..., "code": ..., "details": ...}
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.config import Settings
from storefront.core.exceptions import StorefrontError
from storefront.core.logging import get_logger
from storefront.schemas.response import ErrorResponse

logger = get_logger(__name__)

GENERIC_SERVER_MESSAGE = "An internal error occurred. Please try again later."


def error_response(status_code: int, error: str, message: str, code: str, details: Optional[Any] = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, code=code, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def add_exception_handlers(app: FastAPI, settings: Settings):

    @app.exception_handler(StorefrontError)
    async def storefront_exception_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message} {exc.details or ''}")
        return error_response(exc.status_code, exc.error, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown routes, wrong methods
        return error_response(exc.status_code, "HTTP Error", str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies are client errors: 400, not FastAPI's default 422."""
        return error_response(
            400,
            "Bad Request",
            "Input validation failed",
            "VALIDATION_ERROR",
            jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        client = request.client.host if request.client else "unknown"
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path} from {client}: {exc}",
            exc_info=True,
        )
        message = GENERIC_SERVER_MESSAGE if settings.is_production else str(exc)
        return error_response(500, "Server Error", message, "INTERNAL_ERROR")
