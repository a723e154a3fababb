"""
Error Handler Middleware

Every error leaves the API as {"error": {"code": ..., "message": ...}}.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings

logger = logging.getLogger("rfp_manager.api.errors")


class APIError(Exception):
    """Error with an HTTP status and a machine-readable code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_ERROR"
    default_message = "An internal error occurred"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(APIError):
    """Missing or malformed input (bad RFP id, missing export format)."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class AuthenticationError(APIError):
    """No caller identity could be established."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_REQUIRED"
    default_message = "Authentication required"


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


def error_body(code: str, message, details: list = None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


async def api_error_handler(request: Request, exc: APIError):
    logger.warning(f"{request.method} {request.url.path}: {exc.error_code} - {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message),
        headers=headers
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", exc.detail)
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body and path validation failures, one entry per offending field."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("VALIDATION_ERROR", "Request validation failed", details)
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_body("DATABASE_ERROR", "Storage is unavailable")
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")

    # Internal details only leave the process in development
    message = str(exc) if settings.api_env == "development" else APIError.default_message
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(APIError.error_code, message)
    )


def setup_error_handlers(app: FastAPI):
    """Register the JSON error handlers on the application."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
