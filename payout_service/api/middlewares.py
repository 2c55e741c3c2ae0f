import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from payout_service.exceptions import (
    BaseAPIException,
    BusinessException,
    RestaurantNotFoundException,
)
from payout_service.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    error_response = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details or None),
        meta={
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request.url.path,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_response.model_dump(exclude_none=True)),
    )


async def api_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Global handler for custom API exceptions.

    Returns structured error response with status code and error details.
    """
    assert isinstance(exc, BaseAPIException)
    logger.warning(
        f"API Exception: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
        },
    )
    return _error_response(
        request, exc.status_code, exc.error_code, exc.message, exc.details
    )


async def request_validation_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Render FastAPI body/query validation failures in the common error envelope."""
    assert isinstance(exc, RequestValidationError)
    return _error_response(
        request,
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors())},
    )


async def integrity_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Handle database integrity constraint violations.

    Foreign key violations against restaurants become RestaurantNotFoundException;
    a second payout for the same restaurant and period becomes a business error.
    """
    assert isinstance(exc, IntegrityError)
    error_message = str(exc.orig).lower()

    if "foreign key constraint" in error_message and "restaurants" in error_message:
        restaurant_id_match = re.search(r"res_\w+", str(exc.orig))
        restaurant_id = (
            restaurant_id_match.group(0) if restaurant_id_match else "unknown"
        )
        return await api_exception_handler(
            request, RestaurantNotFoundException(restaurant_id=restaurant_id)
        )

    if "uq_payout_restaurant_period" in error_message or (
        "unique constraint" in error_message and "payouts.period_start" in error_message
    ):
        return await api_exception_handler(
            request,
            BusinessException(
                message="Payout already generated for this period",
                error_code="PAYOUT_ALREADY_GENERATED",
            ),
        )

    logger.warning(
        "Database integrity error",
        extra={
            "error": str(exc.orig),
            "path": request.url.path,
            "method": request.method,
        },
    )
    return _error_response(
        request, 409, "INTEGRITY_ERROR", "Database constraint violation"
    )


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Catch-all handler for unexpected errors.

    Returns generic 500 error without exposing internal details.
    """
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    return _error_response(
        request, 500, "INTERNAL_ERROR", "An unexpected error occurred"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all global exception handlers to the FastAPI application.

    Handlers are registered in order of specificity:
    1. Custom API exceptions (BaseAPIException)
    2. Request validation errors (RequestValidationError)
    3. Database integrity errors (IntegrityError)
    4. Unhandled exceptions (Exception)
    """
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
