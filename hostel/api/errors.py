"""API error handling and response helpers."""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hostel.services.errors import (
    AppError,
    CapacityError,
    ConflictError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    CapacityError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    PreconditionError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_status_for(error: AppError) -> int:
    """Map an error kind to its HTTP status (500 for anything unmapped)."""
    for error_class, http_status in ERROR_STATUS.items():
        if isinstance(error, error_class):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(error: AppError) -> Dict[str, Any]:
    """Create a standardized error response."""
    body: Dict[str, Any] = {"code": error.code, "message": error.message}
    expected = getattr(error, "expected", None)
    if expected is not None:
        body["expected"] = float(expected)
    return {"error": body}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render any AppError raised by a route."""
    http_status = http_status_for(exc)
    if http_status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
    return JSONResponse(status_code=http_status, content=error_response(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies and parameters as validation errors."""
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(ValidationError("; ".join(problems))),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the AppError and request validation handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
