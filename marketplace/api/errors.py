"""HTTP error mapping.

Every error response carries the same body, ``{error_code, message,
details, request_id}``. Domain errors get the status of their kind;
anything unexpected is reported as ``INTERNAL_ERROR`` by the request
context middleware, which uses ``internal_error_response`` from here.
"""

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from marketplace.domain.exceptions import (
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger()

DOMAIN_ERROR_STATUS: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: DomainError) -> int:
    """HTTP status for a domain error, by nearest registered base class."""
    for cls in type(exc).__mro__:
        if cls in DOMAIN_ERROR_STATUS:
            return DOMAIN_ERROR_STATUS[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: dict[str, Any] | list[Any] | None = None,
) -> JSONResponse:
    """Build the standard error body for ``request``."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details if details is not None else {},
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def internal_error_response(request: Request) -> JSONResponse:
    """Opaque 500 for failures that are not domain errors."""
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        InternalError.error_code,
        "An internal error occurred",
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            method=request.method,
            error=exc.message,
            details=exc.details,
        )
    return error_response(request, status_code, exc.error_code, exc.message, exc.details)


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Routes raise ``HTTPException`` with a dict detail for their own 4xx cases."""
    detail = exc.detail
    if isinstance(detail, dict):
        return error_response(
            request,
            exc.status_code,
            detail.get("error_code", "ERROR"),
            detail.get("message", str(detail)),
            detail.get("details"),
        )
    return error_response(request, exc.status_code, "ERROR", str(detail))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and HTTP exception handlers on ``app``."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
