"""Request context middleware.

Each request gets a correlation ID that is echoed in the ``X-Request-ID``
response header, stored on ``request.state`` for error bodies, and bound
into the structlog context so every log line of the request carries it.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.api.errors import internal_error_response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate, time and log every request.

    Exceptions that escape the route and the registered handlers are
    logged with their traceback and turned into the standard 500 body,
    so the client still gets the request ID.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()

        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("Unhandled exception", method=request.method, path=request.url.path)
                response = internal_error_response(request)

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_middleware(app: FastAPI) -> None:
    """Install the request context middleware on ``app``."""
    app.add_middleware(RequestContextMiddleware)
