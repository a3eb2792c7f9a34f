"""API middleware for the catalog API.

Provides:
- Request ID correlation
- Error handling
- The JSON error envelope shared with the app-level exception handlers
"""

import re
import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

# Client-supplied ids end up in logs and response headers
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,64}")


def error_response(
    request: Request, status_code: int, error_code: str, message: str
) -> JSONResponse:
    """Render an error as ``{"error", "error_code", "request_id"}``.

    Args:
        request: Request being answered.
        status_code: HTTP status.
        error_code: Machine-readable code.
        message: Client-safe message.

    Returns:
        JSON error response.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "error_code": error_code,
            "request_id": getattr(request.state, "request_id", None),
        },
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlate catalog requests with their log lines.

    An inbound ``X-Request-ID`` is reused when it is a short token of
    safe characters; otherwise a fresh UUID is issued. The id, method and
    path are bound to the structlog context for the whole request, so
    service events such as ``Bulk upload complete`` carry them.
    """

    HEADER_NAME = "X-Request-ID"

    @classmethod
    def request_id_for(cls, request: Request) -> str:
        """Get the inbound request id, or a new one if absent or unsafe."""
        candidate = request.headers.get(cls.HEADER_NAME, "").strip()
        if REQUEST_ID_PATTERN.fullmatch(candidate):
            return candidate
        return str(uuid4())

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        request_id = self.request_id_for(request)
        request.state.request_id = request_id
        context: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        structlog.contextvars.bind_contextvars(**context)

        start_time = time.perf_counter()
        response = None

        try:
            response = await call_next(request)
        finally:
            status_code = getattr(response, "status_code", 500)
            log = logger.warning if status_code >= 500 else logger.info
            log(
                "Request completed",
                query=request.url.query or None,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars(*context)

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping the routers into a 500 error envelope.

    The exception is logged with its traceback; the client only sees a
    static message.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
            )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
