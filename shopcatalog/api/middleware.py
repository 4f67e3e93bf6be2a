"""API middleware for the catalog API.

Provides:
- Request ID correlation
- Shop identity enforcement for shop-management endpoints
- Error handling
"""

import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shopcatalog.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Shop Identity Middleware
# ============================================================================


# Endpoints acting on behalf of a shop: pattern -> methods
SHOP_ENDPOINTS: dict[str, set[str]] = {
    "/product/create": {"POST"},
    "/product/update/{product_id}": {"PUT"},
    "/product/publish/{product_id}": {"PUT"},
    "/product/unpublish/{product_id}": {"PUT"},
    "/product/drafts": {"GET"},
    "/product/published": {"GET"},
}


def _matches_pattern(path: str, pattern: str) -> bool:
    """Check if path matches a pattern with path parameters.

    Args:
        path: Actual request path (e.g., /product/publish/abc123)
        pattern: Pattern with placeholders (e.g., /product/publish/{product_id})

    Returns:
        True if path matches pattern.
    """
    path_parts = path.rstrip("/").split("/")
    pattern_parts = pattern.rstrip("/").split("/")

    if len(path_parts) != len(pattern_parts):
        return False

    for path_part, pattern_part in zip(path_parts, pattern_parts):
        if pattern_part.startswith("{") and pattern_part.endswith("}"):
            continue
        if path_part != pattern_part:
            return False

    return True


def _requires_shop_identity(path: str, method: str) -> bool:
    """Check if endpoint acts on behalf of a shop.

    Args:
        path: Request path.
        method: HTTP method.

    Returns:
        True if a shop identity is required.
    """
    for pattern, methods in SHOP_ENDPOINTS.items():
        if method in methods and _matches_pattern(path, pattern):
            return True
    return False


def missing_identity_error() -> dict[str, Any]:
    """Error body for a shop endpoint called without identity."""
    return {
        "error_code": "UNAUTHENTICATED",
        "message": f"Missing {settings.shop_id_header} header",
        "details": [],
    }


class ShopIdentityMiddleware(BaseHTTPMiddleware):
    """Middleware requiring a caller identity on shop endpoints.

    Token verification happens upstream; the gateway forwards the
    verified shop identifier in a header. This middleware only checks
    it is present and exposes it as ``request.state.shop_id``.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Attach the shop identity or reject the request.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        path = request.url.path
        if not _requires_shop_identity(path, request.method):
            return await call_next(request)

        shop_id = (request.headers.get(settings.shop_id_header) or "").strip()
        if not shop_id:
            logger.warning(
                "Missing shop identity",
                path=path,
                method=request.method,
            )
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    **missing_identity_error(),
                    "request_id": getattr(request.state, "request_id", None),
                },
            )

        request.state.shop_id = shop_id
        structlog.contextvars.bind_contextvars(shop_id=shop_id)
        try:
            return await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("shop_id")


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Catches unhandled exceptions and returns standardized error responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, "request_id", None)

            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error_code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "details": [],
                    "request_id": request_id,
                },
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
    # Error handling (closest to the routes)
    app.add_middleware(ErrorHandlerMiddleware)

    # Shop identity
    app.add_middleware(ShopIdentityMiddleware)

    # Request ID correlation (outermost, so every response carries the ID)
    app.add_middleware(RequestIdMiddleware)
