"""Error Handlers: global exception handlers for the gateway.

Invariants:
    - GatewayError → its own status and flat {"error": ...} envelope
    - RequestValidationError → 400 with field-level details
    - Unknown path or unsupported method → 404 {"error", "path", "method"};
      path echoes the query string
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Four-layer handler: domain (GatewayError), validation (Pydantic),
      routing (Starlette HTTPException), catch-all (Exception)
    - 405 folded into 404: callers see one "no such endpoint" shape
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from budget_gateway.core.errors import EndpointNotFoundError, GatewayError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_gateway_error_handler(app: FastAPI) -> None:

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Handle all gateway domain/infrastructure errors."""
        exc.context.path = exc.context.path or request.url.path
        exc.context.method = exc.context.method or request.method
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"GatewayError: {exc.message}",
            extra={
                "error_code": exc.code,
                "error_category": exc.category.value,
                "severity": exc.severity.value,
                "operation": exc.context.operation,
                "path": exc.context.path,
                "method": exc.context.method,
                "status_code": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched routes and framework-raised HTTP errors."""
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            path = _original_url(request)
            error = EndpointNotFoundError(path, request.method)
            logger.info(
                f"No endpoint for {request.method} {path}",
                extra={"path": path, "method": request.method},
            )
            return JSONResponse(
                status_code=error.http_status, content=error.to_response(),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def _original_url(request: Request) -> str:
    """Request path with its query string, as the caller sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": "Invalid request data",
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
