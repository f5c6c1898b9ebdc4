"""HTTP Middleware: request body limit and API call logging.

Invariants:
    - Bodies larger than max_body_bytes (by Content-Length) get 413 before routing
    - Every /api request is logged on entry and on completion with its duration
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from budget_gateway.core.errors import PayloadTooLargeError

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI, max_body_bytes: int) -> None:
    """Register HTTP middleware. Last registered runs first."""

    @app.middleware("http")
    async def log_api_calls(request: Request, call_next):
        if not request.url.path.startswith("/api"):
            return await call_next(request)
        extra = {"method": request.method, "path": request.url.path}
        logger.info(f"API call: {request.method} {request.url.path}", extra=extra)
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                **extra,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return response

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length", "")
        if length.isdigit() and int(length) > max_body_bytes:
            error = PayloadTooLargeError(max_body_bytes)
            logger.warning(
                f"Rejected {length}-byte body on {request.url.path}",
                extra={"path": request.url.path, "error_code": error.code},
            )
            return JSONResponse(
                status_code=error.http_status, content=error.to_response(),
            )
        return await call_next(request)
