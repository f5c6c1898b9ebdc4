"""Budget Gateway API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to a JSON envelope
    - CORS configured from settings (not hardcoded)
    - The budget client is NOT started here: the first /api request that needs
      it bootstraps it through the ClientGuard
    - Shutdown closes the client with a bounded wait and never raises

Design Decisions:
    - Lifespan over @app.on_event: cleaner cleanup, and uvicorn runs it on
      SIGINT/SIGTERM before exiting with status 0
    - GZip for large list responses (transactions, query results)
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from budget_gateway.api.error_handlers import register_error_handlers
from budget_gateway.api.middleware import register_middleware
from budget_gateway.api.routes import (
    accounts, budget, budgets, categories, health, operations, payees, rules,
    transactions, utils,
)
from budget_gateway.config import get_settings
from budget_gateway.infrastructure import client_registry
from budget_gateway.infrastructure.observability import (
    log_loop_exception, setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.get_running_loop().set_exception_handler(log_loop_exception)
    client_registry.init_client_guard(settings)
    logger.info(
        f"Budget Gateway listening on port {settings.port} "
        f"(data directory: {settings.actual_data_dir})",
    )
    if settings.actual_server_url:
        logger.info(f"Actual server URL: {settings.actual_server_url}")
    logger.info("Waiting for first API call to initialize the budget client")
    yield
    logger.info("Budget Gateway shutting down")
    if client_registry.client_guard:
        await client_registry.client_guard.shutdown(
            settings.shutdown_timeout_seconds,
        )


app = FastAPI(
    title="Budget Gateway", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(GZipMiddleware, minimum_size=1024)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_middleware(app, settings.max_body_bytes)
register_error_handlers(app)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(budget.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(categories.router)
app.include_router(payees.router)
app.include_router(rules.router)
app.include_router(budgets.router)
app.include_router(operations.router)
app.include_router(utils.router)
