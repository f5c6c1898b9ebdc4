"""Client Registry: process-wide ClientGuard singleton and its FastAPI dependency.

Invariants:
    - Exactly one ClientGuard per process, created in the lifespan startup
    - The guard is handed to routes; routes decide when to acquire() the client
    - actualpy is imported on the first bootstrap, not at application import

Design Decisions:
    - Singleton initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - get_client_guard never bootstraps, so request validation can run first
"""

import logging
from collections.abc import Callable

from budget_gateway.config import Settings
from budget_gateway.core.budget_client import BudgetClient
from budget_gateway.core.client_guard import ClientGuard

logger = logging.getLogger(__name__)


def build_client_factory(settings: Settings) -> Callable[[], BudgetClient]:
    """Factory producing a fresh actualpy-backed client per bootstrap attempt."""

    def factory() -> BudgetClient:
        from budget_gateway.infrastructure.actual_client import ActualBudgetClient

        return ActualBudgetClient(
            data_dir=settings.actual_data_dir,
            server_url=settings.actual_server_url,
            password=settings.actual_password,
            encryption_password=settings.actual_encryption_password,
            verify_ssl=settings.actual_verify_ssl,
        )

    return factory


# Singleton (initialized on startup)
client_guard: ClientGuard | None = None


def init_client_guard(settings: Settings) -> ClientGuard:
    global client_guard
    client_guard = ClientGuard(
        build_client_factory(settings),
        preferred_budget_id=settings.budget_id,
    )
    return client_guard


def get_client_guard() -> ClientGuard:
    """FastAPI dependency for the client guard."""
    if not client_guard:
        raise RuntimeError("Budget client guard not initialized")
    return client_guard
