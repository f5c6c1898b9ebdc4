"""Lifespan: startup installs a lazy guard, shutdown closes the client.

Invariants:
    - Startup never initializes the budget client
    - Shutdown awaits client.shutdown() once and leaves the guard uninitialized
"""

from unittest.mock import patch

import budget_gateway.infrastructure.client_registry as registry
from budget_gateway.core.client_guard import ClientState
from budget_gateway.main import app
from tests.fake_budget_client import FakeBudgetClient


async def test_startup_installs_guard_without_bootstrapping():
    fake = FakeBudgetClient()
    original = registry.client_guard
    try:
        with patch.object(registry, "build_client_factory", return_value=lambda: fake):
            async with app.router.lifespan_context(app):
                guard = registry.get_client_guard()
                assert guard.state is ClientState.UNINITIALIZED
                assert fake.init_calls == 0
    finally:
        registry.client_guard = original


async def test_shutdown_closes_initialized_client():
    fake = FakeBudgetClient()
    original = registry.client_guard
    try:
        with patch.object(registry, "build_client_factory", return_value=lambda: fake):
            async with app.router.lifespan_context(app):
                guard = registry.get_client_guard()
                await guard.acquire()
        assert fake.shutdown_calls == 1
        assert guard.state is ClientState.UNINITIALIZED
    finally:
        registry.client_guard = original
