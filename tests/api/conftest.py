"""API test fixtures: fake budget client behind a real ClientGuard + httpx test client.

Invariants:
    - Every test gets a fresh FakeBudgetClient and a fresh ClientGuard
    - client_registry.client_guard swapped for the test, restored afterwards
    - The guard is NOT bootstrapped up front: tests observe lazy init

Design Decisions:
    - ASGITransport does not run the lifespan, so the guard is installed directly
    - raise_app_exceptions=False: the catch-all handler's 500 reaches the test
      instead of Starlette re-raising it
"""

import pytest
from httpx import ASGITransport, AsyncClient

import budget_gateway.infrastructure.client_registry as registry
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.main import app
from tests.fake_budget_client import FakeBudgetClient


@pytest.fixture
def fake():
    return FakeBudgetClient()


@pytest.fixture
def guard(fake):
    return ClientGuard(lambda: fake)


@pytest.fixture
async def client(guard):
    """FastAPI test client wired to the fake budget client."""
    original = registry.client_guard
    registry.client_guard = guard
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    registry.client_guard = original
