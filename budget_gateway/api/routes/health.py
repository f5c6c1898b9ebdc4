"""Health Probe: liveness endpoint that reports bootstrap state.

Invariants:
    - GET /health always returns 200 if the process is up
    - Never acquires the client: reading the guard state has no side effects
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status

from budget_gateway.core.client_guard import ClientState
from budget_gateway.infrastructure import client_registry

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness probe with the current initialization status."""
    guard = client_registry.client_guard
    state = guard.state if guard else ClientState.UNINITIALIZED
    return {
        "status": "OK",
        "timestamp": _utc_timestamp(),
        "message": "Actual Budget REST API Server is running",
        "initialized": state is ClientState.READY,
        "state": state.value,
    }
