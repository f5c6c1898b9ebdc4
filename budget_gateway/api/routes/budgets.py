"""Budget File Routes: list, load and download budget files.

Invariants:
    - Loading switches the client's active budget for every later request
    - The download password is optional and only sent when given
"""

import logging

from fastapi import APIRouter, Depends

from budget_gateway.api.forwarding import SUCCESS, forward
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/budgets", tags=["budgets"])


@router.get("")
async def list_budgets(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(guard, "getting budgets", lambda c: c.get_budgets())


@router.post("/{budget_id}/load")
async def load_budget(
    budget_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    await forward(guard, "loading budget", lambda c: c.load_budget(budget_id))
    return SUCCESS


@router.get("/{cloud_file_id}/download")
async def download_budget(
    cloud_file_id: str,
    password: str | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "downloading budget",
        lambda c: c.download_budget(cloud_file_id, password or None),
    )
    return SUCCESS
