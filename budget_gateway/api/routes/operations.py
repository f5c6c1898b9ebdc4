"""Operation Routes: server sync, bank sync, ad-hoc query, batched budget updates.

Invariants:
    - bank-sync requires accountId, query requires query, batch requires func
    - Missing parameters answer 400 without touching the client
"""

import logging

from fastapi import APIRouter, Depends

from budget_gateway.api.forwarding import SUCCESS, forward, require
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard
from budget_gateway.schemas.operations import (
    BankSyncRequest, BatchRequest, QueryRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["operations"])


@router.post("/sync")
async def sync(guard: ClientGuard = Depends(get_client_guard)):
    await forward(guard, "syncing", lambda c: c.sync())
    return SUCCESS


@router.post("/bank-sync")
async def run_bank_sync(
    body: BankSyncRequest | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or BankSyncRequest()
    require(accountId=body.account_id)
    await forward(
        guard, "running bank sync", lambda c: c.run_bank_sync(body.account_id),
    )
    return SUCCESS


@router.post("/query")
async def run_query(
    body: QueryRequest | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or QueryRequest()
    require(query=body.query)
    return await forward(guard, "running query", lambda c: c.run_query(body.query))


@router.post("/batch")
async def batch_budget_updates(
    body: BatchRequest | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Apply a list of budget operations and sync them once."""
    body = body or BatchRequest()
    require(func=body.func)
    return await forward(
        guard, "running batch operations",
        lambda c: c.batch_budget_updates(body.func),
    )
