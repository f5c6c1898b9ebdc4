"""Transaction Routes: list by account and date range, add, import, update, delete.

Invariants:
    - GET requires accountId, startDate and endDate; otherwise 400 and no client call
    - POST and /import require accountId and transactions
    - An empty transactions list is present, not missing
"""

import logging

from fastapi import APIRouter, Body, Depends, Query

from budget_gateway.api.forwarding import SUCCESS, forward, require
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard
from budget_gateway.schemas.transactions import TransactionsAdd, TransactionsImport

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("")
async def list_transactions(
    account_id: str | None = Query(None, alias="accountId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    guard: ClientGuard = Depends(get_client_guard),
):
    require(accountId=account_id, startDate=start_date, endDate=end_date)
    return await forward(
        guard, "getting transactions",
        lambda c: c.get_transactions(account_id, start_date, end_date),
    )


@router.post("")
async def add_transactions(
    body: TransactionsAdd | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or TransactionsAdd()
    require(accountId=body.account_id, transactions=body.transactions)
    ids = await forward(
        guard, "adding transactions",
        lambda c: c.add_transactions(
            body.account_id, body.transactions,
            run_transfers=body.run_transfers,
            learn_categories=body.learn_categories,
        ),
    )
    return {"success": True, "ids": ids}


@router.post("/import")
async def import_transactions(
    body: TransactionsImport | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Reconcile against existing transactions; returns added/updated ids."""
    body = body or TransactionsImport()
    require(accountId=body.account_id, transactions=body.transactions)
    return await forward(
        guard, "importing transactions",
        lambda c: c.import_transactions(body.account_id, body.transactions),
    )


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: str,
    fields: dict = Body(...),
    guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "updating transaction",
        lambda c: c.update_transaction(transaction_id, fields),
    )
    return SUCCESS


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "deleting transaction",
        lambda c: c.delete_transaction(transaction_id),
    )
    return SUCCESS
