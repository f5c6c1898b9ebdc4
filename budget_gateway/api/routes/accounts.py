"""Account Routes: list, create, update, close, reopen, delete, balance.

Invariants:
    - `account` is required on create; initialBalance defaults to 0 cents
    - Mutations answer {"success": true}; create answers {"id": ...}
"""

import logging

from fastapi import APIRouter, Body, Depends

from budget_gateway.api.forwarding import SUCCESS, forward, require
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard
from budget_gateway.schemas.accounts import AccountClose, AccountCreate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("")
async def list_accounts(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(guard, "getting accounts", lambda c: c.get_accounts())


@router.post("")
async def create_account(
    body: AccountCreate | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Create an account, optionally with an opening balance."""
    body = body or AccountCreate()
    require(account=body.account)
    account_id = await forward(
        guard, "creating account",
        lambda c: c.create_account(body.account, body.initial_balance),
    )
    return {"id": account_id}


@router.put("/{account_id}")
async def update_account(
    account_id: str,
    fields: dict = Body(...),
    guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "updating account",
        lambda c: c.update_account(account_id, fields),
    )
    return SUCCESS


@router.post("/{account_id}/close")
async def close_account(
    account_id: str,
    body: AccountClose | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Close an account; a non-zero balance needs a transfer account."""
    body = body or AccountClose()
    await forward(
        guard, "closing account",
        lambda c: c.close_account(
            account_id, body.transfer_account_id, body.transfer_category_id,
        ),
    )
    return SUCCESS


@router.post("/{account_id}/reopen")
async def reopen_account(
    account_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "reopening account", lambda c: c.reopen_account(account_id),
    )
    return SUCCESS


@router.delete("/{account_id}")
async def delete_account(
    account_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "deleting account", lambda c: c.delete_account(account_id),
    )
    return SUCCESS


@router.get("/{account_id}/balance")
async def get_account_balance(
    account_id: str,
    cutoff: str | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Balance in integer cents, optionally as of `cutoff` (YYYY-MM-DD)."""
    balance = await forward(
        guard, "getting account balance",
        lambda c: c.get_account_balance(account_id, cutoff),
    )
    return {"balance": balance}
