"""Payee Routes: CRUD, merge, and the rules that reference a payee.

Invariants:
    - /merge requires targetId and mergeIds; otherwise 400 and no client call
"""

import logging

from fastapi import APIRouter, Body, Depends

from budget_gateway.api.forwarding import SUCCESS, forward, require
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard
from budget_gateway.schemas.catalog import PayeeMerge

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payees", tags=["payees"])


@router.get("")
async def list_payees(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(guard, "getting payees", lambda c: c.get_payees())


@router.post("")
async def create_payee(
    payee: dict = Body(...), guard: ClientGuard = Depends(get_client_guard),
):
    payee_id = await forward(
        guard, "creating payee", lambda c: c.create_payee(payee),
    )
    return {"id": payee_id}


@router.post("/merge")
async def merge_payees(
    body: PayeeMerge | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Fold mergeIds into targetId; merged payees are deleted."""
    body = body or PayeeMerge()
    require(targetId=body.target_id, mergeIds=body.merge_ids)
    await forward(
        guard, "merging payees",
        lambda c: c.merge_payees(body.target_id, body.merge_ids),
    )
    return SUCCESS


@router.put("/{payee_id}")
async def update_payee(
    payee_id: str,
    fields: dict = Body(...),
    guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "updating payee", lambda c: c.update_payee(payee_id, fields),
    )
    return SUCCESS


@router.delete("/{payee_id}")
async def delete_payee(
    payee_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    await forward(guard, "deleting payee", lambda c: c.delete_payee(payee_id))
    return SUCCESS


@router.get("/{payee_id}/rules")
async def list_payee_rules(
    payee_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    return await forward(
        guard, "getting payee rules", lambda c: c.get_payee_rules(payee_id),
    )
