"""Rule Routes: list, create, update, delete.

Invariants:
    - Create and update answer with the stored rule object
    - The path id wins over any id in the update body
"""

import logging

from fastapi import APIRouter, Body, Depends

from budget_gateway.api.forwarding import SUCCESS, forward
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/rules", tags=["rules"])


@router.get("")
async def list_rules(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(guard, "getting rules", lambda c: c.get_rules())


@router.post("")
async def create_rule(
    rule: dict = Body(...), guard: ClientGuard = Depends(get_client_guard),
):
    return await forward(guard, "creating rule", lambda c: c.create_rule(rule))


@router.put("/{rule_id}")
async def update_rule(
    rule_id: str,
    fields: dict = Body(...),
    guard: ClientGuard = Depends(get_client_guard),
):
    rule = {**fields, "id": rule_id}
    return await forward(guard, "updating rule", lambda c: c.update_rule(rule))


@router.delete("/{rule_id}")
async def delete_rule(
    rule_id: str, guard: ClientGuard = Depends(get_client_guard),
):
    await forward(guard, "deleting rule", lambda c: c.delete_rule(rule_id))
    return SUCCESS
