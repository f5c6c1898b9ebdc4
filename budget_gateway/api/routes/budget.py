"""Budget Month Routes: months, one month's sheet, amounts, carryover, hold.

Invariants:
    - month is 'YYYY-MM'; amounts are integer cents
    - Every mutation names its required parameters in the 400 message
"""

import logging

from fastapi import APIRouter, Depends

from budget_gateway.api.forwarding import SUCCESS, forward, require
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard
from budget_gateway.schemas.budget import (
    BudgetAmountSet, BudgetCarryoverSet, BudgetHold, BudgetHoldReset,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/budget", tags=["budget"])


@router.get("/months")
async def list_budget_months(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(
        guard, "getting budget months", lambda c: c.get_budget_months(),
    )


@router.get("/month/{month}")
async def get_budget_month(
    month: str, guard: ClientGuard = Depends(get_client_guard),
):
    return await forward(
        guard, "getting budget month", lambda c: c.get_budget_month(month),
    )


@router.post("/amount")
async def set_budget_amount(
    body: BudgetAmountSet | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or BudgetAmountSet()
    require(month=body.month, categoryId=body.category_id, amount=body.amount)
    await forward(
        guard, "setting budget amount",
        lambda c: c.set_budget_amount(body.month, body.category_id, body.amount),
    )
    return SUCCESS


@router.post("/carryover")
async def set_budget_carryover(
    body: BudgetCarryoverSet | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or BudgetCarryoverSet()
    require(month=body.month, categoryId=body.category_id, flag=body.flag)
    await forward(
        guard, "setting budget carryover",
        lambda c: c.set_budget_carryover(body.month, body.category_id, body.flag),
    )
    return SUCCESS


@router.post("/hold")
async def hold_budget_for_next_month(
    body: BudgetHold | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Hold `amount` of this month's leftover for next month."""
    body = body or BudgetHold()
    require(month=body.month, amount=body.amount)
    await forward(
        guard, "holding budget",
        lambda c: c.hold_budget_for_next_month(body.month, body.amount),
    )
    return SUCCESS


@router.post("/reset-hold")
async def reset_budget_hold(
    body: BudgetHoldReset | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or BudgetHoldReset()
    require(month=body.month)
    await forward(
        guard, "resetting budget hold", lambda c: c.reset_budget_hold(body.month),
    )
    return SUCCESS
