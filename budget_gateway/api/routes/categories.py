"""Category & Category Group Routes.

Invariants:
    - Deletes accept an optional transferCategoryId; transactions in the
      deleted category move there instead of becoming uncategorized
    - Create answers {"id": ...}; update/delete answer {"success": true}
"""

import logging

from fastapi import APIRouter, Body, Depends

from budget_gateway.api.forwarding import SUCCESS, forward
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.infrastructure.client_registry import get_client_guard
from budget_gateway.schemas.catalog import CategoryDelete

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["categories"])


# ─── Categories ──────────────────────────────────────────────────

@router.get("/categories")
async def list_categories(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(guard, "getting categories", lambda c: c.get_categories())


@router.post("/categories")
async def create_category(
    category: dict = Body(...), guard: ClientGuard = Depends(get_client_guard),
):
    category_id = await forward(
        guard, "creating category", lambda c: c.create_category(category),
    )
    return {"id": category_id}


@router.put("/categories/{category_id}")
async def update_category(
    category_id: str,
    fields: dict = Body(...),
    guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "updating category",
        lambda c: c.update_category(category_id, fields),
    )
    return SUCCESS


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    body: CategoryDelete | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    body = body or CategoryDelete()
    await forward(
        guard, "deleting category",
        lambda c: c.delete_category(category_id, body.transfer_category_id),
    )
    return SUCCESS


# ─── Category Groups ─────────────────────────────────────────────

@router.get("/category-groups")
async def list_category_groups(guard: ClientGuard = Depends(get_client_guard)):
    return await forward(
        guard, "getting category groups", lambda c: c.get_category_groups(),
    )


@router.post("/category-groups")
async def create_category_group(
    group: dict = Body(...), guard: ClientGuard = Depends(get_client_guard),
):
    group_id = await forward(
        guard, "creating category group",
        lambda c: c.create_category_group(group),
    )
    return {"id": group_id}


@router.put("/category-groups/{group_id}")
async def update_category_group(
    group_id: str,
    fields: dict = Body(...),
    guard: ClientGuard = Depends(get_client_guard),
):
    await forward(
        guard, "updating category group",
        lambda c: c.update_category_group(group_id, fields),
    )
    return SUCCESS


@router.delete("/category-groups/{group_id}")
async def delete_category_group(
    group_id: str,
    body: CategoryDelete | None = None,
    guard: ClientGuard = Depends(get_client_guard),
):
    """Delete a group and all its categories."""
    body = body or CategoryDelete()
    await forward(
        guard, "deleting category group",
        lambda c: c.delete_category_group(group_id, body.transfer_category_id),
    )
    return SUCCESS
