"""Catalog Schemas: categories, category groups and payees.

Invariants:
    - Create/update bodies are free-form dicts forwarded to the client
    - Only the cross-resource parameters (transfer target, merge set) are typed
"""

from pydantic import BaseModel, ConfigDict, Field


class CategoryDelete(BaseModel):
    """DELETE /api/categories/{id} and /api/category-groups/{id}."""
    model_config = ConfigDict(populate_by_name=True)

    transfer_category_id: str | None = Field(None, alias="transferCategoryId")


class PayeeMerge(BaseModel):
    """POST /api/payees/merge: fold mergeIds into targetId."""
    model_config = ConfigDict(populate_by_name=True)

    target_id: str | None = Field(None, alias="targetId")
    merge_ids: list[str] | None = Field(None, alias="mergeIds")
