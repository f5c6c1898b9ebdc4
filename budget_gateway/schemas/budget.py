"""Budget Month Schemas: request bodies for /api/budget/*.

Invariants:
    - month is 'YYYY-MM'; amounts are integer cents
    - Format of month is checked by the client, presence by the route
"""

from pydantic import BaseModel, ConfigDict, Field


class BudgetAmountSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    month: str | None = None
    category_id: str | None = Field(None, alias="categoryId")
    amount: int | None = None


class BudgetCarryoverSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    month: str | None = None
    category_id: str | None = Field(None, alias="categoryId")
    flag: bool | None = None


class BudgetHold(BaseModel):
    month: str | None = None
    amount: int | None = None


class BudgetHoldReset(BaseModel):
    month: str | None = None
