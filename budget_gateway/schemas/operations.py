"""Operation Schemas: sync, bank sync, query, batch and amount utilities.

Invariants:
    - AmountConversion.amount is untyped on purpose: the route rejects
      non-numbers (bools and numeric strings included) with its own 400 message
    - BatchRequest.func is a list of {"method", "args"} budget operations
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BankSyncRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_id: str | None = Field(None, alias="accountId")


class QueryRequest(BaseModel):
    query: dict | None = None


class BatchRequest(BaseModel):
    func: list[dict] | None = None


class AmountConversion(BaseModel):
    amount: Any = None
