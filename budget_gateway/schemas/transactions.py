"""Transaction Schemas: request bodies for /api/transactions.

Invariants:
    - accountId and transactions are Optional here; routes enforce presence
      so a missing pair yields one 400 naming both
    - Individual transactions are forwarded untouched (client validates them)
"""

from pydantic import BaseModel, ConfigDict, Field


class TransactionsAdd(BaseModel):
    """POST /api/transactions."""
    model_config = ConfigDict(populate_by_name=True)

    account_id: str | None = Field(None, alias="accountId")
    transactions: list[dict] | None = None
    run_transfers: bool = Field(False, alias="runTransfers")
    learn_categories: bool = Field(False, alias="learnCategories")


class TransactionsImport(BaseModel):
    """POST /api/transactions/import."""
    model_config = ConfigDict(populate_by_name=True)

    account_id: str | None = Field(None, alias="accountId")
    transactions: list[dict] | None = None
