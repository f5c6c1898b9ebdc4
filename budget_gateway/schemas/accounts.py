"""Account Schemas: request bodies for /api/accounts.

Invariants:
    - Wire names are camelCase (initialBalance), attributes snake_case
    - initialBalance is integer cents and defaults to 0
"""

from pydantic import BaseModel, ConfigDict, Field


class AccountCreate(BaseModel):
    """POST /api/accounts. `account` is forwarded as-is."""
    model_config = ConfigDict(populate_by_name=True)

    account: dict | None = None
    initial_balance: int = Field(0, alias="initialBalance")


class AccountClose(BaseModel):
    """POST /api/accounts/{id}/close. Transfer targets apply to non-zero balances."""
    model_config = ConfigDict(populate_by_name=True)

    transfer_account_id: str | None = Field(None, alias="transferAccountId")
    transfer_category_id: str | None = Field(None, alias="transferCategoryId")
