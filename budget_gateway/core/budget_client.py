"""Budget Client Protocol: the capability surface the gateway forwards to.

Invariants:
    - Routes depend on BudgetClient only, never on the actualpy library
    - One async method per underlying operation, plain JSON-compatible in/out
    - Amounts are integer cents, dates 'YYYY-MM-DD', months 'YYYY-MM'
    - Domain failures raise BudgetClientError (core/errors.py) with a user-facing message

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass an in-memory fake
    - Dicts instead of typed models: the gateway does not interpret domain objects,
      it only forwards them
"""

from typing import Any, Protocol


class BudgetClient(Protocol):
    """Contract for an Actual Budget client, implemented by infrastructure."""

    # -- lifecycle --
    async def init(self) -> None: ...
    async def shutdown(self) -> None: ...

    # -- workspaces ("budgets") --
    async def get_budgets(self) -> list[dict]: ...
    async def load_budget(self, budget_id: str) -> None: ...
    async def download_budget(
        self, cloud_file_id: str, password: str | None = None,
    ) -> None: ...

    # -- sync --
    async def sync(self) -> None: ...
    async def run_bank_sync(self, account_id: str) -> None: ...

    # -- accounts --
    async def get_accounts(self) -> list[dict]: ...
    async def create_account(
        self, account: dict, initial_balance: int = 0,
    ) -> str: ...
    async def update_account(self, account_id: str, fields: dict) -> None: ...
    async def close_account(
        self,
        account_id: str,
        transfer_account_id: str | None = None,
        transfer_category_id: str | None = None,
    ) -> None: ...
    async def reopen_account(self, account_id: str) -> None: ...
    async def delete_account(self, account_id: str) -> None: ...
    async def get_account_balance(
        self, account_id: str, cutoff: str | None = None,
    ) -> int: ...

    # -- transactions --
    async def get_transactions(
        self, account_id: str, start_date: str, end_date: str,
    ) -> list[dict]: ...
    async def add_transactions(
        self,
        account_id: str,
        transactions: list[dict],
        run_transfers: bool = False,
        learn_categories: bool = False,
    ) -> list[str]: ...
    async def import_transactions(
        self, account_id: str, transactions: list[dict],
    ) -> dict: ...
    async def update_transaction(self, transaction_id: str, fields: dict) -> None: ...
    async def delete_transaction(self, transaction_id: str) -> None: ...

    # -- categories & groups --
    async def get_categories(self) -> list[dict]: ...
    async def create_category(self, category: dict) -> str: ...
    async def update_category(self, category_id: str, fields: dict) -> None: ...
    async def delete_category(
        self, category_id: str, transfer_category_id: str | None = None,
    ) -> None: ...
    async def get_category_groups(self) -> list[dict]: ...
    async def create_category_group(self, group: dict) -> str: ...
    async def update_category_group(self, group_id: str, fields: dict) -> None: ...
    async def delete_category_group(
        self, group_id: str, transfer_category_id: str | None = None,
    ) -> None: ...

    # -- payees --
    async def get_payees(self) -> list[dict]: ...
    async def create_payee(self, payee: dict) -> str: ...
    async def update_payee(self, payee_id: str, fields: dict) -> None: ...
    async def delete_payee(self, payee_id: str) -> None: ...
    async def merge_payees(self, target_id: str, merge_ids: list[str]) -> None: ...

    # -- rules --
    async def get_rules(self) -> list[dict]: ...
    async def get_payee_rules(self, payee_id: str) -> list[dict]: ...
    async def create_rule(self, rule: dict) -> dict: ...
    async def update_rule(self, rule: dict) -> dict: ...
    async def delete_rule(self, rule_id: str) -> None: ...

    # -- budget months --
    async def get_budget_months(self) -> list[str]: ...
    async def get_budget_month(self, month: str) -> dict: ...
    async def set_budget_amount(
        self, month: str, category_id: str, amount: int,
    ) -> None: ...
    async def set_budget_carryover(
        self, month: str, category_id: str, flag: bool,
    ) -> None: ...
    async def hold_budget_for_next_month(self, month: str, amount: int) -> None: ...
    async def reset_budget_hold(self, month: str) -> None: ...

    # -- generic --
    async def run_query(self, query: dict) -> Any: ...
    async def batch_budget_updates(self, operations: list[dict]) -> dict: ...
