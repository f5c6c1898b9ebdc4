"""Actual Budget Client: BudgetClient implementation on top of actualpy.

Invariants:
    - Every actualpy call runs on one dedicated worker thread (the SQLite session
      it opens is bound to the thread that created it)
    - Calls are therefore serialized; the event loop never blocks on them
    - Every mutation ends with Actual.commit() so the change syncs to the server
    - A failed mutation rolls the shared session back before raising, so the
      next commit never carries its partial writes
    - Amounts in/out are integer cents; actualpy's Decimal API is used only at the edge

Design Decisions:
    - Dedicated single-worker executor instead of asyncio.to_thread: the default
      pool hands calls to arbitrary threads
    - Rows serialized to the field names of Actual's own API (acct -> account,
      payee_id -> payee, ...) so consumers of the Node API keep working
"""

import asyncio
import functools
import json
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack, contextmanager
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from actual import Actual, database, queries
from sqlalchemy import inspect as sa_inspect, select

from budget_gateway.core import amounts
from budget_gateway.core.errors import BudgetClientError, describe_exception

logger = logging.getLogger(__name__)

_QUERY_TABLES = {
    "accounts": "Accounts",
    "transactions": "Transactions",
    "categories": "Categories",
    "category_groups": "CategoryGroups",
    "payees": "Payees",
    "rules": "Rules",
}

_QUERY_OPERATORS = {
    "$eq": lambda col, v: col == v,
    "$ne": lambda col, v: col != v,
    "$lt": lambda col, v: col < v,
    "$lte": lambda col, v: col <= v,
    "$gt": lambda col, v: col > v,
    "$gte": lambda col, v: col >= v,
    "$oneof": lambda col, v: col.in_(v),
    "$like": lambda col, v: col.like(v),
}


def _off_loop(func):
    """Run a blocking actualpy method on the client's worker thread."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, functools.partial(func, self, *args, **kwargs),
        )

    return wrapper


def _cents(value: int) -> Decimal:
    return Decimal(int(value)) / 100


def _flag(value: Any) -> int:
    return 1 if value else 0


# ─── Serializers ─────────────────────────────────────────────────

def _account_dict(row) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "offbudget": bool(row.offbudget),
        "closed": bool(row.closed),
    }


def _transaction_dict(row) -> dict:
    return {
        "id": row.id,
        "account": row.acct,
        "date": amounts.int_to_date_str(row.date),
        "amount": row.amount or 0,
        "payee": row.payee_id,
        "category": row.category_id,
        "notes": row.notes,
        "imported_id": row.financial_id,
        "imported_payee": row.imported_description,
        "cleared": bool(row.cleared),
        "reconciled": bool(row.reconciled),
        "transfer_id": row.transferred_id,
        "is_parent": bool(row.is_parent),
        "is_child": bool(row.is_child),
        "parent_id": row.parent_id,
    }


def _category_dict(row) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "group_id": row.cat_group,
        "is_income": bool(row.is_income),
        "hidden": bool(row.hidden),
    }


def _payee_dict(row) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "transfer_acct": row.transfer_acct,
    }


def _rule_dict(row) -> dict:
    return {
        "id": row.id,
        "stage": row.stage,
        "conditionsOp": row.conditions_op or "and",
        "conditions": json.loads(row.conditions or "[]"),
        "actions": json.loads(row.actions or "[]"),
    }


def _rule_mentions_payee(rule: dict, payee_id: str) -> bool:
    for cond in rule["conditions"]:
        if cond.get("field") != "payee":
            continue
        value = cond.get("value")
        if value == payee_id or (isinstance(value, list) and payee_id in value):
            return True
    return False


class ActualBudgetClient:
    """actualpy-backed BudgetClient. One instance per bootstrap attempt."""

    def __init__(
        self,
        data_dir: str,
        server_url: str | None = None,
        password: str | None = None,
        encryption_password: str | None = None,
        verify_ssl: bool = True,
    ):
        self._data_dir = data_dir
        self._server_url = server_url
        self._password = password
        self._encryption_password = encryption_password
        self._verify_ssl = verify_ssl
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="actual-client",
        )
        self._stack = ExitStack()
        self._actual: Actual | None = None
        self._loaded_file: str | None = None

    # ─── plumbing ───────────────────────────────────────────────

    def _loaded(self) -> Actual:
        if self._actual is None:
            raise BudgetClientError("Budget client is not initialized")
        if self._loaded_file is None:
            raise BudgetClientError("No budget file loaded")
        return self._actual

    @property
    def _session(self):
        return self._loaded().session

    def _get(self, model, row_id: str, label: str):
        row = self._session.get(model, row_id)
        if row is None or getattr(row, "tombstone", 0):
            raise BudgetClientError(f"{label} not found: {row_id}")
        return row

    def _commit(self) -> None:
        self._actual.commit()

    @contextmanager
    def _mutation(self):
        """Commit on success; roll the shared session back on any failure."""
        session = self._session
        try:
            yield session
            self._commit()
        except Exception:
            session.rollback()
            raise

    def _apply_fields(self, row, fields: dict, mapping: dict, label: str) -> None:
        unknown = sorted(set(fields) - set(mapping) - {"id"})
        if unknown:
            raise BudgetClientError(
                f"Unsupported {label} field(s): {', '.join(unknown)}",
            )
        for key, value in fields.items():
            if key == "id":
                continue
            attr, convert = mapping[key]
            setattr(row, attr, convert(value))

    # ─── lifecycle ──────────────────────────────────────────────

    @_off_loop
    def init(self) -> None:
        if not self._server_url:
            raise BudgetClientError("ACTUAL_SERVER_URL is not configured")
        Path(self._data_dir).mkdir(parents=True, exist_ok=True)
        self._actual = self._stack.enter_context(Actual(
            base_url=self._server_url,
            password=self._password,
            data_dir=self._data_dir,
            cert=self._verify_ssl,
        ))
        logger.info(f"Connected to Actual server at {self._server_url}")

    async def shutdown(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(self._executor, self._stack.close)
        finally:
            self._executor.shutdown(wait=False)
            self._actual = None
            self._loaded_file = None

    # ─── workspaces ─────────────────────────────────────────────

    @_off_loop
    def get_budgets(self) -> list[dict]:
        if self._actual is None:
            raise BudgetClientError("Budget client is not initialized")
        files = self._actual.list_user_files().data
        return [
            {
                "id": f.file_id,
                "cloudFileId": f.file_id,
                "groupId": f.group_id,
                "name": f.name,
                "state": "remote",
            }
            for f in files
            if not f.deleted
        ]

    def _open_file(self, file_id: str, password: str | None) -> None:
        if self._actual is None:
            raise BudgetClientError("Budget client is not initialized")
        self._actual.set_file(file_id)
        self._actual.download_budget(password or self._encryption_password)
        self._loaded_file = file_id
        logger.info(f"Budget file loaded: {file_id}", extra={"budget_id": file_id})

    @_off_loop
    def load_budget(self, budget_id: str) -> None:
        self._open_file(budget_id, None)

    @_off_loop
    def download_budget(
        self, cloud_file_id: str, password: str | None = None,
    ) -> None:
        self._open_file(cloud_file_id, password)

    # ─── sync ───────────────────────────────────────────────────

    @_off_loop
    def sync(self) -> None:
        self._loaded().sync()

    @_off_loop
    def run_bank_sync(self, account_id: str) -> None:
        with self._mutation():
            account = self._get(database.Accounts, account_id, "Account")
            self._loaded().run_bank_sync(account=account)

    # ─── accounts ───────────────────────────────────────────────

    @_off_loop
    def get_accounts(self) -> list[dict]:
        return [_account_dict(a) for a in queries.get_accounts(self._session)]

    @_off_loop
    def create_account(self, account: dict, initial_balance: int = 0) -> str:
        name = account.get("name")
        if not name:
            raise BudgetClientError("Account name is required")
        with self._mutation() as s:
            row = queries.create_account(
                s, name,
                initial_balance=_cents(initial_balance),
                off_budget=bool(account.get("offbudget", False)),
            )
        return row.id

    @_off_loop
    def update_account(self, account_id: str, fields: dict) -> None:
        with self._mutation():
            row = self._get(database.Accounts, account_id, "Account")
            self._apply_fields(row, fields, {
                "name": ("name", str),
                "offbudget": ("offbudget", _flag),
                "closed": ("closed", _flag),
            }, "account")

    def _balance(self, account, cutoff: int | None = None) -> int:
        return sum(
            t.amount or 0
            for t in queries.get_transactions(self._session, account=account)
            if cutoff is None or t.date <= cutoff
        )

    @_off_loop
    def close_account(
        self,
        account_id: str,
        transfer_account_id: str | None = None,
        transfer_category_id: str | None = None,
    ) -> None:
        with self._mutation() as s:
            account = self._get(database.Accounts, account_id, "Account")
            balance = self._balance(account)
            if balance != 0:
                if not transfer_account_id:
                    raise BudgetClientError(
                        "Account has a non-zero balance: transferAccountId is required",
                    )
                target = self._get(database.Accounts, transfer_account_id, "Account")
                source_txn, _ = queries.create_transfer(
                    s, date.today(), account, target,
                    _cents(balance), notes="Closing account",
                )
                if transfer_category_id:
                    category = self._get(
                        database.Categories, transfer_category_id, "Category",
                    )
                    source_txn.category_id = category.id
            account.closed = 1

    @_off_loop
    def reopen_account(self, account_id: str) -> None:
        with self._mutation():
            self._get(database.Accounts, account_id, "Account").closed = 0

    @_off_loop
    def delete_account(self, account_id: str) -> None:
        with self._mutation():
            self._get(database.Accounts, account_id, "Account").delete()

    @_off_loop
    def get_account_balance(self, account_id: str, cutoff: str | None = None) -> int:
        account = self._get(database.Accounts, account_id, "Account")
        limit = amounts.date_to_int(cutoff) if cutoff else None
        return self._balance(account, limit)

    # ─── transactions ───────────────────────────────────────────

    @_off_loop
    def get_transactions(
        self, account_id: str, start_date: str, end_date: str,
    ) -> list[dict]:
        account = self._get(database.Accounts, account_id, "Account")
        start, end = amounts.date_to_int(start_date), amounts.date_to_int(end_date)
        rows = [
            t for t in queries.get_transactions(self._session, account=account)
            if start <= t.date <= end
        ]
        rows.sort(key=lambda t: t.date, reverse=True)
        return [_transaction_dict(t) for t in rows]

    def _payee_for(self, item: dict):
        if item.get("payee"):
            return self._get(database.Payees, item["payee"], "Payee")
        return item.get("payee_name") or ""

    def _category_for(self, item: dict):
        if item.get("category"):
            return self._get(database.Categories, item["category"], "Category")
        return None

    def _create_transaction(self, account, item: dict, run_transfers: bool):
        if not item.get("date"):
            raise BudgetClientError("Transaction date is required")
        when = date.fromisoformat(item["date"])
        payee = self._payee_for(item)
        amount = _cents(item.get("amount", 0))
        transfer_acct = getattr(payee, "transfer_acct", None)
        if run_transfers and transfer_acct:
            target = self._get(database.Accounts, transfer_acct, "Account")
            source_txn, _ = queries.create_transfer(
                self._session, when, account, target, -amount,
                notes=item.get("notes"),
            )
            return source_txn
        return queries.create_transaction(
            self._session, when, account, payee,
            notes=item.get("notes") or "",
            category=self._category_for(item),
            amount=amount,
            imported_id=item.get("imported_id"),
            cleared=bool(item.get("cleared", False)),
            imported_payee=item.get("imported_payee"),
        )

    def _learn_category(self, payee, category_id: str) -> None:
        """Add a 'payee is X -> set category Y' rule unless one exists."""
        for row in queries.get_rules(self._session):
            rule = _rule_dict(row)
            if _rule_mentions_payee(rule, payee.id) and any(
                a.get("field") == "category" for a in rule["actions"]
            ):
                return
        self._insert_rule({
            "stage": None,
            "conditionsOp": "and",
            "conditions": [{"field": "payee", "op": "is", "value": payee.id}],
            "actions": [{"field": "category", "op": "set", "value": category_id}],
        })

    @_off_loop
    def add_transactions(
        self,
        account_id: str,
        transactions: list[dict],
        run_transfers: bool = False,
        learn_categories: bool = False,
    ) -> list[str]:
        ids = []
        with self._mutation():
            account = self._get(database.Accounts, account_id, "Account")
            for item in transactions:
                row = self._create_transaction(account, item, run_transfers)
                ids.append(row.id)
                payee = self._payee_for(item)
                if learn_categories and item.get("category") and not isinstance(payee, str):
                    self._learn_category(payee, item["category"])
        return ids

    @_off_loop
    def import_transactions(self, account_id: str, transactions: list[dict]) -> dict:
        added, updated, errors, matched = [], [], [], []
        with self._mutation() as s:
            account = self._get(database.Accounts, account_id, "Account")
            existing = {
                t.id for t in queries.get_transactions(s, account=account)
            }
            for item in transactions:
                try:
                    row = queries.reconcile_transaction(
                        s,
                        date.fromisoformat(item["date"]),
                        account,
                        payee=self._payee_for(item),
                        notes=item.get("notes") or "",
                        category=self._category_for(item),
                        amount=_cents(item.get("amount", 0)),
                        imported_id=item.get("imported_id"),
                        cleared=bool(item.get("cleared", False)),
                        imported_payee=item.get("imported_payee"),
                        already_matched=matched,
                    )
                except (KeyError, ValueError, BudgetClientError) as e:
                    errors.append({"message": describe_exception(e), "transaction": item})
                    continue
                matched.append(row)
                (updated if row.id in existing else added).append(row.id)
        return {"errors": errors, "added": added, "updated": updated}

    @_off_loop
    def update_transaction(self, transaction_id: str, fields: dict) -> None:
        with self._mutation():
            row = self._get(database.Transactions, transaction_id, "Transaction")
            self._apply_fields(row, fields, {
                "date": ("date", amounts.date_to_int),
                "amount": ("amount", int),
                "payee": ("payee_id", str),
                "category": ("category_id", str),
                "notes": ("notes", str),
                "cleared": ("cleared", _flag),
                "imported_payee": ("imported_description", str),
            }, "transaction")

    @_off_loop
    def delete_transaction(self, transaction_id: str) -> None:
        with self._mutation():
            self._get(database.Transactions, transaction_id, "Transaction").delete()

    # ─── categories & groups ────────────────────────────────────

    def _live(self, model, *criteria):
        stmt = select(model).where(model.tombstone == 0, *criteria)
        return list(self._session.scalars(stmt))

    def _move_category_transactions(self, category_id: str, target_id: str) -> None:
        for txn in self._live(
            database.Transactions, database.Transactions.category_id == category_id,
        ):
            txn.category_id = target_id

    @_off_loop
    def get_categories(self) -> list[dict]:
        return [_category_dict(c) for c in queries.get_categories(self._session)]

    @_off_loop
    def create_category(self, category: dict) -> str:
        name, group_id = category.get("name"), category.get("group_id")
        if not name or not group_id:
            raise BudgetClientError("Category name and group_id are required")
        with self._mutation() as s:
            group = self._get(database.CategoryGroups, group_id, "Category group")
            row = queries.create_category(s, name, group.name)
            row.is_income = _flag(category.get("is_income", group.is_income))
            row.hidden = _flag(category.get("hidden", False))
        return row.id

    @_off_loop
    def update_category(self, category_id: str, fields: dict) -> None:
        with self._mutation():
            row = self._get(database.Categories, category_id, "Category")
            self._apply_fields(row, fields, {
                "name": ("name", str),
                "group_id": ("cat_group", str),
                "hidden": ("hidden", _flag),
            }, "category")

    @_off_loop
    def delete_category(
        self, category_id: str, transfer_category_id: str | None = None,
    ) -> None:
        with self._mutation():
            row = self._get(database.Categories, category_id, "Category")
            if transfer_category_id:
                target = self._get(database.Categories, transfer_category_id, "Category")
                self._move_category_transactions(row.id, target.id)
            row.delete()

    @_off_loop
    def get_category_groups(self) -> list[dict]:
        categories = self._live(database.Categories)
        return [
            {
                "id": g.id,
                "name": g.name,
                "is_income": bool(g.is_income),
                "hidden": bool(g.hidden),
                "categories": [
                    _category_dict(c) for c in categories if c.cat_group == g.id
                ],
            }
            for g in queries.get_category_groups(self._session)
        ]

    @_off_loop
    def create_category_group(self, group: dict) -> str:
        if not group.get("name"):
            raise BudgetClientError("Category group name is required")
        with self._mutation() as s:
            row = queries.create_category_group(s, group["name"])
            row.is_income = _flag(group.get("is_income", False))
            row.hidden = _flag(group.get("hidden", False))
        return row.id

    @_off_loop
    def update_category_group(self, group_id: str, fields: dict) -> None:
        with self._mutation():
            row = self._get(database.CategoryGroups, group_id, "Category group")
            self._apply_fields(row, fields, {
                "name": ("name", str),
                "hidden": ("hidden", _flag),
            }, "category group")

    @_off_loop
    def delete_category_group(
        self, group_id: str, transfer_category_id: str | None = None,
    ) -> None:
        with self._mutation():
            group = self._get(database.CategoryGroups, group_id, "Category group")
            target = None
            if transfer_category_id:
                target = self._get(database.Categories, transfer_category_id, "Category")
            for category in self._live(
                database.Categories, database.Categories.cat_group == group.id,
            ):
                if target is not None:
                    self._move_category_transactions(category.id, target.id)
                category.delete()
            group.delete()

    # ─── payees ─────────────────────────────────────────────────

    @_off_loop
    def get_payees(self) -> list[dict]:
        return [_payee_dict(p) for p in queries.get_payees(self._session)]

    @_off_loop
    def create_payee(self, payee: dict) -> str:
        if not payee.get("name"):
            raise BudgetClientError("Payee name is required")
        with self._mutation() as s:
            row = queries.create_payee(s, payee["name"])
        return row.id

    @_off_loop
    def update_payee(self, payee_id: str, fields: dict) -> None:
        with self._mutation():
            row = self._get(database.Payees, payee_id, "Payee")
            self._apply_fields(row, fields, {"name": ("name", str)}, "payee")

    @_off_loop
    def delete_payee(self, payee_id: str) -> None:
        with self._mutation():
            self._get(database.Payees, payee_id, "Payee").delete()

    @_off_loop
    def merge_payees(self, target_id: str, merge_ids: list[str]) -> None:
        with self._mutation():
            target = self._get(database.Payees, target_id, "Payee")
            for merge_id in merge_ids:
                if merge_id == target.id:
                    continue
                payee = self._get(database.Payees, merge_id, "Payee")
                for txn in self._live(
                    database.Transactions, database.Transactions.payee_id == payee.id,
                ):
                    txn.payee_id = target.id
                payee.delete()

    # ─── rules ──────────────────────────────────────────────────

    @_off_loop
    def get_rules(self) -> list[dict]:
        return [_rule_dict(r) for r in queries.get_rules(self._session)]

    @_off_loop
    def get_payee_rules(self, payee_id: str) -> list[dict]:
        rules = [_rule_dict(r) for r in queries.get_rules(self._session)]
        return [r for r in rules if _rule_mentions_payee(r, payee_id)]

    def _insert_rule(self, rule: dict):
        conditions, actions = rule.get("conditions"), rule.get("actions")
        if not isinstance(conditions, list) or not isinstance(actions, list):
            raise BudgetClientError("Rule conditions and actions must be lists")
        row = database.Rules(
            id=str(uuid.uuid4()),
            stage=rule.get("stage"),
            conditions_op=rule.get("conditionsOp", "and"),
            conditions=json.dumps(conditions),
            actions=json.dumps(actions),
            tombstone=0,
        )
        self._session.add(row)
        return row

    @_off_loop
    def create_rule(self, rule: dict) -> dict:
        with self._mutation():
            row = self._insert_rule(rule)
        return _rule_dict(row)

    @_off_loop
    def update_rule(self, rule: dict) -> dict:
        with self._mutation():
            row = self._get(database.Rules, rule.get("id"), "Rule")
            if "stage" in rule:
                row.stage = rule["stage"]
            if "conditionsOp" in rule:
                row.conditions_op = rule["conditionsOp"]
            if "conditions" in rule:
                row.conditions = json.dumps(rule["conditions"])
            if "actions" in rule:
                row.actions = json.dumps(rule["actions"])
        return _rule_dict(row)

    @_off_loop
    def delete_rule(self, rule_id: str) -> None:
        with self._mutation():
            self._get(database.Rules, rule_id, "Rule").delete()

    # ─── budget months ──────────────────────────────────────────

    @_off_loop
    def get_budget_months(self) -> list[str]:
        current = date.today().strftime("%Y-%m")
        stored = [
            amounts.int_to_month(b.month)
            for b in queries.get_budgets(self._session)
            if b.month
        ]
        month = min(stored + [current])
        months = [month]
        while month < current:
            month = amounts.next_month(month)
            months.append(month)
        return months

    def _month_buffer(self, month: str):
        return self._session.get(database.ZeroBudgetMonths, month)

    @_off_loop
    def get_budget_month(self, month: str) -> dict:
        month_int = amounts.month_to_int(month)
        start, end = amounts.month_bounds(month)
        budgets = {
            b.category_id: b
            for b in queries.get_budgets(self._session)
            if b.month == month_int
        }
        spent: dict[str, int] = {}
        for txn in self._live(
            database.Transactions,
            database.Transactions.date >= start,
            database.Transactions.date <= end,
            database.Transactions.is_parent == 0,
        ):
            if txn.category_id:
                spent[txn.category_id] = spent.get(txn.category_id, 0) + (txn.amount or 0)

        categories = self._live(database.Categories)
        groups = []
        for group in queries.get_category_groups(self._session):
            rows = []
            for c in categories:
                if c.cat_group != group.id:
                    continue
                budget = budgets.get(c.id)
                budgeted = (budget.amount or 0) if budget else 0
                c_spent = spent.get(c.id, 0)
                rows.append({
                    **_category_dict(c),
                    "budgeted": budgeted,
                    "spent": c_spent,
                    "balance": budgeted + c_spent,
                    "carryover": bool(budget.carryover) if budget else False,
                })
            groups.append({
                "id": group.id,
                "name": group.name,
                "is_income": bool(group.is_income),
                "budgeted": sum(r["budgeted"] for r in rows),
                "spent": sum(r["spent"] for r in rows),
                "balance": sum(r["balance"] for r in rows),
                "categories": rows,
            })
        buffer = self._month_buffer(month)
        expense = [g for g in groups if not g["is_income"]]
        return {
            "month": month,
            "buffered": (buffer.buffered or 0) if buffer else 0,
            "totalBudgeted": sum(g["budgeted"] for g in expense),
            "totalSpent": sum(g["spent"] for g in expense),
            "totalBalance": sum(g["balance"] for g in expense),
            "categoryGroups": groups,
        }

    def _budget_row(self, month: str, category_id: str):
        category = self._get(database.Categories, category_id, "Category")
        first = amounts.parse_month(month)
        row = queries.get_budget(self._session, first, category)
        if row is None:
            row = queries.create_budget(self._session, first, category, Decimal(0))
        return row

    def _set_budget_amount(self, month: str, category_id: str, amount: int) -> None:
        self._budget_row(month, category_id).amount = int(amount)

    def _set_budget_carryover(self, month: str, category_id: str, flag: bool) -> None:
        self._budget_row(month, category_id).carryover = _flag(flag)

    def _hold_budget(self, month: str, amount: int) -> None:
        amounts.parse_month(month)
        row = self._month_buffer(month)
        if row is None:
            self._session.add(database.ZeroBudgetMonths(id=month, buffered=int(amount)))
        else:
            row.buffered = int(amount)

    def _reset_hold(self, month: str) -> None:
        self._hold_budget(month, 0)

    @_off_loop
    def set_budget_amount(self, month: str, category_id: str, amount: int) -> None:
        with self._mutation():
            self._set_budget_amount(month, category_id, amount)

    @_off_loop
    def set_budget_carryover(self, month: str, category_id: str, flag: bool) -> None:
        with self._mutation():
            self._set_budget_carryover(month, category_id, flag)

    @_off_loop
    def hold_budget_for_next_month(self, month: str, amount: int) -> None:
        with self._mutation():
            self._hold_budget(month, amount)

    @_off_loop
    def reset_budget_hold(self, month: str) -> None:
        with self._mutation():
            self._reset_hold(month)

    # ─── generic ────────────────────────────────────────────────

    @_off_loop
    def run_query(self, query: dict) -> dict:
        table = query.get("table")
        model_name = _QUERY_TABLES.get(table)
        if model_name is None:
            raise BudgetClientError(f"Unsupported query table: {table}")
        model = getattr(database, model_name)
        columns = [attr.key for attr in sa_inspect(model).column_attrs]

        def column(name: str):
            if name not in columns:
                raise BudgetClientError(f"Unknown field for {table}: {name}")
            return getattr(model, name)

        stmt = select(model)
        if "tombstone" in columns:
            stmt = stmt.where(model.tombstone == 0)
        for name, cond in (query.get("filter") or {}).items():
            col = column(name)
            if isinstance(cond, dict):
                for op, value in cond.items():
                    if op not in _QUERY_OPERATORS:
                        raise BudgetClientError(f"Unsupported query operator: {op}")
                    stmt = stmt.where(_QUERY_OPERATORS[op](col, value))
            else:
                stmt = stmt.where(col == cond)

        order_by = query.get("orderBy") or []
        if isinstance(order_by, (str, dict)):
            order_by = [order_by]
        for item in order_by:
            if isinstance(item, str):
                stmt = stmt.order_by(column(item))
            else:
                for name, direction in item.items():
                    col = column(name)
                    stmt = stmt.order_by(col.desc() if direction == "desc" else col)

        if query.get("limit") is not None:
            stmt = stmt.limit(int(query["limit"]))

        selected = query.get("select") or columns
        for name in selected:
            column(name)
        rows = self._session.scalars(stmt)
        return {"data": [{name: getattr(r, name) for name in selected} for r in rows]}

    @_off_loop
    def batch_budget_updates(self, operations: list[dict]) -> dict:
        handlers = {
            "setBudgetAmount": (self._set_budget_amount, ("month", "categoryId", "amount")),
            "setBudgetCarryover": (self._set_budget_carryover, ("month", "categoryId", "flag")),
            "holdBudgetForNextMonth": (self._hold_budget, ("month", "amount")),
            "resetBudgetHold": (self._reset_hold, ("month",)),
        }
        with self._mutation():
            for index, op in enumerate(operations):
                method = op.get("method")
                if method not in handlers:
                    raise BudgetClientError(
                        f"Unsupported batch method at index {index}: {method}",
                    )
                handler, arg_names = handlers[method]
                args = op.get("args") or {}
                missing = [name for name in arg_names if name not in args]
                if missing:
                    raise BudgetClientError(
                        f"Batch operation {index} ({method}) is missing: "
                        f"{', '.join(missing)}",
                    )
                handler(*(args[name] for name in arg_names))
        return {"success": True, "applied": len(operations)}
