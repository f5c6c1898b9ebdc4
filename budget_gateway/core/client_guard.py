"""Client Guard: single-flight bootstrap of the budget client and default budget selection.

Invariants:
    - client.init() runs at most once per successful bootstrap; N concurrent
      first callers share one in-flight bootstrap task and its outcome
    - The client handle is exposed only after init() succeeded (never half-initialized)
    - A failed bootstrap resets to a retry-eligible state: the next acquire()
      starts over with a fresh client from the factory
    - A failed or cancelled bootstrap shuts its half-built client down
    - Default budget selection is best-effort: it never fails the bootstrap

State machine:
    UNINITIALIZED --acquire--> INITIALIZING --ok--> READY
                                     |
                                     +--error--> FAILED --acquire--> INITIALIZING

Design Decisions:
    - asyncio.shield around the shared task: a client disconnect cancels only
      its own wait, not the bootstrap other requests are waiting on
    - Factory instead of a prebuilt client: each retry gets a clean handle
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from budget_gateway.core.budget_client import BudgetClient
from budget_gateway.core.errors import BootstrapError, describe_exception

logger = logging.getLogger(__name__)


class ClientState(str, Enum):
    """Bootstrap lifecycle of the process-wide client handle."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class SelectionOutcome(str, Enum):
    """Which budget, if any, was loaded during bootstrap."""
    PREFERRED = "preferred"
    FIRST_AVAILABLE = "first_available"
    NONE = "none"


@dataclass(frozen=True)
class BudgetSelection:
    outcome: SelectionOutcome
    budget_id: str | None = None


async def select_default_budget(
    client: BudgetClient, preferred_id: str | None,
) -> BudgetSelection:
    """Load the preferred budget, else the first listed one, else nothing."""
    if preferred_id:
        try:
            logger.info(
                f"Loading budget: {preferred_id}",
                extra={"budget_id": preferred_id},
            )
            await client.load_budget(preferred_id)
            return BudgetSelection(SelectionOutcome.PREFERRED, preferred_id)
        except Exception as e:
            logger.warning(
                f"Could not load budget {preferred_id}, "
                f"checking available budgets: {describe_exception(e)}",
                extra={"budget_id": preferred_id},
            )

    try:
        budgets = await client.get_budgets()
        if not budgets:
            logger.warning("No budgets available")
            return BudgetSelection(SelectionOutcome.NONE)
        first = budgets[0]
        logger.info(
            f"Loading first available budget: {first.get('name')}",
            extra={"budget_id": first.get("id")},
        )
        await client.load_budget(first["id"])
        return BudgetSelection(SelectionOutcome.FIRST_AVAILABLE, first["id"])
    except Exception as e:
        logger.warning(
            f"Could not list or load budgets: {describe_exception(e)}",
        )
        return BudgetSelection(SelectionOutcome.NONE)


class ClientGuard:
    """Owns the process-wide BudgetClient and its bootstrap lifecycle."""

    def __init__(
        self,
        factory: Callable[[], BudgetClient],
        preferred_budget_id: str | None = None,
    ):
        self._factory = factory
        self._preferred_budget_id = preferred_budget_id
        self._state = ClientState.UNINITIALIZED
        self._client: BudgetClient | None = None
        self._pending: asyncio.Task | None = None
        self._last_error: BaseException | None = None
        self._selection: BudgetSelection | None = None

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ClientState.READY

    @property
    def last_error(self) -> BaseException | None:
        return self._last_error

    @property
    def selection(self) -> BudgetSelection | None:
        return self._selection

    async def acquire(self) -> BudgetClient:
        """Return the ready client, bootstrapping it first if needed.

        Raises BootstrapError when client.init() fails; every caller waiting
        on the same bootstrap receives the same error.
        """
        if self._client is not None:
            return self._client
        if self._pending is None:
            self._pending = asyncio.create_task(self._bootstrap())
            self._pending.add_done_callback(_retrieve_exception)
        return await asyncio.shield(self._pending)

    async def _bootstrap(self) -> BudgetClient:
        self._state = ClientState.INITIALIZING
        logger.info("Initializing budget client", extra={"state": self._state.value})
        client = None
        try:
            client = self._factory()
            await client.init()
            selection = await select_default_budget(
                client, self._preferred_budget_id,
            )
        except asyncio.CancelledError:
            if client is not None:
                await _discard(client)
            raise
        except Exception as e:
            if client is not None:
                await _discard(client)
            self._state = ClientState.FAILED
            self._last_error = e
            self._pending = None
            logger.error(
                f"Failed to initialize budget client: {describe_exception(e)}",
                extra={"state": self._state.value},
                exc_info=True,
            )
            raise BootstrapError(describe_exception(e)) from e

        self._selection = selection
        self._client = client
        self._state = ClientState.READY
        self._last_error = None
        self._pending = None
        logger.info(
            "Budget client initialized",
            extra={
                "state": self._state.value,
                "budget_id": self._selection.budget_id,
            },
        )
        return client

    async def shutdown(self, timeout: float) -> None:
        """Shut the client down with a bounded wait. Never raises."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        client = self._client
        if client is None:
            self._state = ClientState.UNINITIALIZED
            return
        try:
            await asyncio.wait_for(client.shutdown(), timeout)
            logger.info("Budget client shutdown complete")
        except asyncio.TimeoutError:
            logger.error(f"Budget client shutdown timed out after {timeout}s")
        except Exception as e:
            logger.error(
                f"Error during budget client shutdown: {describe_exception(e)}",
                exc_info=True,
            )
        finally:
            self._client = None
            self._state = ClientState.UNINITIALIZED


def _retrieve_exception(task: asyncio.Task) -> None:
    # Marks the error as retrieved when every waiter went away before it finished.
    if not task.cancelled():
        task.exception()


async def _discard(client: BudgetClient) -> None:
    """Release a client whose bootstrap did not complete."""
    try:
        await client.shutdown()
    except Exception as e:
        logger.warning(
            f"Error releasing failed budget client: {describe_exception(e)}",
        )
