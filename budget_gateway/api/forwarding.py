"""Request Forwarding: presence checks and the single client call per request.

Invariants:
    - require() runs before forward(): a rejected request never bootstraps
    - forward() acquires the client (BootstrapError propagates untouched),
      invokes exactly one operation and maps its failure to ClientOperationError
    - The operation's message reaches the response verbatim

Design Decisions:
    - Call passed as a lambda over the client: routes stay one-liners and the
      client is only resolved after validation
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from budget_gateway.core.budget_client import BudgetClient
from budget_gateway.core.client_guard import ClientGuard
from budget_gateway.core.errors import (
    ClientOperationError, GatewayError, MissingParameterError, describe_exception,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUCCESS = {"success": True}


def is_missing(value: object) -> bool:
    return value is None or value == ""


def require(**params: object) -> None:
    """Raise MissingParameterError naming every parameter if any is missing."""
    if any(is_missing(v) for v in params.values()):
        raise MissingParameterError(list(params))


async def forward(
    guard: ClientGuard,
    action: str,
    call: Callable[[BudgetClient], Awaitable[T]],
) -> T:
    """Acquire the client and run one operation on it."""
    client = await guard.acquire()
    try:
        return await call(client)
    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"Error {action}: {describe_exception(e)}", exc_info=True)
        raise ClientOperationError(action, describe_exception(e)) from e
