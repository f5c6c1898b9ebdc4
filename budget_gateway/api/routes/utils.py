"""Utility Routes: amount <-> integer cents conversion.

Invariants:
    - Pure computations: never bootstrap or call the budget client
    - Non-number input (strings, booleans, null) answers 400
    - Numbers too large to convert answer 400, not 500
"""

import logging

from fastapi import APIRouter

from budget_gateway.core import amounts
from budget_gateway.core.errors import InvalidParameterError
from budget_gateway.schemas.operations import AmountConversion

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/utils", tags=["utils"])


def _numeric_amount(body: AmountConversion | None):
    amount = body.amount if body else None
    if not amounts.is_number(amount):
        raise InvalidParameterError("Invalid amount: must be a number", "amount")
    return amount


def _convert(func, body: AmountConversion | None):
    amount = _numeric_amount(body)
    try:
        return func(amount)
    except (ValueError, OverflowError) as e:
        raise InvalidParameterError("Invalid amount: out of range", "amount") from e


@router.post("/amount-to-integer")
async def amount_to_integer(body: AmountConversion | None = None):
    """12.34 -> {"amount": 1234}"""
    return {"amount": _convert(amounts.amount_to_integer, body)}


@router.post("/integer-to-amount")
async def integer_to_amount(body: AmountConversion | None = None):
    """1234 -> {"amount": 12.34}"""
    return {"amount": _convert(amounts.integer_to_amount, body)}
