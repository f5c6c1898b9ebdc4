"""Amount & Date Conversions: Actual Budget's integer storage formats.

Invariants:
    - Amounts are stored as integer cents; 12.34 <-> 1234
    - amount_to_integer rounds half toward +infinity (Math.round semantics)
    - Dates are stored as YYYYMMDD integers, months as YYYYMM integers
    - Malformed dates/months raise ValueError, never return a sentinel

Design Decisions:
    - Pure functions, no IO: used by the HTTP utility endpoints and the adapter alike
"""

import math
import re
from datetime import date

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def is_number(value: object) -> bool:
    """True for finite int/float values. bool is not a number here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def amount_to_integer(amount: float) -> int:
    """12.34 -> 1234, 0.125 -> 13, -0.125 -> -12

    Raises ValueError when the amount has no finite cents value (e.g. 1e307).
    """
    scaled = amount * 100 + 0.5
    if not math.isfinite(scaled):
        raise ValueError(f"Amount out of range: {amount}")
    return math.floor(scaled)


def integer_to_amount(value: float) -> float:
    """1234 -> 12.34"""
    return round(value / 100, 2)


# ─── Dates ───────────────────────────────────────────────────────

def date_to_int(value: str | date) -> int:
    """'2024-01-31' -> 20240131"""
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return value.year * 10000 + value.month * 100 + value.day


def int_to_date(value: int) -> date:
    return date(value // 10000, value // 100 % 100, value % 100)


def int_to_date_str(value: int | None) -> str | None:
    if value is None:
        return None
    return int_to_date(value).isoformat()


# ─── Months ──────────────────────────────────────────────────────

def parse_month(value: str) -> date:
    """'2024-01' -> date(2024, 1, 1)"""
    match = _MONTH_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid month: {value!r} (expected YYYY-MM)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return date(year, month, 1)


def month_to_int(value: str) -> int:
    """'2024-01' -> 202401"""
    first = parse_month(value)
    return first.year * 100 + first.month


def int_to_month(value: int) -> str:
    """202401 -> '2024-01'"""
    return f"{value // 100:04d}-{value % 100:02d}"


def month_bounds(value: str) -> tuple[int, int]:
    """First and last day of a month as YYYYMMDD ints (inclusive)."""
    first = parse_month(value)
    if first.month == 12:
        following = date(first.year + 1, 1, 1)
    else:
        following = date(first.year, first.month + 1, 1)
    last_day = following.toordinal() - 1
    return date_to_int(first), date_to_int(date.fromordinal(last_day))


def next_month(value: str) -> str:
    first = parse_month(value)
    if first.month == 12:
        return f"{first.year + 1:04d}-01"
    return f"{first.year:04d}-{first.month + 1:02d}"
