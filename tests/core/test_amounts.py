"""Amount & date conversions: pure tests for Actual's integer storage formats.

Tests cover:
    - Half-up rounding of decimal amounts into integer cents
    - Number detection (bools and non-finite values are not numbers)
    - YYYYMMDD dates and YYYY-MM months, including bad input
"""

from datetime import date

import pytest

from budget_gateway.core import amounts


# --- Amounts ------------------------------------------------------------------

@pytest.mark.parametrize("amount,expected", [
    (12.34, 1234),
    (0.125, 13),
    (-0.125, -12),
    (-5.5, -550),
    (7, 700),
])
def test_amount_to_integer_rounds_half_up(amount, expected):
    assert amounts.amount_to_integer(amount) == expected


def test_integer_to_amount():
    assert amounts.integer_to_amount(1234) == 12.34
    assert amounts.integer_to_amount(-1) == -0.01


@pytest.mark.parametrize("value", [0, 1, -3, 1.5])
def test_is_number_accepts_finite_numbers(value):
    assert amounts.is_number(value)


@pytest.mark.parametrize("value", [True, False, None, "12", float("nan"), float("inf")])
def test_is_number_rejects_everything_else(value):
    assert not amounts.is_number(value)


# --- Dates --------------------------------------------------------------------

def test_date_round_trip_through_int():
    assert amounts.date_to_int("2024-01-31") == 20240131
    assert amounts.int_to_date(20240131) == date(2024, 1, 31)
    assert amounts.int_to_date_str(20240229) == "2024-02-29"


def test_int_to_date_str_passes_none_through():
    assert amounts.int_to_date_str(None) is None


# --- Months -------------------------------------------------------------------

def test_month_conversions():
    assert amounts.month_to_int("2024-03") == 202403
    assert amounts.int_to_month(202403) == "2024-03"


@pytest.mark.parametrize("value", ["2024-13", "2024-00", "2024-1", "march", "", None])
def test_parse_month_rejects_malformed(value):
    with pytest.raises(ValueError):
        amounts.parse_month(value)


def test_month_bounds_handles_leap_february():
    assert amounts.month_bounds("2024-02") == (20240201, 20240229)


def test_month_bounds_handles_december():
    assert amounts.month_bounds("2023-12") == (20231201, 20231231)


def test_next_month_wraps_year():
    assert amounts.next_month("2023-12") == "2024-01"
    assert amounts.next_month("2024-05") == "2024-06"


def test_amount_without_finite_cents_value_is_rejected():
    with pytest.raises(ValueError, match="out of range"):
        amounts.amount_to_integer(1e307)


def test_huge_integers_are_numbers():
    assert amounts.is_number(10 ** 400)
