"""Amount Utilities: decimal amount <-> integer cents, no client involved.

Invariants:
    - amount-to-integer rounds half up: 12.34 -> 1234, 0.125 -> 13
    - integer-to-amount divides by 100: 1234 -> 12.34
    - Non-numbers (strings, booleans, null, missing) answer 400
    - Never bootstraps the budget client
"""

import pytest


@pytest.mark.parametrize("amount,expected", [
    (12.34, 1234),
    (0, 0),
    (-5.5, -550),
    (0.125, 13),
    (100, 10000),
])
async def test_amount_to_integer(client, fake, amount, expected):
    res = await client.post("/api/utils/amount-to-integer", json={"amount": amount})
    assert res.status_code == 200
    assert res.json() == {"amount": expected}
    assert fake.init_calls == 0


@pytest.mark.parametrize("value,expected", [
    (1234, 12.34),
    (0, 0),
    (-550, -5.5),
])
async def test_integer_to_amount(client, value, expected):
    res = await client.post("/api/utils/integer-to-amount", json={"amount": value})
    assert res.status_code == 200
    assert res.json() == {"amount": expected}


@pytest.mark.parametrize("body", [
    {"amount": "12.34"},
    {"amount": True},
    {"amount": None},
    {},
])
async def test_non_numeric_amount_is_400(client, fake, body):
    res = await client.post("/api/utils/amount-to-integer", json=body)
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid amount: must be a number"}
    assert fake.init_calls == 0


async def test_missing_body_is_400(client):
    res = await client.post("/api/utils/integer-to-amount")
    assert res.status_code == 400


@pytest.mark.parametrize("amount", [12.34, -5.5, 0.01, 1999.99, 0, 100])
async def test_amount_round_trips_through_cents(client, amount):
    cents = await client.post("/api/utils/amount-to-integer", json={"amount": amount})
    back = await client.post(
        "/api/utils/integer-to-amount", json={"amount": cents.json()["amount"]},
    )
    assert back.json() == {"amount": amount}


@pytest.mark.parametrize("body", [{"amount": "1234"}, {"amount": False}, {"amount": [1]}])
async def test_integer_to_amount_rejects_non_numbers(client, fake, body):
    res = await client.post("/api/utils/integer-to-amount", json=body)
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid amount: must be a number"}
    assert fake.init_calls == 0


async def test_amount_too_large_for_cents_is_400(client):
    res = await client.post("/api/utils/amount-to-integer", json={"amount": 1e307})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid amount: out of range"}


async def test_integer_too_large_for_float_is_400(client):
    res = await client.post("/api/utils/integer-to-amount", json={"amount": 10 ** 400})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid amount: out of range"}
