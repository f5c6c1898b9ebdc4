"""Health Route: liveness probe never bootstraps the budget client.

Invariants:
    - GET /health is 200 with status "OK" before and after initialization
    - initialized flips to true only once an /api call bootstrapped the client
    - timestamp is ISO-8601 UTC with millisecond precision and a Z suffix
"""

import re


async def test_health_reports_uninitialized_without_bootstrapping(client, fake):
    res = await client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "OK"
    assert body["initialized"] is False
    assert body["state"] == "uninitialized"
    assert fake.init_calls == 0


async def test_health_timestamp_format(client):
    res = await client.get("/health")
    assert re.fullmatch(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", res.json()["timestamp"],
    )


async def test_health_reports_initialized_after_first_api_call(client, fake):
    await client.get("/api/accounts")
    res = await client.get("/health")
    assert res.json()["initialized"] is True
    assert res.json()["state"] == "ready"
    assert fake.init_calls == 1


async def test_repeated_health_checks_never_init(client, fake):
    for _ in range(5):
        await client.get("/health")
    assert fake.init_calls == 0
