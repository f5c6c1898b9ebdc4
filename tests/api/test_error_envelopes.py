"""Error Envelopes: every failure answers a flat JSON {"error": ...} body.

Invariants:
    - Unknown paths and unsupported methods answer 404 {"error", "path", "method"},
      with the query string kept in path
    - Gateway errors are logged with their category, severity and request path
    - A client operation failure answers 500 with its message verbatim
    - Unexpected faults answer 500 {"error": "Internal server error"}
"""

import logging

import pytest

from budget_gateway.core.errors import BudgetClientError


async def test_unknown_path_is_404_envelope(client, fake):
    res = await client.get("/api/nope")
    assert res.status_code == 404
    assert res.json() == {
        "error": "Endpoint not found", "path": "/api/nope", "method": "GET",
    }
    assert fake.init_calls == 0


async def test_unknown_path_echoes_query_string(client):
    res = await client.get("/api/nope?month=2024-05&x=1")
    assert res.status_code == 404
    assert res.json()["path"] == "/api/nope?month=2024-05&x=1"


async def test_unsupported_method_is_404_envelope(client):
    res = await client.patch("/api/accounts")
    assert res.status_code == 404
    assert res.json() == {
        "error": "Endpoint not found", "path": "/api/accounts", "method": "PATCH",
    }


async def test_client_error_message_forwarded_verbatim(client, fake):
    res = await client.get("/api/accounts/missing/balance")
    assert res.status_code == 500
    assert res.json() == {"error": "Account not found: missing"}


async def test_client_exception_without_message_uses_type_name(client, fake):
    fake.fail_with["get_payees"] = KeyError()
    res = await client.get("/api/payees")
    assert res.status_code == 500
    assert res.json() == {"error": "KeyError"}


async def test_failed_operation_leaves_client_ready(client, fake, guard):
    fake.fail_with["get_rules"] = BudgetClientError("no budget file loaded")
    assert (await client.get("/api/rules")).status_code == 500

    del fake.fail_with["get_rules"]
    res = await client.get("/api/rules")

    assert res.status_code == 200
    assert guard.is_ready
    assert fake.init_calls == 1


@pytest.fixture
def broken_route():
    """Temporarily mounts a route that raises outside the forwarder."""
    from budget_gateway.main import app

    @app.get("/api/_boom")
    async def boom():
        raise ZeroDivisionError("internal detail")

    yield
    app.router.routes[:] = [
        r for r in app.router.routes if getattr(r, "path", None) != "/api/_boom"
    ]


async def test_unhandled_exception_is_generic_500(client, broken_route):
    res = await client.get("/api/_boom")
    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


async def test_gateway_error_logged_with_category_and_context(client, caplog):
    with caplog.at_level(logging.WARNING, logger="budget_gateway.api.error_handlers"):
        res = await client.post("/api/accounts", json={"initialBalance": 100})

    assert res.status_code == 400
    [record] = [r for r in caplog.records if r.getMessage().startswith("GatewayError")]
    assert record.error_category == "validation"
    assert record.severity == "warning"
    assert record.path == "/api/accounts"
    assert record.method == "POST"
    assert record.status_code == 400


async def test_client_operation_failure_logged_with_operation(client, fake, caplog):
    fake.fail_with["get_payees"] = BudgetClientError("no budget file loaded")
    with caplog.at_level(logging.ERROR, logger="budget_gateway.api.error_handlers"):
        await client.get("/api/payees")

    [record] = [r for r in caplog.records if r.getMessage().startswith("GatewayError")]
    assert record.error_category == "external_client"
    assert record.severity == "error"
    assert record.operation == "getting payees"
