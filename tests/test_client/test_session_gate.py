import asyncio

import httpx
import pytest

from finance_tracker.errors import SessionExpired
from finance_tracker.services.session_gate import SessionGate

from factories import TOKEN, TX_PATH


def test_request_carries_bearer_token(server, gate):
    resp = asyncio.run(gate.authorized_request("GET", TX_PATH))

    assert resp.status_code == 200
    assert server.requests[-1].headers["Authorization"] == f"Bearer {TOKEN}"


def test_without_token_no_request_is_sent(server, client):
    gate = SessionGate(client=client)

    with pytest.raises(SessionExpired):
        asyncio.run(gate.authorized_request("GET", TX_PATH))
    assert server.requests == []


def test_unauthorized_clears_token(server, gate):
    server.expired = True

    with pytest.raises(SessionExpired):
        asyncio.run(gate.authorized_request("GET", TX_PATH))
    assert gate.token is None
    assert not gate.is_authenticated


def test_other_errors_are_returned_not_raised(server, gate):
    server.fail["GET"] = (503, {"message": "maintenance"})

    resp = asyncio.run(gate.authorized_request("GET", TX_PATH))

    assert resp.status_code == 503
    assert gate.is_authenticated


def test_transport_errors_propagate(server, gate):
    server.network_down = True

    with pytest.raises(httpx.ConnectError):
        asyncio.run(gate.authorized_request("GET", TX_PATH))


def test_injected_client_is_not_closed(client):
    async def scenario():
        async with SessionGate(client=client):
            pass

    asyncio.run(scenario())
    assert not client.is_closed


def test_owned_client_uses_settings():
    gate = SessionGate(base_url="http://api.example", timeout=3.0)

    assert gate.client.base_url.host == "api.example"
    assert gate.client.timeout.read == 3.0
    asyncio.run(gate.aclose())
    assert gate.client.is_closed
