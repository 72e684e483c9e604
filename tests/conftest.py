"""Общие фикстуры: фейковый API транзакций поверх httpx.MockTransport."""
import json

import httpx
import pytest

from finance_tracker.services.auth_service import AuthClient
from finance_tracker.services.session_gate import SessionGate
from finance_tracker.services.transaction_store import TransactionStore

from factories import TOKEN, TX_PATH


class FakeServer:
    """Минимальный сервер транзакций в памяти (формат записей как у MongoDB)."""

    def __init__(self):
        self.records: list[dict] = []
        self.users: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.fail: dict[str, tuple[int, object]] = {}
        self.network_down = False
        self.expired = False
        self._next_id = 1

    def add_record(self, **fields) -> dict:
        record = {"_id": self._new_id(), **fields}
        self.records.append(record)
        return record

    def _new_id(self) -> str:
        value = f"tx{self._next_id}"
        self._next_id += 1
        return value

    @staticmethod
    def _respond(status: int, body) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        body = json.loads(request.content) if request.content else None

        if path == "/api/auth/signup":
            if body["username"] in self.users:
                return httpx.Response(409, json={"message": "User already exists"})
            self.users[body["username"]] = body["password"]
            return httpx.Response(201, json={"ok": True})
        if path == "/api/auth/login":
            if self.users.get(body["username"]) != body["password"]:
                return httpx.Response(401, json={"message": "Invalid credentials"})
            return httpx.Response(200, json={"token": TOKEN})

        if self.expired or request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401, json={"message": "Unauthorized"})

        if request.method in self.fail:
            status, fail_body = self.fail[request.method]
            return self._respond(status, fail_body)

        if path == TX_PATH and request.method == "GET":
            return httpx.Response(200, json=self.records)
        if path == TX_PATH and request.method == "POST":
            record = {"_id": self._new_id(), **body}
            self.records.append(record)
            return httpx.Response(201, json=record)

        tx_id = path.rsplit("/", 1)[-1]
        existing = next((r for r in self.records if r["_id"] == tx_id), None)
        if existing is None:
            return httpx.Response(404, json={"message": "Transaction not found"})
        if request.method == "PUT":
            existing.update(body)
            return httpx.Response(200, json=existing)
        if request.method == "DELETE":
            self.records.remove(existing)
            return httpx.Response(200, json={"message": "Deleted"})
        return httpx.Response(405)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def client(server: FakeServer) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(server.handler), base_url="http://test")


@pytest.fixture
def gate(client: httpx.AsyncClient) -> SessionGate:
    g = SessionGate(client=client)
    g.set_token(TOKEN)
    return g


@pytest.fixture
def store(gate: SessionGate) -> TransactionStore:
    return TransactionStore(gate, path=TX_PATH)


@pytest.fixture
def auth(client: httpx.AsyncClient) -> AuthClient:
    return AuthClient(SessionGate(client=client))
