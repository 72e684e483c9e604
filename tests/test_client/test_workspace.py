import asyncio

from finance_tracker.services.session_gate import SessionGate
from finance_tracker.services.workspace import Workspace, WorkspaceRegistry

from factories import TOKEN


def test_registry_keeps_one_workspace_per_user(client):
    registry = WorkspaceRegistry(factory=lambda: Workspace.create(SessionGate(client=client)))

    first = registry.get(1)

    assert registry.get(1) is first
    assert registry.get(2) is not first
    assert 1 in registry


def test_reset_drops_token_and_cache(server, client):
    server.add_record(type="Expense", description="Tea", amount=3, category="food", date="2024-01-01")
    ws = Workspace.create(SessionGate(client=client))
    ws.gate.set_token(TOKEN)
    asyncio.run(ws.store.load())
    assert len(ws.store) == 1

    ws.reset()

    assert not ws.gate.is_authenticated
    assert len(ws.store) == 0


def test_aclose_empties_registry(client):
    registry = WorkspaceRegistry(factory=lambda: Workspace.create(SessionGate(client=client)))
    registry.get(1)

    asyncio.run(registry.aclose())

    assert 1 not in registry
    assert not client.is_closed
