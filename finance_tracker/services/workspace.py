from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict

from finance_tracker.services.auth_service import AuthClient
from finance_tracker.services.session_gate import SessionGate
from finance_tracker.services.transaction_store import TransactionStore


@dataclass
class Workspace:
    """Набор объектов одного пользователя бота: шлюз, вход и кэш транзакций."""
    gate: SessionGate
    auth: AuthClient
    store: TransactionStore

    @classmethod
    def create(cls, gate: SessionGate | None = None) -> "Workspace":
        gate = gate or SessionGate()
        return cls(gate=gate, auth=AuthClient(gate), store=TransactionStore(gate))

    def reset(self) -> None:
        """Выход: сбрасываем токен и локальный кэш."""
        self.auth.logout()
        self.store = TransactionStore(self.gate)


@dataclass
class WorkspaceRegistry:
    factory: Callable[[], Workspace] = Workspace.create
    _items: Dict[int, Workspace] = field(default_factory=dict)

    def get(self, user_id: int) -> Workspace:
        ws = self._items.get(user_id)
        if ws is None:
            ws = self.factory()
            self._items[user_id] = ws
        return ws

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._items

    async def aclose(self) -> None:
        for ws in self._items.values():
            await ws.gate.aclose()
        self._items.clear()


workspaces = WorkspaceRegistry()
