"""
Локальный кэш транзакций пользователя.

Хранилище — единственный источник данных для всех производных представлений.
Каждое изменение сначала подтверждается сервером и только потом применяется
к коллекции; оптимистичных вставок и удалений нет.
"""
import asyncio
import logging
from typing import Any, Iterator, Optional

import httpx
from pydantic import ValidationError as SchemaError

from finance_tracker.config import settings
from finance_tracker.errors import FetchError, NotFoundError, PreconditionError, RemoteError
from finance_tracker.models import Transaction, TransactionDraft, TransactionKind, validate_draft
from finance_tracker.schemas import TransactionPayload, parse_record, parse_records
from finance_tracker.services.edit_session import EditSession
from finance_tracker.services.session_gate import SessionGate

logger = logging.getLogger(__name__)


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        data = resp.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return fallback


def _sort_key(tx: Transaction):
    return tx.date


class TransactionStore:
    """Кэш транзакций: порядок по убыванию даты, при равных датах — порядок вставки."""

    def __init__(self, gate: SessionGate, path: str | None = None):
        self._gate = gate
        self._path = (path or settings.TRANSACTIONS_PATH).rstrip("/")
        self._items: list[Transaction] = []
        # Один писатель: load/create/update/remove не перемежаются
        self._lock = asyncio.Lock()
        self.edit_session = EditSession(self)

    # ---------- чтение ----------
    def all(self) -> tuple[Transaction, ...]:
        return tuple(self._items)

    def by_kind(self, kind: TransactionKind) -> tuple[Transaction, ...]:
        kind = TransactionKind(kind)
        return tuple(tx for tx in self._items if tx.kind is kind)

    def get(self, tx_id: str) -> Optional[Transaction]:
        tx_id = str(tx_id)
        for tx in self._items:
            if tx.id == tx_id:
                return tx
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._items))

    def __contains__(self, tx_id: object) -> bool:
        return self.get(str(tx_id)) is not None

    # ---------- изменения ----------
    async def load(self) -> bool:
        """
        Загружает полный список с сервера и заменяет им коллекцию.

        Ошибка сети или разбора не портит текущий кэш: она логируется,
        метод возвращает False. `SessionExpired` пробрасывается.
        """
        async with self._lock:
            try:
                items = await self._fetch_all()
            except FetchError as e:
                logger.warning(f"[STORE] Failed to fetch transactions, keeping {len(self._items)} cached: {e}")
                return False

            self._items = self._dedupe(items)
            self._resort()
            editing_id = self.edit_session.current_id()
            if editing_id is not None and editing_id not in self:
                logger.info(f"[STORE] Edited transaction {editing_id} is gone after reload")
                self.edit_session.cancel()
            logger.info(f"[STORE] Loaded {len(self._items)} transactions")
            return True

    async def create(self, draft: TransactionDraft) -> Transaction:
        draft = validate_draft(draft)
        async with self._lock:
            data = await self._send(
                "POST", self._path, TransactionPayload.from_draft(draft).to_json(),
                fallback="Failed to add transaction",
            )
            created = self._parse(data, "Failed to add transaction")
            if self.get(created.id) is not None:
                # Сервер вернул уже известный id: заменяем, а не дублируем
                self._items = [created if tx.id == created.id else tx for tx in self._items]
            else:
                self._items.append(created)
            self._resort()
            logger.info(f"[STORE] Created transaction {created.id}")
            return created

    async def update(self, tx_id: str, draft: TransactionDraft) -> Transaction:
        tx_id = str(tx_id)
        draft = validate_draft(draft)
        async with self._lock:
            if self.edit_session.current_id() != tx_id:
                raise PreconditionError(f"Transaction {tx_id} is not being edited")
            if self.get(tx_id) is None:
                raise NotFoundError(tx_id)

            data = await self._send(
                "PUT", f"{self._path}/{tx_id}", TransactionPayload.from_draft(draft).to_json(),
                fallback="Failed to update transaction",
            )
            updated = self._parse(data, "Failed to update transaction")
            if updated.id != tx_id:
                logger.warning(f"[STORE] Server answered update of {tx_id} with id {updated.id}, keeping {tx_id}")
                updated = Transaction(
                    id=tx_id,
                    kind=updated.kind,
                    description=updated.description,
                    amount=updated.amount,
                    category=updated.category,
                    date=updated.date,
                )
            self._items = [updated if tx.id == tx_id else tx for tx in self._items]
            self._resort()
            self.edit_session.cancel()
            logger.info(f"[STORE] Updated transaction {tx_id}")
            return updated

    async def remove(self, tx_id: str) -> None:
        tx_id = str(tx_id)
        async with self._lock:
            if self.get(tx_id) is None:
                raise NotFoundError(tx_id)

            await self._send("DELETE", f"{self._path}/{tx_id}", None, fallback="Failed to delete", expect_body=False)
            self._items = [tx for tx in self._items if tx.id != tx_id]
            if self.edit_session.current_id() == tx_id:
                self.edit_session.cancel()
            logger.info(f"[STORE] Removed transaction {tx_id}")

    # ---------- внутреннее ----------
    async def _fetch_all(self) -> list[Transaction]:
        fallback = "Failed to fetch transactions"
        try:
            resp = await self._gate.authorized_request("GET", self._path)
        except httpx.HTTPError as e:
            raise FetchError(None, f"{fallback}: {e}") from e
        if not resp.is_success:
            raise FetchError(resp.status_code, _error_message(resp, fallback))
        try:
            return parse_records(resp.json())
        except (ValueError, SchemaError) as e:
            raise FetchError(resp.status_code, f"{fallback}: malformed response") from e

    async def _send(
        self,
        method: str,
        path: str,
        payload: Any,
        *,
        fallback: str,
        expect_body: bool = True,
    ) -> Any:
        try:
            resp = await self._gate.authorized_request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"[STORE] {method} {path} failed: {e}")
            raise RemoteError(None, fallback) from e

        if not resp.is_success:
            message = _error_message(resp, fallback)
            logger.warning(f"[STORE] {method} {path} -> {resp.status_code}: {message}")
            raise RemoteError(resp.status_code, message)

        if not expect_body:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteError(resp.status_code, f"{fallback}: malformed response") from e

    @staticmethod
    def _parse(data: Any, fallback: str) -> Transaction:
        try:
            return parse_record(data)
        except SchemaError as e:
            raise RemoteError(None, f"{fallback}: malformed response") from e

    @staticmethod
    def _dedupe(items: list[Transaction]) -> list[Transaction]:
        seen: dict[str, int] = {}
        result: list[Transaction] = []
        for tx in items:
            if tx.id in seen:
                # Последняя копия выигрывает, но занимает позицию первой
                result[seen[tx.id]] = tx
                continue
            seen[tx.id] = len(result)
            result.append(tx)
        return result

    def _resort(self) -> None:
        # list.sort стабилен и при reverse=True: равные даты сохраняют порядок вставки
        self._items.sort(key=_sort_key, reverse=True)
