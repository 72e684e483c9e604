from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from finance_tracker.errors import NotFoundError
from finance_tracker.models import TransactionDraft

if TYPE_CHECKING:
    from finance_tracker.services.transaction_store import TransactionStore

logger = logging.getLogger(__name__)


class EditSession:
    """Слот редактирования: не больше одной транзакции одновременно."""

    def __init__(self, store: TransactionStore):
        self._store = store
        self._editing_id: Optional[str] = None

    def begin(self, tx_id: str) -> TransactionDraft:
        """
        Начинает редактирование и возвращает значения для предзаполнения формы.
        Повторный вызов просто переключает цель (последний вызов выигрывает).
        """
        tx = self._store.get(tx_id)
        if tx is None:
            raise NotFoundError(tx_id)
        if self._editing_id is not None and self._editing_id != tx.id:
            logger.debug(f"[EDIT] switching edit target {self._editing_id} -> {tx.id}")
        self._editing_id = tx.id
        return tx.to_draft()

    def cancel(self) -> None:
        self._editing_id = None

    def is_active(self) -> bool:
        return self._editing_id is not None

    def current_id(self) -> Optional[str]:
        return self._editing_id
