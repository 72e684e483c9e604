"""Фабрики тестовых черновиков и транзакций."""
from datetime import date
from decimal import Decimal

from finance_tracker.models import Transaction, TransactionDraft, TransactionKind

TOKEN = "test-token"
TX_PATH = "/api/transactions"


def make_draft(**kwargs) -> TransactionDraft:
    base = dict(
        kind=TransactionKind.expense,
        description="Groceries",
        amount=Decimal("12.50"),
        category="food",
        date=date(2024, 1, 15),
    )
    base.update(kwargs)
    return TransactionDraft(**base)


def make_tx(tx_id: str, **kwargs) -> Transaction:
    base = dict(
        id=tx_id,
        kind=TransactionKind.expense,
        description="Item",
        amount=Decimal("10"),
        category="food",
        date=date(2024, 1, 1),
    )
    base.update(kwargs)
    return Transaction(**base)
