import asyncio
from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.errors import NotFoundError, PreconditionError
from finance_tracker.models import TransactionDraft, TransactionKind


def _load_two(server, store):
    server.add_record(type="Income", description="Salary", amount=2000, category="salary", date="2024-03-01")
    server.add_record(type="Expense", description="Taxi", amount="15.40", category="transport", date="2024-03-02")
    asyncio.run(store.load())
    return {tx.description: tx for tx in store.all()}


def test_begin_returns_prefill(server, store):
    txs = _load_two(server, store)
    session = store.edit_session

    draft = session.begin(txs["Taxi"].id)

    assert session.is_active()
    assert session.current_id() == txs["Taxi"].id
    assert draft.kind is TransactionKind.expense
    assert draft.category == "transport"
    assert draft.description == "Taxi"
    assert draft.amount == Decimal("15.40")
    assert draft.date == date(2024, 3, 2)


def test_begin_unknown_id(store):
    with pytest.raises(NotFoundError):
        store.edit_session.begin("nope")
    assert not store.edit_session.is_active()


def test_not_found_is_a_precondition_error():
    assert issubclass(NotFoundError, PreconditionError)


def test_begin_again_switches_target(server, store):
    txs = _load_two(server, store)
    session = store.edit_session

    session.begin(txs["Taxi"].id)
    session.begin(txs["Salary"].id)

    assert session.current_id() == txs["Salary"].id


def test_cancel_is_idempotent(server, store):
    txs = _load_two(server, store)
    session = store.edit_session
    session.begin(txs["Taxi"].id)

    session.cancel()
    session.cancel()

    assert not session.is_active()
    assert session.current_id() is None


def test_switching_kind_drops_foreign_category(server, store):
    txs = _load_two(server, store)
    draft = store.edit_session.begin(txs["Taxi"].id)

    as_income = draft.with_kind(TransactionKind.income)
    back = as_income.with_kind(TransactionKind.expense)

    assert as_income.kind is TransactionKind.income
    assert as_income.category is None
    assert back.category is None


def test_switching_kind_keeps_shared_category():
    # "other" есть в обоих словарях и переживает смену типа
    draft = TransactionDraft(kind=TransactionKind.expense, category="other")

    assert draft.with_kind("income").category == "other"
