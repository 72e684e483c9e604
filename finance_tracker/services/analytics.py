"""
Производные представления над снимком хранилища транзакций.

Все функции чистые: принимают последовательность транзакций, ничего не
меняют и при одинаковом входе дают одинаковый результат. Суммы считаются
в Decimal, поэтому итоги не накапливают ошибку округления.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from finance_tracker.models import Transaction, TransactionFilter, TransactionKind, categories_for

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Totals:
    income_total: Decimal = ZERO
    expense_total: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.income_total - self.expense_total


@dataclass(frozen=True)
class Segment:
    """Доля одной категории в диапазоне [0, 100) для круговой диаграммы."""
    category: str
    amount: Decimal
    portion: Decimal
    cumulative_start: Decimal
    cumulative_end: Decimal


@dataclass(frozen=True)
class Breakdown:
    total: Decimal
    segments: Tuple[Segment, ...] = ()

    @classmethod
    def empty(cls) -> "Breakdown":
        """Расходов ещё нет: отдельное состояние, а не пустая разбивка."""
        return cls(total=ZERO, segments=())

    @property
    def is_empty(self) -> bool:
        return self.total == ZERO

    def __iter__(self):
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


@dataclass(frozen=True)
class DashboardView:
    totals: Totals
    transactions: Tuple[Transaction, ...]
    breakdown: Breakdown
    filter: TransactionFilter = TransactionFilter.all


def totals(transactions: Iterable[Transaction]) -> Totals:
    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.kind is TransactionKind.income:
            income += tx.amount
        else:
            expense += tx.amount
    return Totals(income_total=income, expense_total=expense)


def filtered_sorted(
    transactions: Iterable[Transaction],
    flt: TransactionFilter = TransactionFilter.all,
) -> Tuple[Transaction, ...]:
    """Подмножество по типу, по убыванию даты; при равных датах — исходный порядок."""
    flt = TransactionFilter(flt)
    selected = [tx for tx in transactions if flt.matches(tx.kind)]
    return tuple(sorted(selected, key=lambda tx: tx.date, reverse=True))


def category_breakdown(transactions: Iterable[Transaction]) -> Breakdown:
    sums: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for tx in transactions:
        if tx.kind is TransactionKind.expense:
            sums[tx.category] += tx.amount

    vocabulary = categories_for(TransactionKind.expense)
    total = sum((sums[c] for c in vocabulary), ZERO)
    if total <= ZERO:
        return Breakdown.empty()

    segments: List[Segment] = []
    running = ZERO
    start = ZERO
    for category in vocabulary:
        value = sums[category]
        if value <= ZERO:
            continue
        running += value
        # Границы считаем от накопленной суммы: последняя доля закончится ровно на 100
        end = running * HUNDRED / total
        segments.append(Segment(
            category=category,
            amount=value,
            portion=end - start,
            cumulative_start=start,
            cumulative_end=end,
        ))
        start = end

    return Breakdown(total=total, segments=tuple(segments))


def dashboard(
    transactions: Iterable[Transaction],
    flt: TransactionFilter = TransactionFilter.all,
) -> DashboardView:
    snapshot = tuple(transactions)
    return DashboardView(
        totals=totals(snapshot),
        transactions=filtered_sorted(snapshot, flt),
        breakdown=category_breakdown(snapshot),
        filter=TransactionFilter(flt),
    )
