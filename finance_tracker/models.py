from __future__ import annotations
import enum
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, InvalidOperation

from finance_tracker.constants import CATEGORIES
from finance_tracker.errors import ValidationError


class TransactionKind(str, enum.Enum):
    income = "income"
    expense = "expense"

    @classmethod
    def from_wire(cls, raw) -> "TransactionKind":
        # Всё, что не распознано как доход, считается расходом
        if isinstance(raw, str) and raw.strip().lower() == "income":
            return cls.income
        return cls.expense

    def to_wire(self) -> str:
        return "Income" if self is TransactionKind.income else "Expense"


class TransactionFilter(str, enum.Enum):
    all = "all"
    income = "income"
    expense = "expense"

    def matches(self, kind: TransactionKind) -> bool:
        return self is TransactionFilter.all or self.value == kind.value


def categories_for(kind: TransactionKind) -> tuple[str, ...]:
    """Словарь допустимых категорий для типа операции (в объявленном порядке)."""
    return CATEGORIES[TransactionKind(kind).value]


@dataclass(frozen=True)
class Transaction:
    """Транзакция, подтверждённая сервером (id выдаёт только сервер)."""
    id: str
    kind: TransactionKind
    description: str
    amount: Decimal
    category: str
    date: date

    def to_draft(self) -> "TransactionDraft":
        return TransactionDraft(
            kind=self.kind,
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date,
        )


@dataclass
class TransactionDraft:
    """Поля, которые вводит пользователь: без id.

    Используется как вход для create/update и как предзаполнение формы
    при начале редактирования.
    """
    kind: TransactionKind = TransactionKind.expense
    description: str = ""
    amount: Decimal | str | float | None = None
    category: str | None = None
    date: date | None = None

    def with_kind(self, kind: TransactionKind) -> "TransactionDraft":
        """Смена типа сбрасывает категорию из чужого словаря."""
        kind = TransactionKind(kind)
        category = self.category if self.category in categories_for(kind) else None
        return replace(self, kind=kind, category=category)


def _coerce_amount(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, str):
            value = value.replace(" ", "").replace(",", ".")
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def validate_draft(draft: TransactionDraft) -> TransactionDraft:
    """Проверяет черновик и возвращает нормализованную копию.

    Raises:
        ValidationError: пустое описание, сумма не число или <= 0,
            категория отсутствует или не из словаря своего типа, нет даты.
    """
    try:
        kind = TransactionKind(draft.kind)
    except ValueError:
        raise ValidationError("kind", f"Unknown transaction type: {draft.kind!r}")

    description = (draft.description or "").strip()
    if not description:
        raise ValidationError("description", "Description is required")

    amount = _coerce_amount(draft.amount)
    if amount is None or not amount.is_finite():
        raise ValidationError("amount", "Amount must be a number")
    if amount <= 0:
        raise ValidationError("amount", "Amount must be greater than zero")

    if not draft.category:
        raise ValidationError("category", "Category is required")
    if draft.category not in categories_for(kind):
        raise ValidationError(
            "category", f"Category {draft.category!r} is not valid for {kind.value}"
        )

    if not isinstance(draft.date, date):
        raise ValidationError("date", "Date is required")

    return TransactionDraft(
        kind=kind,
        description=description,
        amount=amount,
        category=draft.category,
        date=draft.date,
    )
