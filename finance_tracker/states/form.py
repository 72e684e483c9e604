from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from aiogram.fsm.state import StatesGroup, State

from finance_tracker.models import TransactionDraft, TransactionKind, categories_for
from finance_tracker.utils.formatting import normalize_amount_input, parse_amount


@dataclass
class FormState:
    """UI-снимок формы транзакции (живёт в FSM storage, поэтому только простые типы)."""
    main_msg_id: int | None = None
    prompt_msg_id: int | None = None
    kind: str = "expense"                 # income | expense
    category: str | None = None
    amount_str: str = ""
    description: str = ""
    date_iso: str | None = None           # None = сегодня
    editing_id: str | None = None         # None = режим создания
    cat_page: int = 0

    def set_kind(self, kind: str) -> None:
        # Категория из словаря другого типа становится недействительной
        self.kind = TransactionKind(kind).value
        if self.category not in categories_for(TransactionKind(self.kind)):
            self.category = None
        self.cat_page = 0

    def to_draft(self, today: date | None = None) -> TransactionDraft:
        amount: Decimal | str | None = parse_amount(self.amount_str) or self.amount_str or None
        return TransactionDraft(
            kind=TransactionKind(self.kind),
            description=self.description,
            amount=amount,
            category=self.category,
            date=date.fromisoformat(self.date_iso) if self.date_iso else (today or date.today()),
        )

    def edit_target_lost(self, current_id: str | None) -> bool:
        """Форма редактирования, чья запись уже не в сеансе правки."""
        return self.editing_id is not None and self.editing_id != current_id

    @classmethod
    def from_draft(cls, draft: TransactionDraft, editing_id: str | None = None) -> "FormState":
        return cls(
            kind=TransactionKind(draft.kind).value,
            category=draft.category,
            amount_str=normalize_amount_input(draft.amount) if draft.amount is not None else "",
            description=draft.description,
            date_iso=draft.date.isoformat() if draft.date else None,
            editing_id=editing_id,
        )


class Flow(StatesGroup):
    """Стадии сценария формы ввода."""
    form = State()
    ask_amount = State()
    ask_description = State()
    ask_date = State()
