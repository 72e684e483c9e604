from html import escape
from typing import Sequence

from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from finance_tracker.constants import CATEGORY_LABELS, CAT_PAGE_SIZE, KIND_META, LIST_LIMIT
from finance_tracker.models import Transaction, TransactionFilter, TransactionKind, categories_for
from finance_tracker.states.form import FormState
from finance_tracker.utils.formatting import fmt_money


# ================== Рендер карточки ==================
def render_card(st: FormState) -> str:
    m = KIND_META[st.kind]
    labels = CATEGORY_LABELS[st.kind]
    header = "✏️ Update transaction" if st.editing_id else "➕ Add transaction"
    return (
        f"{header}\n{m['icon']} {m['title']}\n\n"
        f"Amount: <b>{escape(fmt_money(st.amount_str))}</b>\n"
        f"Category: <b>{escape(labels.get(st.category, st.category)) if st.category else '—'}</b>\n"
        f"Description: <b>{escape(st.description) if st.description else '—'}</b>\n"
        f"Date: <b>{st.date_iso or 'today'}</b>"
    )


# ================== Клавиатуры ==================
def kb_kind_tabs(st: FormState) -> list[InlineKeyboardButton]:
    def lab(kind: str):
        meta = KIND_META[kind]
        active = "● " if st.kind == kind else ""
        return InlineKeyboardButton(text=f"{active}{meta['title']}", callback_data=f"kind:set:{kind}")
    return [lab("income"), lab("expense")]


def kb_form(st: FormState) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.row(*kb_kind_tabs(st))

    cats = categories_for(TransactionKind(st.kind))
    start = st.cat_page * CAT_PAGE_SIZE
    chunk = cats[start:start + CAT_PAGE_SIZE]
    row_buf = []
    for i, c in enumerate(chunk, 1):
        mark = " ✅" if st.category == c else ""
        row_buf.append(InlineKeyboardButton(text=CATEGORY_LABELS[st.kind][c] + mark, callback_data=f"cat:set:{c}"))
        if i % 2 == 0:
            kb.row(*row_buf); row_buf = []
    if row_buf:
        kb.row(*row_buf)

    nav = []
    if st.cat_page > 0:
        nav.append(InlineKeyboardButton(text="◀️", callback_data=f"cat:page:{st.cat_page-1}"))
    if start + CAT_PAGE_SIZE < len(cats):
        nav.append(InlineKeyboardButton(text="▶️", callback_data=f"cat:page:{st.cat_page+1}"))
    if nav:
        kb.row(*nav)

    kb.row(
        InlineKeyboardButton(text="💲 Amount", callback_data="ask:amount"),
        InlineKeyboardButton(text="📝 Description", callback_data="ask:description"),
        InlineKeyboardButton(text="📅 Date", callback_data="ask:date"),
    )
    submit = "✅ Update" if st.editing_id else "✅ Add"
    kb.row(
        InlineKeyboardButton(text=submit, callback_data="submit"),
        InlineKeyboardButton(text="✖️ Cancel", callback_data="cancel"),
    )
    return kb.as_markup()


def kb_filters(active: TransactionFilter) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    buttons = []
    for flt in TransactionFilter:
        mark = "● " if flt is active else ""
        buttons.append(InlineKeyboardButton(text=f"{mark}{flt.value.title()}", callback_data=f"filter:{flt.value}"))
    kb.row(*buttons)
    return kb.as_markup()


def kb_transaction_actions(transactions: Sequence[Transaction], active: TransactionFilter, limit: int = LIST_LIMIT) -> InlineKeyboardMarkup:
    """Фильтры + по строке edit/delete на каждую показанную операцию."""
    kb = InlineKeyboardBuilder()
    kb.attach(InlineKeyboardBuilder.from_markup(kb_filters(active)))
    for tx in transactions[:limit]:
        caption = f"{tx.description[:18]} · {fmt_money(tx.amount)}"
        kb.row(
            InlineKeyboardButton(text=f"✏️ {caption}", callback_data=f"tx:edit:{tx.id}"),
            InlineKeyboardButton(text="🗑", callback_data=f"tx:del:{TransactionFilter(active).value}:{tx.id}"),
        )
    return kb.as_markup()


def parse_delete_callback(data: str) -> tuple[TransactionFilter, str]:
    """'tx:del:<filter>:<id>' -> (фильтр списка, id транзакции)."""
    _, _, flt, tx_id = data.split(":", 3)
    return TransactionFilter(flt), tx_id
