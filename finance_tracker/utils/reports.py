from html import escape
from typing import Sequence

from finance_tracker.constants import CATEGORY_LABELS, CHART_LABELS, KIND_META, LIST_LIMIT
from finance_tracker.models import Transaction, TransactionFilter
from finance_tracker.services.analytics import Breakdown, Totals
from finance_tracker.utils.formatting import fmt_date, fmt_money, fmt_percent, fmt_signed_money

BAR_WIDTH = 20
FILTER_TITLES = {
    TransactionFilter.all: "All transactions",
    TransactionFilter.income: "Income",
    TransactionFilter.expense: "Expenses",
}


def report_totals(totals: Totals) -> str:
    """Карточка итогов: доходы, расходы, баланс."""
    return "\n".join([
        "📊 <b>Dashboard</b>",
        f"• 💰 Income: {fmt_money(totals.income_total)}",
        f"• 💸 Expenses: {fmt_money(totals.expense_total)}",
        f"• 🏦 Balance: {fmt_money(totals.balance)}",
    ])


def format_transaction_line(tx: Transaction) -> str:
    meta = KIND_META[tx.kind.value]
    label = CATEGORY_LABELS[tx.kind.value].get(tx.category, tx.category)
    return (
        f"{meta['icon']} {fmt_date(tx.date)} · {escape(tx.description)} "
        f"[{escape(label)}] <b>{fmt_signed_money(tx.amount, meta['sign'])}</b>"
    )


def report_transactions(transactions: Sequence[Transaction], flt: TransactionFilter, limit: int = LIST_LIMIT) -> str:
    title = FILTER_TITLES[TransactionFilter(flt)]
    if not transactions:
        return f"🧾 <b>{title}</b>\n\nNo transactions yet."

    lines = [f"🧾 <b>{title}</b> ({len(transactions)})", ""]
    lines.extend(format_transaction_line(tx) for tx in transactions[:limit])
    hidden = len(transactions) - limit
    if hidden > 0:
        lines.append(f"… and {hidden} more")
    return "\n".join(lines)


def render_bar(start, end, width: int = BAR_WIDTH) -> str:
    """Текстовый сегмент шкалы [0, 100): пробелы до начала, блоки на долю."""
    lo = int(round(float(start) / 100 * width))
    hi = int(round(float(end) / 100 * width))
    return "·" * lo + "█" * max(hi - lo, 0) + "·" * (width - max(hi, lo))


def report_breakdown(breakdown: Breakdown) -> str:
    if breakdown.is_empty:
        return "🥧 <b>Expenses by category</b>\n\nNo expenses yet"

    lines = ["🥧 <b>Expenses by category</b>", ""]
    for seg in breakdown:
        name = CHART_LABELS.get(seg.category, seg.category)
        lines.append(
            f"<code>{render_bar(seg.cumulative_start, seg.cumulative_end)}</code> "
            f"{name}: ${fmt_money(seg.amount)} ({fmt_percent(seg.portion)})"
        )
    lines.append("")
    lines.append(f"Total: ${fmt_money(breakdown.total)}")
    return "\n".join(lines)
