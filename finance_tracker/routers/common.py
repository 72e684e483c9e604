import logging

from aiogram.types import CallbackQuery, Message

from finance_tracker.errors import SessionExpired, TrackerError
from finance_tracker.keyboards.form import kb_transaction_actions
from finance_tracker.models import TransactionFilter
from finance_tracker.services import analytics
from finance_tracker.services.workspace import Workspace
from finance_tracker.utils.reports import report_breakdown, report_totals, report_transactions

logger = logging.getLogger(__name__)

LOGIN_HINT = (
    "🔐 Please sign in:\n"
    "/login &lt;user&gt; &lt;password&gt;\n"
    "/signup &lt;user&gt; &lt;password&gt; &lt;confirm&gt;\n"
    "/guest — try it with a temporary account"
)


async def report_error(target: Message | CallbackQuery, err: TrackerError) -> None:
    """Показывает ошибку ядра; истёкшая сессия отправляет на повторный вход."""
    if isinstance(err, SessionExpired):
        logger.info(f"[BOT] session expired for user {target.from_user.id}")
        text = "🔒 Session expired. Please /login again."
    else:
        text = f"❌ {err}"

    if isinstance(target, CallbackQuery):
        await target.answer(text, show_alert=True)
    else:
        await target.answer(text)


def render_dashboard(ws: Workspace) -> str:
    view = analytics.dashboard(ws.store.all())
    return "\n\n".join([report_totals(view.totals), report_breakdown(view.breakdown)])


def render_list(ws: Workspace, flt: TransactionFilter):
    items = analytics.filtered_sorted(ws.store.all(), flt)
    return report_transactions(items, flt), kb_transaction_actions(items, flt)


async def send_dashboard(message: Message, ws: Workspace) -> None:
    await message.answer(render_dashboard(ws), parse_mode="HTML")
