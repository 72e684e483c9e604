from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from finance_tracker.errors import TrackerError
from finance_tracker.models import TransactionFilter
from finance_tracker.routers.common import LOGIN_HINT, render_list, report_error, send_dashboard
from finance_tracker.services import analytics
from finance_tracker.services.workspace import workspaces
from finance_tracker.utils.reports import report_breakdown, report_totals

dashboard_router = Router()


@dashboard_router.message(Command("dashboard"))
async def handle_dashboard(message: Message):
    ws = workspaces.get(message.from_user.id)
    if not ws.gate.is_authenticated:
        await message.answer(LOGIN_HINT, parse_mode="HTML")
        return
    await send_dashboard(message, ws)


@dashboard_router.message(Command("refresh"))
async def handle_refresh(message: Message):
    ws = workspaces.get(message.from_user.id)
    try:
        loaded = await ws.store.load()
    except TrackerError as e:
        await report_error(message, e)
        return
    if not loaded:
        await message.answer("⚠️ Could not load transactions, showing cached data.")
    await send_dashboard(message, ws)


@dashboard_router.message(Command("totals"))
async def handle_totals(message: Message):
    ws = workspaces.get(message.from_user.id)
    await message.answer(report_totals(analytics.totals(ws.store.all())), parse_mode="HTML")


@dashboard_router.message(Command("chart"))
async def handle_chart(message: Message):
    ws = workspaces.get(message.from_user.id)
    await message.answer(report_breakdown(analytics.category_breakdown(ws.store.all())), parse_mode="HTML")


@dashboard_router.message(Command("list"))
async def handle_list(message: Message):
    ws = workspaces.get(message.from_user.id)
    text, kb = render_list(ws, TransactionFilter.all)
    await message.answer(text, reply_markup=kb, parse_mode="HTML")


@dashboard_router.callback_query(F.data.startswith("filter:"))
async def on_filter(cb: CallbackQuery):
    flt = TransactionFilter(cb.data.split(":", 1)[1])
    ws = workspaces.get(cb.from_user.id)
    text, kb = render_list(ws, flt)
    try:
        await cb.message.edit_text(text, reply_markup=kb, parse_mode="HTML")
    except TelegramBadRequest:
        # Повторное нажатие активного фильтра: текст не изменился
        pass
    await cb.answer()
