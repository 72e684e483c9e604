from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from finance_tracker.errors import TrackerError
from finance_tracker.routers.common import LOGIN_HINT, report_error, send_dashboard
from finance_tracker.services.workspace import Workspace, workspaces
from finance_tracker.utils.formatting import safe_delete

auth_router = Router()


async def _after_login(m: Message, ws: Workspace, greeting: str) -> None:
    # Сообщение с паролем в чате не оставляем
    await safe_delete(m.bot, m.chat.id, m.message_id)
    loaded = await ws.store.load()
    await m.answer(greeting)
    if not loaded:
        await m.answer("⚠️ Could not load transactions, showing cached data. Try /refresh.")
    await send_dashboard(m, ws)


@auth_router.message(CommandStart())
async def start(m: Message, state: FSMContext):
    await state.clear()
    ws = workspaces.get(m.from_user.id)
    if not ws.gate.is_authenticated:
        await m.answer(LOGIN_HINT, parse_mode="HTML")
        return
    await send_dashboard(m, ws)


@auth_router.message(Command("login"))
async def login(m: Message, command: CommandObject, state: FSMContext):
    args = (command.args or "").split()
    if len(args) != 2:
        await m.answer("Usage: /login &lt;user&gt; &lt;password&gt;", parse_mode="HTML")
        return
    await state.clear()
    ws = workspaces.get(m.from_user.id)
    try:
        await ws.auth.login(args[0], args[1])
        await _after_login(m, ws, f"👋 Welcome back, {args[0]}!")
    except TrackerError as e:
        await report_error(m, e)


@auth_router.message(Command("signup"))
async def signup(m: Message, command: CommandObject, state: FSMContext):
    args = (command.args or "").split()
    if len(args) != 3:
        await m.answer("Usage: /signup &lt;user&gt; &lt;password&gt; &lt;confirm&gt;", parse_mode="HTML")
        return
    await state.clear()
    ws = workspaces.get(m.from_user.id)
    try:
        await ws.auth.register(args[0], args[1], args[2])
        await _after_login(m, ws, f"🎉 Account {args[0]} created")
    except TrackerError as e:
        await report_error(m, e)


@auth_router.message(Command("guest"))
async def guest(m: Message, state: FSMContext):
    await state.clear()
    ws = workspaces.get(m.from_user.id)
    try:
        await ws.auth.guest()
        await _after_login(m, ws, "👤 Signed in as a guest")
    except TrackerError as e:
        await report_error(m, e)


@auth_router.message(Command("logout"))
async def logout(m: Message, state: FSMContext):
    await state.clear()
    workspaces.get(m.from_user.id).reset()
    await m.answer("👋 Logged out.\n\n" + LOGIN_HINT, parse_mode="HTML")
