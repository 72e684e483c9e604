from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from finance_tracker.errors import TrackerError, ValidationError
from finance_tracker.keyboards.form import kb_form, parse_delete_callback, render_card
from finance_tracker.routers.common import LOGIN_HINT, render_dashboard, render_list, report_error
from finance_tracker.services.workspace import workspaces
from finance_tracker.states.form import FormState, Flow
from finance_tracker.utils.formatting import parse_amount, parse_date, safe_delete

tx_router = Router()

PROMPTS = {
    "amount": (Flow.ask_amount, "💲 Send the amount, e.g. 12.50"),
    "description": (Flow.ask_description, "📝 Send a short description"),
    "date": (Flow.ask_date, "📅 Send the date as YYYY-MM-DD, DD.MM.YYYY or 'today'"),
}


async def _load_form(state: FSMContext) -> FormState:
    data = await state.get_data()
    return FormState(**data["st"])


async def _refresh_card(m: Message, st: FormState):
    await m.bot.edit_message_text(
        chat_id=m.chat.id, message_id=st.main_msg_id,
        text=render_card(st), reply_markup=kb_form(st), parse_mode="HTML",
    )


# ================== Открытие формы ==================
@tx_router.message(Command("add"))
async def start_add(m: Message, state: FSMContext):
    ws = workspaces.get(m.from_user.id)
    if not ws.gate.is_authenticated:
        await m.answer(LOGIN_HINT, parse_mode="HTML")
        return
    # Новая форма выходит из режима редактирования
    ws.store.edit_session.cancel()
    st = FormState()
    await state.set_state(Flow.form)
    msg = await m.answer(render_card(st), reply_markup=kb_form(st), parse_mode="HTML")
    st.main_msg_id = msg.message_id
    await state.update_data(st=st.__dict__)


@tx_router.callback_query(F.data.startswith("tx:edit:"))
async def start_edit(cb: CallbackQuery, state: FSMContext):
    tx_id = cb.data.split(":", 2)[2]
    ws = workspaces.get(cb.from_user.id)
    try:
        draft = ws.store.edit_session.begin(tx_id)
    except TrackerError as e:
        await report_error(cb, e)
        return

    st = FormState.from_draft(draft, editing_id=tx_id)
    await state.set_state(Flow.form)
    msg = await cb.message.answer(render_card(st), reply_markup=kb_form(st), parse_mode="HTML")
    st.main_msg_id = msg.message_id
    await state.update_data(st=st.__dict__)
    await cb.answer("Editing")


@tx_router.callback_query(F.data.startswith("tx:del:"))
async def delete_tx(cb: CallbackQuery):
    flt, tx_id = parse_delete_callback(cb.data)
    ws = workspaces.get(cb.from_user.id)
    try:
        await ws.store.remove(tx_id)
    except TrackerError as e:
        await report_error(cb, e)
        return

    text, kb = render_list(ws, flt)
    await cb.message.edit_text(text, reply_markup=kb, parse_mode="HTML")
    await cb.answer("Deleted")


@tx_router.message(Command("cancel"))
async def cancel_cmd(m: Message, state: FSMContext):
    workspaces.get(m.from_user.id).store.edit_session.cancel()
    await state.clear()
    await m.answer("✖️ Cancelled")


# ================== Поля формы ==================
@tx_router.callback_query(Flow.form, F.data.startswith("kind:set:"))
async def kind_set(cb: CallbackQuery, state: FSMContext):
    st = await _load_form(state)
    st.set_kind(cb.data.split(":", 2)[2])
    await state.update_data(st=st.__dict__)
    await cb.message.edit_text(render_card(st), reply_markup=kb_form(st), parse_mode="HTML")
    await cb.answer()


@tx_router.callback_query(Flow.form, F.data.startswith("cat:set:"))
async def cat_set(cb: CallbackQuery, state: FSMContext):
    st = await _load_form(state)
    st.category = cb.data.split(":", 2)[2]
    await state.update_data(st=st.__dict__)
    await cb.message.edit_text(render_card(st), reply_markup=kb_form(st), parse_mode="HTML")
    await cb.answer()


@tx_router.callback_query(Flow.form, F.data.startswith("cat:page:"))
async def cat_page(cb: CallbackQuery, state: FSMContext):
    st = await _load_form(state)
    st.cat_page = int(cb.data.split(":")[2])
    await state.update_data(st=st.__dict__)
    await cb.message.edit_reply_markup(reply_markup=kb_form(st))
    await cb.answer()


@tx_router.callback_query(Flow.form, F.data.startswith("ask:"))
async def ask_field(cb: CallbackQuery, state: FSMContext):
    target, prompt = PROMPTS[cb.data.split(":", 1)[1]]
    st = await _load_form(state)
    msg = await cb.message.answer(prompt)
    st.prompt_msg_id = msg.message_id
    await state.update_data(st=st.__dict__)
    await state.set_state(target)
    await cb.answer()


async def _apply_input(m: Message, state: FSMContext, st: FormState):
    await safe_delete(m.bot, m.chat.id, st.prompt_msg_id)
    await safe_delete(m.bot, m.chat.id, m.message_id)
    st.prompt_msg_id = None
    await state.update_data(st=st.__dict__)
    await state.set_state(Flow.form)
    await _refresh_card(m, st)


@tx_router.message(Flow.ask_amount, F.text)
async def on_amount(m: Message, state: FSMContext):
    amount = parse_amount(m.text)
    if amount is None:
        await m.answer("Amount must be a number greater than zero")
        return
    st = await _load_form(state)
    st.amount_str = m.text.strip()
    await _apply_input(m, state, st)


@tx_router.message(Flow.ask_description, F.text)
async def on_description(m: Message, state: FSMContext):
    text = m.text.strip()
    if not text:
        await m.answer("Description is required")
        return
    st = await _load_form(state)
    st.description = text[:200]
    await _apply_input(m, state, st)


@tx_router.message(Flow.ask_date, F.text)
async def on_date(m: Message, state: FSMContext):
    d = parse_date(m.text)
    if d is None:
        await m.answer("Unrecognised date, try YYYY-MM-DD")
        return
    st = await _load_form(state)
    st.date_iso = d.isoformat()
    await _apply_input(m, state, st)


# ================== Сохранение ==================
@tx_router.callback_query(Flow.form, F.data == "submit")
async def submit(cb: CallbackQuery, state: FSMContext):
    st = await _load_form(state)
    ws = workspaces.get(cb.from_user.id)
    if st.edit_target_lost(ws.store.edit_session.current_id()):
        # Запись удалили или начали править другую: эта форма больше не действует
        await state.clear()
        await cb.message.edit_text("⚠️ This transaction is no longer being edited. Open it again from /list.")
        await cb.answer()
        return

    draft = st.to_draft()
    try:
        if st.editing_id:
            await ws.store.update(st.editing_id, draft)
        else:
            await ws.store.create(draft)
    except ValidationError as e:
        await cb.answer(f"⚠️ {e.message}", show_alert=True)
        return
    except TrackerError as e:
        # Форма и режим редактирования остаются: можно повторить
        await report_error(cb, e)
        return

    await state.clear()
    await cb.message.edit_text("✅ Saved\n\n" + render_dashboard(ws), parse_mode="HTML")
    await cb.answer("Saved")


@tx_router.callback_query(F.data == "cancel")
async def cancel(cb: CallbackQuery, state: FSMContext):
    workspaces.get(cb.from_user.id).store.edit_session.cancel()
    await state.clear()
    await cb.message.edit_text("✖️ Cancelled")
    await cb.answer()
