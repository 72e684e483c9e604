from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError


def fmt_money(value) -> str:
    """Форматирование суммы для отображения в боте.

    Используется в итогах, списке операций и легенде диаграммы:
    два знака после точки, пробелы-разделители тысяч.

    Args:
        value: Decimal, число или строка с числом.

    Returns:
        str: Строка вида '1 234.56', либо '—' для пустого значения,
             либо исходное значение, если его не удалось разобрать.
    """
    if value is None or value == "":
        return "—"
    try:
        v = Decimal(str(value).replace(",", "."))
        return f"{v:,.2f}".replace(",", " ")
    except (InvalidOperation, ValueError):
        return str(value)


def fmt_signed_money(value, sign: str) -> str:
    return f"{sign}${fmt_money(value)}"


def fmt_percent(value) -> str:
    return f"{Decimal(value):.1f}%"


def parse_amount(s: str) -> Decimal | None:
    """Парсинг суммы, введённой пользователем в чат.

    Args:
        s (str): Строка с числовым значением (ввод пользователя).

    Returns:
        Decimal | None: Значение, если ввод корректный и > 0, иначе None.
    """
    if not s:
        return None
    t = s.replace(" ", "").replace(",", ".")
    try:
        v = Decimal(t)
        if v.is_finite() and v > 0:
            return v
    except (InvalidOperation, ValueError):
        pass
    return None


def parse_date(s: str, today: date | None = None) -> date | None:
    """Дата из ввода: 'YYYY-MM-DD', 'DD.MM.YYYY' или 'today'/'сегодня'.

    Returns:
        date | None: Разобранная дата, либо None для нераспознанного ввода.
    """
    t = (s or "").strip().lower()
    if t in ("today", "сегодня"):
        return today or date.today()
    for fmt in ("%Y-%m-%d", "%d.%m.%Y"):
        try:
            return datetime.strptime(t, fmt).date()
        except ValueError:
            continue
    return None


def fmt_date(d: date) -> str:
    return d.strftime("%d.%m.%Y")


def normalize_amount_input(value) -> str:
    """Нормализация суммы для предзаполнения формы ('43.00' -> '43')."""
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return str(value)
    s = format(d, "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s or "0"


async def safe_delete(bot: Bot, chat_id: int, message_id: int | None):
    """Удаление служебного сообщения; ошибки Telegram игнорируются."""
    if not message_id:
        return
    try:
        await bot.delete_message(chat_id, message_id)
    except TelegramAPIError:
        pass
