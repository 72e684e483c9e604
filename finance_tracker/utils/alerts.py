"""
Настройка логирования и алерты в Telegram.

`setup_logging()` задаёт формат корневого логгера и, если в настройках
указаны `TELEGRAM_BOT_ALERT` и `TELEGRAM_ALERT_CHAT_ID`, подключает
`TelegramAlertHandler`: записи уровня WARNING и выше (например, отказ
загрузки транзакций или истёкшая сессия) уходят в чаты алертов через
отдельного бота. Без этих настроек обработчик ничего не отправляет.

TELEGRAM_ALERT_CHAT_ID — один или несколько id чатов через запятую,
например "123456789,-1001234567890".
"""
import asyncio
import logging
from typing import List, Optional

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from finance_tracker.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_chat_ids(raw: Optional[str]) -> List[int]:
    if not raw:
        return []
    ids: List[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            logging.getLogger(__name__).warning(f"[ALERT] Ignoring bad chat id {part!r}")
    return ids


class TelegramAlertHandler(logging.Handler):
    """Отправляет записи WARNING+ в чаты алертов.

    Отправка идёт фоновой задачей в текущем event loop; вне loop
    (например, при импорте) запись пропускается.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        chat_ids: Optional[List[int]] = None,
        level: int = logging.WARNING,
    ) -> None:
        super().__init__(level=level)
        self._chat_ids = chat_ids if chat_ids is not None else parse_chat_ids(settings.TELEGRAM_ALERT_CHAT_ID)
        token = token if token is not None else settings.TELEGRAM_BOT_ALERT
        self._bot: Optional[Bot] = Bot(token=token) if token else None
        self._tasks: set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self._bot is not None and bool(self._chat_ids)

    def emit(self, record: logging.LogRecord) -> None:
        if not self.enabled:
            return
        # Не пересылаем собственные ошибки отправки, иначе получится цикл
        if record.name.startswith("aiogram"):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        msg = self.format(record)
        task = loop.create_task(self._send(msg))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, text: str) -> None:
        assert self._bot is not None
        for chat_id in self._chat_ids:
            try:
                await self._bot.send_message(chat_id=chat_id, text=f"🚨 Alert:\n{text}")
            except TelegramAPIError:
                continue


def setup_logging(level: Optional[str] = None) -> None:
    """Настраивает корневой логгер; повторный вызов не дублирует обработчики."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        root.addHandler(stream)

    if not any(isinstance(h, TelegramAlertHandler) for h in root.handlers):
        handler = TelegramAlertHandler()
        if handler.enabled:
            handler.setFormatter(formatter)
            root.addHandler(handler)
