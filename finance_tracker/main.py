import asyncio
import logging

from aiogram import Bot, Dispatcher

from finance_tracker.config import settings
from finance_tracker.routers.auth_router import auth_router
from finance_tracker.routers.dashboard_router import dashboard_router
from finance_tracker.routers.transactions_router import tx_router
from finance_tracker.services.workspace import workspaces
from finance_tracker.utils.alerts import setup_logging

logger = logging.getLogger(__name__)


def build_dispatcher() -> Dispatcher:
    dp = Dispatcher()
    # Порядок важен: команды входа работают из любого состояния формы
    dp.include_router(router=auth_router)
    dp.include_router(router=dashboard_router)
    dp.include_router(router=tx_router)
    return dp


async def main() -> None:
    """Точка входа бота finance_tracker.

    Последовательно выполняет:
      1. Настройку логирования (`setup_logging`).
      2. Создание бота с токеном из настроек.
      3. Подключение роутеров: вход, дашборд, форма транзакций.
      4. Запуск цикла обработки сообщений (`start_polling`).

    HTTP-клиенты пользователей закрываются при остановке.
    """
    setup_logging()
    if not settings.TELEGRAM_BOT_TOKEN:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured")

    bot = Bot(token=settings.TELEGRAM_BOT_TOKEN)
    dp = build_dispatcher()
    logger.info(f"Starting bot against {settings.API_BASE_URL}")
    try:
        await dp.start_polling(bot)
    finally:
        await workspaces.aclose()
        await bot.session.close()

def run() -> None:
    asyncio.run(main())

if __name__ == "__main__":
    run()
