from dotenv import load_dotenv
load_dotenv()

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    """Конфигурация клиента finance_tracker.

    Настройки подгружаются из файла `.env` и переменных окружения.
    Используются при создании HTTP-клиента (SessionGate / AuthClient)
    и при запуске Telegram-бота, который служит слоем отображения.

    Атрибуты:
        API_BASE_URL (str): Базовый адрес удалённого API транзакций.
        TRANSACTIONS_PATH (str): Путь ресурса транзакций.
        AUTH_LOGIN_PATH (str): Путь входа.
        AUTH_SIGNUP_PATH (str): Путь регистрации.
        HTTP_TIMEOUT (float): Таймаут исходящих запросов, секунды.
        LOG_LEVEL (str): Уровень логирования корневого логгера.
        TELEGRAM_BOT_TOKEN (str | None): Токен бота; нужен только для запуска бота.
    """
    API_BASE_URL: str = Field(default="http://localhost:3000", alias="API_BASE_URL")
    TRANSACTIONS_PATH: str = Field(default="/api/transactions", alias="TRANSACTIONS_PATH")
    AUTH_LOGIN_PATH: str = Field(default="/api/auth/login", alias="AUTH_LOGIN_PATH")
    AUTH_SIGNUP_PATH: str = Field(default="/api/auth/signup", alias="AUTH_SIGNUP_PATH")
    HTTP_TIMEOUT: float = Field(default=10.0, alias="HTTP_TIMEOUT")
    LOG_LEVEL: str = Field(default="INFO", alias="LOG_LEVEL")
    TELEGRAM_BOT_TOKEN: str | None = Field(default=None, alias="TELEGRAM_BOT_TOKEN")
    TELEGRAM_BOT_ALERT: str | None = Field(default=None, alias="TELEGRAM_BOT_ALERT")
    TELEGRAM_ALERT_CHAT_ID: str | None = Field(default=None, alias="TELEGRAM_ALERT_CHAT_ID")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
