import logging
import secrets
import string

import httpx

from finance_tracker.config import settings
from finance_tracker.errors import AuthError, ValidationError
from finance_tracker.services.session_gate import SessionGate

logger = logging.getLogger(__name__)

_GUEST_ALPHABET = string.ascii_lowercase + string.digits


def _server_message(resp: httpx.Response, fallback: str) -> str:
    try:
        data = resp.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return fallback


def make_guest_credentials() -> tuple[str, str]:
    """Временный пользователь: guest_<6 символов> и случайный пароль."""
    suffix = "".join(secrets.choice(_GUEST_ALPHABET) for _ in range(6))
    return f"guest_{suffix}", secrets.token_urlsafe(12)


class AuthClient:
    """
    Вход, регистрация и гостевой доступ.

    Полученный токен кладётся в `SessionGate`, через который дальше идут
    все запросы к транзакциям. Сам клиент токен не хранит.
    """

    def __init__(
        self,
        gate: SessionGate,
        login_path: str | None = None,
        signup_path: str | None = None,
    ):
        self._gate = gate
        self._login_path = login_path or settings.AUTH_LOGIN_PATH
        self._signup_path = signup_path or settings.AUTH_SIGNUP_PATH

    async def login(self, username: str, password: str) -> str:
        try:
            resp = await self._gate.client.post(
                self._login_path, json={"username": username, "password": password}
            )
        except httpx.HTTPError as e:
            logger.warning(f"[AUTH] login request failed: {e}")
            raise AuthError("Network error") from e

        if not resp.is_success:
            raise AuthError(_server_message(resp, "Login failed"))

        try:
            data = resp.json()
        except ValueError:
            data = None
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("Login failed")

        self._gate.set_token(token)
        logger.info(f"[AUTH] {username} logged in")
        return token

    async def signup(self, username: str, password: str, confirm: str | None = None) -> None:
        if confirm is not None and confirm != password:
            raise ValidationError("confirm", "Passwords do not match")

        try:
            resp = await self._gate.client.post(
                self._signup_path, json={"username": username, "password": password}
            )
        except httpx.HTTPError as e:
            logger.warning(f"[AUTH] signup request failed: {e}")
            raise AuthError("Network error during signup") from e

        if not resp.is_success:
            raise AuthError(_server_message(resp, "Signup failed"))
        logger.info(f"[AUTH] {username} signed up")

    async def register(self, username: str, password: str, confirm: str) -> str:
        """Регистрация с автоматическим входом."""
        await self.signup(username, password, confirm)
        return await self.login(username, password)

    async def guest(self) -> str:
        username, password = make_guest_credentials()
        await self.signup(username, password)
        return await self.login(username, password)

    def logout(self) -> None:
        self._gate.clear()
