import logging
from typing import Any

import httpx

from finance_tracker.config import settings
from finance_tracker.errors import SessionExpired

logger = logging.getLogger(__name__)


class SessionGate:
    """
    Точка выхода всех запросов к API транзакций.

    Хранит bearer-токен в памяти (аналог sessionStorage вкладки), подставляет
    его в заголовок `Authorization` и сбрасывает при ответе 401.
    Повторных попыток не делает: повторный вход — забота вызывающего кода.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._token: str | None = None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    async def authorized_request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        """
        Выполняет запрос с текущим токеном.

        :raises SessionExpired: токена нет или сервер ответил 401.
        :raises httpx.HTTPError: сетевая ошибка или таймаут.
        """
        if not self._token:
            raise SessionExpired("Not authenticated")

        headers = {"Authorization": f"Bearer {self._token}"}
        resp = await self._client.request(method, path, json=json, headers=headers)

        if resp.status_code == 401:
            logger.warning(f"[GATE] {method} {path} rejected with 401, dropping session")
            self.clear()
            raise SessionExpired()
        return resp

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "SessionGate":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
