"""
Иерархия ошибок клиента finance_tracker.

Все ошибки ядра наследуются от `TrackerError`, поэтому слой отображения
может поймать их одним `except` и показать пользователю. Отдельно стоит
`SessionExpired`: только она требует повторного входа.
"""
from __future__ import annotations


class TrackerError(Exception):
    """Базовая ошибка клиента."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Некорректный ввод; до сети дело не доходит."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class RemoteError(TrackerError):
    """Сервер отклонил запрос или запрос не дошёл (status=None)."""

    def __init__(self, status: int | None, message: str):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class FetchError(RemoteError):
    """Сбой при загрузке полного списка транзакций."""


class SessionExpired(TrackerError):
    """Учётные данные отсутствуют или отклонены сервером."""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(message)


class PreconditionError(TrackerError):
    """Неправильное использование API: цель операции не отслеживается."""


class NotFoundError(PreconditionError):
    """Транзакции с таким id нет в хранилище."""

    def __init__(self, tx_id: str):
        super().__init__(f"Transaction {tx_id} not found")
        self.tx_id = tx_id


class AuthError(TrackerError):
    """Не удалось войти или зарегистрироваться."""
