"""
Нормализованная иерархия исключений для `moabdb`.

Клиент переводит ошибки HTTP/протокола/валидации MoabDB в эти исключения,
чтобы вызывающий код мог различать их по классу или по `error_type`, не
разбирая транспортные детали.
"""

from typing import Any, Optional


class MoabError(Exception):
    """Базовый класс для всех ошибок клиента."""

    error_type: str = "UNKNOWN"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.status_code = status_code

    def __repr__(self) -> str:  # pragma: no cover - мелкий хелпер
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code!r})"


class ValidationError(MoabError, ValueError):
    """Некорректные параметры окна или запроса; сеть при этом не вызывается."""

    error_type = "VALIDATION_ERROR"


class RequestError(MoabError):
    """Сбой транспорта: соединение, DNS, TLS и т.п."""

    error_type = "REQUEST_ERROR"


class MoabTimeoutError(RequestError):
    """MoabDB не ответил в пределах тайм-аута."""

    error_type = "TIMEOUT"


class BadRequestError(RequestError):
    """Сервер отклонил запрос как некорректный (код 400)."""

    error_type = "BAD_REQUEST"


class ServerError(RequestError):
    """Сервер вернул 5xx."""

    error_type = "SERVER_ERROR"


class AuthError(MoabError):
    """Учётные данные отклонены (код 401)."""

    error_type = "UNAUTHORIZED"


class DataError(MoabError):
    """Ответ пустой или не разбирается (base64/protobuf/Parquet)."""

    error_type = "DATA_ERROR"


class NotFoundError(DataError):
    """Для тикера/датасета нет данных (код 404)."""

    error_type = "NOT_FOUND"


class UnknownMoabError(MoabError):
    """Неожиданный код ответа, не попавший в другие категории."""

    error_type = "UNKNOWN"


def exception_for_status(status_code: int, message: str, *, details: Optional[Any] = None) -> MoabError:
    """
    Подобрать исключение по коду ответа MoabDB (HTTP или поле `code` протокола).
    """
    if status_code == 400:
        return BadRequestError(message, details=details, status_code=status_code)
    if status_code == 401:
        return AuthError(message, details=details, status_code=status_code)
    if status_code == 404:
        return NotFoundError(message, details=details, status_code=status_code)
    if 500 <= status_code < 600:
        return ServerError(message, details=details, status_code=status_code)
    return UnknownMoabError(message, details=details, status_code=status_code)
