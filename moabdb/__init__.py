"""
Публичная точка входа пакета `moabdb`.

Пакет предоставляет `WindowBuilder` для задания окна запроса и `get_equity`
для загрузки временных рядов по акциям из MoabDB. Сеть, протокол и разбор
ошибок скрыты за `MoabClient`.
"""

from .client import MoabClient, MoabClientSettings, get_equity
from .credentials import Credentials
from .error_mapper import ErrorInfo, ErrorMapper
from .exceptions import (
    AuthError,
    BadRequestError,
    DataError,
    MoabError,
    MoabTimeoutError,
    NotFoundError,
    RequestError,
    ServerError,
    UnknownMoabError,
    ValidationError,
)
from .models import EquityQuery, EquityResult
from .window import LengthUnit, Window, WindowBuilder, WindowLength

__all__ = [
    "get_equity",
    "MoabClient",
    "MoabClientSettings",
    "Credentials",
    "Window",
    "WindowBuilder",
    "WindowLength",
    "LengthUnit",
    "EquityQuery",
    "EquityResult",
    "ErrorInfo",
    "ErrorMapper",
    "MoabError",
    "ValidationError",
    "RequestError",
    "MoabTimeoutError",
    "BadRequestError",
    "ServerError",
    "AuthError",
    "DataError",
    "NotFoundError",
    "UnknownMoabError",
]
