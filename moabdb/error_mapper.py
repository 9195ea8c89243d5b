"""
Маппер исключений в унифицированную модель ошибки.

Позволяет вызывающему коду получать один и тот же сериализуемый формат
ошибок независимо от того, где именно произошёл сбой.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from .exceptions import MoabError


class ErrorInfo(BaseModel):
    """Унифицированная модель ошибки, пригодная для JSON."""

    error_type: str = Field(description="Тип ошибки (VALIDATION_ERROR, TIMEOUT, UNAUTHORIZED, и т.д.)")
    message: str = Field(description="Человекочитаемое сообщение об ошибке")
    status_code: Optional[int] = Field(default=None, description="Код ответа MoabDB, если он был")
    details: Optional[dict[str, Any]] = Field(default=None, description="Дополнительные детали ошибки (опционально)")


class ErrorMapper:
    """
    Маппер для преобразования исключений в ErrorInfo.
    """

    @staticmethod
    def map_exception(exc: Exception) -> ErrorInfo:
        """
        Преобразовать исключение в ErrorInfo.
        """
        # Исключения клиента
        if isinstance(exc, MoabError):
            return ErrorMapper.map_moab_error(exc)

        # Валидационные ошибки
        if isinstance(exc, ValueError):
            return ErrorInfo(
                error_type="VALIDATION_ERROR",
                message=str(exc) or "Validation error",
                details={"exception_type": type(exc).__name__},
            )

        # Сетевые ошибки, не обёрнутые клиентом
        error_message = str(exc) or "Unknown error"
        return ErrorInfo(
            error_type=ErrorMapper.get_error_type_for_exception(exc),
            message=error_message,
            details={"exception_type": type(exc).__name__},
        )

    @staticmethod
    def map_moab_error(error: MoabError) -> ErrorInfo:
        details = error.details if isinstance(error.details, dict) or error.details is None else {"value": error.details}
        return ErrorInfo(
            error_type=error.error_type,
            message=error.message,
            status_code=error.status_code,
            details=details,
        )

    @classmethod
    def get_error_type_for_exception(cls, exc: Exception) -> str:
        """
        Получить error_type для исключения без создания полной модели.
        """
        if isinstance(exc, MoabError):
            return exc.error_type
        if isinstance(exc, ValueError):
            return "VALIDATION_ERROR"

        text = str(exc)
        lowered = text.lower()
        if "timeout" in lowered or "timed out" in lowered:
            return "TIMEOUT"
        if "connection" in lowered or "network" in lowered:
            return "REQUEST_ERROR"
        if "401" in text or "unauthorized" in lowered:
            return "UNAUTHORIZED"
        if "404" in text or "not found" in lowered:
            return "NOT_FOUND"
        if "500" in text or "502" in text or "503" in text:
            return "SERVER_ERROR"
        return "UNKNOWN"
