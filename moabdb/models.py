"""
Pydantic‑модели запроса и результата.

`EquityQuery` валидирует параметры до обращения к сети, `EquityResult` даёт
вызывающему коду результат без исключений: решать, фатальна ли ошибка,
остаётся ему.
"""

from __future__ import annotations

from typing import Literal, Optional

import polars as pl
from pydantic import BaseModel, ConfigDict, Field, InstanceOf, StrictBool, field_validator

from .credentials import Credentials
from .error_mapper import ErrorInfo, ErrorMapper
from .exceptions import MoabError
from .window import Window


class MoabBaseModel(BaseModel):
    """Базовая модель, игнорирующая лишние поля."""

    model_config = ConfigDict(extra="ignore")


class EquityQuery(MoabBaseModel):
    """Запрос временного ряда по акции."""

    symbol: str = Field(description="Тикер, например 'AAPL'.")
    window: InstanceOf[Window] = Field(description="Окно запроса, собранное через WindowBuilder.")
    intraday: StrictBool = Field(default=False, description="True — внутридневные бары, False — дневные.")
    credentials: Optional[InstanceOf[Credentials]] = Field(
        default=None, description="Учётные данные; None — анонимный запрос."
    )

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        symbol = value.strip().upper()
        if not symbol:
            raise ValueError("Ticker symbol must be a non-empty string")
        return symbol


class EquityResult(MoabBaseModel):
    """
    Результат запроса: либо таблица, либо описание ошибки.

    Attributes:
        status: "success" или "error".
        data: DataFrame с данными (только при успехе).
        error: ErrorInfo (только при ошибке).
        exception: исходное исключение; в сериализацию не попадает.
    """

    status: Literal["success", "error"]
    data: Optional[InstanceOf[pl.DataFrame]] = None
    error: Optional[ErrorInfo] = None
    exception: Optional[InstanceOf[MoabError]] = Field(default=None, exclude=True)

    @classmethod
    def success(cls, data: pl.DataFrame) -> "EquityResult":
        return cls(status="success", data=data)

    @classmethod
    def from_exception(cls, exc: MoabError) -> "EquityResult":
        return cls(status="error", error=ErrorMapper.map_exception(exc), exception=exc)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def unwrap(self) -> pl.DataFrame:
        """Вернуть данные или пробросить исходное исключение."""
        if self.ok:
            return self.data
        raise self._as_exception()

    def expect(self, message: str) -> pl.DataFrame:
        """Как `unwrap`, но с префиксом `message` в тексте исключения."""
        if self.ok:
            return self.data
        exc = self._as_exception()
        raise type(exc)(f"{message}: {exc.message}", details=exc.details, status_code=exc.status_code) from exc

    def _as_exception(self) -> MoabError:
        if self.exception is not None:
            return self.exception
        # Результат пришёл без исходного исключения (например, из JSON)
        error = self.error or ErrorInfo(error_type="UNKNOWN", message="Unknown error")
        return MoabError(error.message, details=error.details, status_code=error.status_code)
