"""
HTTP‑клиент для MoabDB.

Наружу отдаётся `get_equity`; кодирование протокола, транспорт и разбор
ошибок сосредоточены здесь, чтобы вызывающий код получал либо `DataFrame`,
либо типизированное исключение.
"""

from __future__ import annotations

import io
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

import httpx
import polars as pl
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

# Загружаем .env.moabdb (приоритет) и затем общий .env
load_dotenv(dotenv_path=".env.moabdb")
load_dotenv()

from . import endpoints, protocol
from .credentials import Credentials
from .exceptions import (
    DataError,
    MoabError,
    MoabTimeoutError,
    RequestError,
    ValidationError,
    exception_for_status,
)
from .models import EquityQuery, EquityResult
from .window import Window

logger = logging.getLogger(__name__)

# Значения по умолчанию берутся из окружения, чтобы не держать их захардкоженными.
DEFAULT_TIMEOUT_SECONDS = float(os.getenv("MOABDB_TIMEOUT_SECONDS", "30"))

STATUS_OK = 200


@dataclass
class MoabClientSettings:
    """Настройки `MoabClient`."""

    api_url: str = endpoints.DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    credentials: Optional[Credentials] = None

    @classmethod
    def from_env(cls) -> "MoabClientSettings":
        """Сконструировать настройки из переменных окружения."""
        return cls(
            api_url=os.getenv("MOABDB_API_URL", endpoints.DEFAULT_API_URL),
            timeout_seconds=float(os.getenv("MOABDB_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
            credentials=Credentials.from_env(),
        )


class MoabClient:
    """
    Синхронный клиент MoabDB поверх переиспользуемого `httpx.Client`.

    Один вызов `get_equity` — один HTTP GET без ретраев и кэша. Клиент можно
    использовать как контекстный менеджер; переданный снаружи `httpx.Client`
    не закрывается. Тайм-аут `settings.timeout_seconds` действует на каждый
    запрос, в том числе через переданный `httpx.Client`.
    """

    def __init__(
        self,
        settings: Optional[MoabClientSettings] = None,
        *,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.settings = settings or MoabClientSettings.from_env()
        self._http = http_client
        self._owns_http = http_client is None

    def __enter__(self) -> "MoabClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Закрыть HTTP‑соединения, если клиент создавал их сам."""
        if self._http is not None and self._owns_http:
            self._http.close()
            self._http = None

    # ------------------------------------------------------------------ #
    # Публичное API
    # ------------------------------------------------------------------ #
    def get_equity(
        self,
        ticker: str,
        window: Window,
        intraday: bool = False,
        credentials: Optional[Credentials] = None,
    ) -> pl.DataFrame:
        """
        Получить временной ряд по акции за окно `window`.

        Args:
            ticker: Тикер, например `"AAPL"`.
            window: Окно запроса, собранное через `WindowBuilder`.
            intraday: True — внутридневные бары, False — дневные.
            credentials: Учётные данные; по умолчанию берутся из настроек,
                без них запрос анонимный.

        Returns:
            `polars.DataFrame`, прочитанный из Parquet‑ответа сервера.

        Raises:
            ValidationError: пустой тикер или некорректное окно (до обращения к сети).
            RequestError: сетевой сбой; MoabTimeoutError, BadRequestError и
                ServerError — его частные случаи.
            AuthError: сервер отклонил учётные данные.
            DataError: пустой или неразбираемый ответ; NotFoundError — нет данных.
            UnknownMoabError: неожиданный код ответа.
        """
        query = self._build_query(ticker, window, intraday, credentials or self.settings.credentials)
        spec = endpoints.build_equity_endpoint(query, base_url=self.settings.api_url)
        datatype = endpoints.equity_datatype(query.intraday)
        logger.info(
            "Requesting %s for %s (%s .. %s)",
            datatype,
            query.symbol,
            query.window.start.isoformat(),
            query.window.end.isoformat(),
        )

        body = self._perform_request(spec)
        response = protocol.decode_response(body)
        if response.code != STATUS_OK:
            logger.warning("MoabDB rejected %s request for %s with code %s", datatype, query.symbol, response.code)
            raise exception_for_status(
                response.code,
                f"MoabDB responded with code {response.code}",
                details={"symbol": query.symbol, "datatype": datatype},
            )
        return _read_parquet(response.data, symbol=query.symbol)

    def try_get_equity(
        self,
        ticker: str,
        window: Window,
        intraday: bool = False,
        credentials: Optional[Credentials] = None,
    ) -> EquityResult:
        """
        То же, что `get_equity`, но ошибки клиента возвращаются в `EquityResult`.
        """
        try:
            return EquityResult.success(self.get_equity(ticker, window, intraday, credentials))
        except MoabError as exc:
            logger.warning("MoabDB request for %s failed: %s", ticker, exc.message)
            return EquityResult.from_exception(exc)

    # ------------------------------------------------------------------ #
    # Внутренние вспомогательные методы
    # ------------------------------------------------------------------ #
    def _get_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=self.settings.timeout_seconds)
        return self._http

    def _build_query(
        self,
        ticker: str,
        window: Window,
        intraday: bool,
        credentials: Optional[Credentials],
    ) -> EquityQuery:
        try:
            return EquityQuery(symbol=ticker, window=window, intraday=intraday, credentials=credentials)
        except PydanticValidationError as exc:
            messages = [err["msg"] for err in exc.errors()]
            raise ValidationError(
                f"Invalid equity query: {'; '.join(messages)}",
                details={"errors": messages},
            ) from exc

    def _perform_request(self, spec: endpoints.EndpointSpec) -> bytes:
        """
        Выполнить один HTTP‑запрос и преобразовать исключения httpx в ошибки клиента.
        """
        started = time.monotonic()
        try:
            response = self._get_http().get(spec.url, headers=spec.headers, timeout=self.settings.timeout_seconds)
        except httpx.TimeoutException as exc:
            raise MoabTimeoutError(
                "Timeout while calling MoabDB",
                details={"url": spec.url, "timeout_seconds": self.settings.timeout_seconds},
            ) from exc
        except httpx.DecodingError as exc:
            raise DataError("Failed to decode MoabDB response body", details={"url": spec.url}) from exc
        except httpx.RequestError as exc:
            raise RequestError(f"Network error contacting MoabDB: {exc}", details={"url": spec.url}) from exc

        logger.debug(
            "MoabDB answered HTTP %s with %s bytes in %.3fs",
            response.status_code,
            len(response.content),
            time.monotonic() - started,
        )
        if not response.is_success:
            raise exception_for_status(
                response.status_code,
                f"MoabDB responded with HTTP {response.status_code}",
                details={"url": spec.url},
            )
        return response.content


def get_equity(
    ticker: str,
    window: Window,
    intraday: bool = False,
    credentials: Optional[Credentials] = None,
    *,
    client: Optional[MoabClient] = None,
) -> pl.DataFrame:
    """
    Получить данные по акции одним вызовом.

    Без `client` создаёт временный `MoabClient` с настройками из окружения.
    Исключения — как у `MoabClient.get_equity`.
    """
    if client is not None:
        return client.get_equity(ticker, window, intraday, credentials)
    with MoabClient() as owned:
        return owned.get_equity(ticker, window, intraday, credentials)


def _read_parquet(data: bytes, *, symbol: str) -> pl.DataFrame:
    if not data:
        raise DataError(f"MoabDB returned no data for {symbol}", details={"symbol": symbol})
    try:
        return pl.read_parquet(io.BytesIO(data))
    except (pl.exceptions.PolarsError, OSError, ValueError) as exc:
        raise DataError(
            f"Failed to read MoabDB payload for {symbol} as Parquet",
            details={"symbol": symbol, "length": len(data)},
        ) from exc
