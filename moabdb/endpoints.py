"""
Хелперы для построения HTTP‑запросов к MoabDB.

Все функции возвращают `EndpointSpec` (URL + заголовки), чтобы транспортный
код в `MoabClient` оставался отделённым от кодирования протокола.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict

from dotenv import load_dotenv

from . import protocol
from .exceptions import ValidationError
from .models import EquityQuery
from .utils import to_epoch_seconds

# Подтягиваем значения из .env.moabdb (если есть) и затем из стандартного .env
load_dotenv(dotenv_path=".env.moabdb")
load_dotenv()

DEFAULT_API_URL = os.getenv("MOABDB_API_URL", "https://api.moabdb.com/request/v1/")
REQUEST_HEADER = "x-req"

DATATYPE_DAILY = "daily_stocks"
DATATYPE_INTRADAY = "intraday_stocks"


@dataclass(frozen=True)
class EndpointSpec:
    """URL и заголовки, готовые к HTTP GET."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)


def equity_datatype(intraday: bool) -> str:
    """Имя датасета на сервере: внутридневные или дневные бары."""
    return DATATYPE_INTRADAY if intraday else DATATYPE_DAILY


def build_equity_endpoint(query: EquityQuery, *, base_url: str = DEFAULT_API_URL) -> EndpointSpec:
    """
    Построить запрос за данными по акции.

    Параметры запроса целиком уезжают в заголовок `x-req`; URL один для всех
    датасетов.
    """
    start = to_epoch_seconds(query.window.start)
    end = to_epoch_seconds(query.window.end)
    if start >= end:
        raise ValidationError(
            "Window collapses to an empty range at one-second precision",
            details={"start": query.window.start.isoformat(), "end": query.window.end.isoformat()},
        )
    credentials = query.credentials
    request = protocol.build_request(
        symbol=query.symbol,
        start=start,
        end=end,
        datatype=equity_datatype(query.intraday),
        username=credentials.username if credentials else "",
        token=credentials.token if credentials else "",
    )
    return EndpointSpec(url=base_url, headers={REQUEST_HEADER: protocol.encode_request(request)})
