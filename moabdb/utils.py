"""
Вспомогательные функции клиента: работа с датами и временными метками.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from .exceptions import ValidationError

# Протокол передаёт границы окна как u32 секунд Unix-эпохи.
MAX_EPOCH_SECONDS = 2**32 - 1


def utc_now() -> datetime:
    """Вернуть текущее время в UTC (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def coerce_datetime(value: datetime | date | str) -> datetime:
    """
    Привести поддерживаемые типы к timezone-aware `datetime` в UTC.

    Наивные значения считаются UTC, `date` превращается в полночь UTC,
    строки парсятся как ISO‑даты/время.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Unsupported datetime string: {value!r}", details={"value": value}) from exc
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise ValidationError(f"Unsupported datetime value: {value!r}")


def to_epoch_seconds(value: datetime) -> int:
    """
    Перевести момент времени в целые секунды Unix-эпохи в диапазоне u32.
    """
    seconds = int(coerce_datetime(value).timestamp())
    if seconds < 0 or seconds > MAX_EPOCH_SECONDS:
        raise ValidationError(
            f"Timestamp {value.isoformat()} is outside the supported range",
            details={"value": value.isoformat()},
        )
    return seconds


def mask_secret(value: Any) -> str:
    """Скрыть секрет для логов/repr, оставив только последние символы."""
    text = str(value or "")
    if len(text) <= 4:
        return "*" * len(text)
    return "*" * (len(text) - 4) + text[-4:]
