"""
Временное окно запроса и его построитель.

Окно можно задать началом и концом либо длиной вместе с началом или концом.
Если задана только длина, недостающей границей становится текущий момент.

Пример::

    window = WindowBuilder().length(WindowLength.months(3)).build()
    window = WindowBuilder().start(datetime(2024, 1, 1)).length("10 days").build()
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Optional, Union

from .exceptions import ValidationError
from .utils import coerce_datetime, utc_now

logger = logging.getLogger(__name__)


class LengthUnit(str, Enum):
    """Единица длины окна."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


# Месяц и год считаются фиксированными: 30 и 365 дней.
_UNIT_TO_TIMEDELTA = {
    LengthUnit.SECONDS: timedelta(seconds=1),
    LengthUnit.MINUTES: timedelta(minutes=1),
    LengthUnit.HOURS: timedelta(hours=1),
    LengthUnit.DAYS: timedelta(days=1),
    LengthUnit.WEEKS: timedelta(weeks=1),
    LengthUnit.MONTHS: timedelta(days=30),
    LengthUnit.YEARS: timedelta(days=365),
}

_UNIT_ALIASES = {
    "s": LengthUnit.SECONDS,
    "sec": LengthUnit.SECONDS,
    "second": LengthUnit.SECONDS,
    "seconds": LengthUnit.SECONDS,
    "m": LengthUnit.MINUTES,
    "min": LengthUnit.MINUTES,
    "minute": LengthUnit.MINUTES,
    "minutes": LengthUnit.MINUTES,
    "h": LengthUnit.HOURS,
    "hour": LengthUnit.HOURS,
    "hours": LengthUnit.HOURS,
    "d": LengthUnit.DAYS,
    "day": LengthUnit.DAYS,
    "days": LengthUnit.DAYS,
    "w": LengthUnit.WEEKS,
    "week": LengthUnit.WEEKS,
    "weeks": LengthUnit.WEEKS,
    "mo": LengthUnit.MONTHS,
    "month": LengthUnit.MONTHS,
    "months": LengthUnit.MONTHS,
    "y": LengthUnit.YEARS,
    "year": LengthUnit.YEARS,
    "years": LengthUnit.YEARS,
}

_LENGTH_RE = re.compile(r"^\s*(\d+)\s*([a-zA-Z]+)\s*$")


@dataclass(frozen=True)
class WindowLength:
    """Положительная длительность окна: количество единиц `unit`."""

    amount: int
    unit: LengthUnit

    def __post_init__(self) -> None:
        try:
            unit = LengthUnit(self.unit)
        except ValueError as exc:
            raise ValidationError(f"Unknown window length unit: {self.unit!r}") from exc
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(f"Window length must be an integer, got {self.amount!r}")
        if self.amount <= 0:
            raise ValidationError(
                "Window length must be strictly positive",
                details={"amount": self.amount, "unit": unit.value},
            )
        object.__setattr__(self, "unit", unit)

    @classmethod
    def seconds(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.SECONDS)

    @classmethod
    def minutes(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.MINUTES)

    @classmethod
    def hours(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.HOURS)

    @classmethod
    def days(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.DAYS)

    @classmethod
    def weeks(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.WEEKS)

    @classmethod
    def months(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.MONTHS)

    @classmethod
    def years(cls, amount: int) -> "WindowLength":
        return cls(amount, LengthUnit.YEARS)

    @classmethod
    def parse(cls, text: str) -> "WindowLength":
        """
        Разобрать строку вида `"3 years"`, `"10d"`, `"1 month"`.

        Raises:
            ValidationError: строка не распознана.
        """
        match = _LENGTH_RE.match(text or "")
        if not match:
            raise ValidationError(f"Cannot parse window length: {text!r}", details={"value": text})
        unit = _UNIT_ALIASES.get(match.group(2).lower())
        if unit is None:
            raise ValidationError(f"Unknown window length unit: {match.group(2)!r}", details={"value": text})
        return cls(int(match.group(1)), unit)

    def to_timedelta(self) -> timedelta:
        try:
            return _UNIT_TO_TIMEDELTA[self.unit] * self.amount
        except OverflowError as exc:
            raise ValidationError(
                "Window length is out of the supported range",
                details={"amount": self.amount, "unit": self.unit.value},
            ) from exc


LengthLike = Union[WindowLength, str, timedelta]


def _coerce_length(value: LengthLike) -> timedelta:
    if isinstance(value, WindowLength):
        return value.to_timedelta()
    if isinstance(value, str):
        return WindowLength.parse(value).to_timedelta()
    if isinstance(value, timedelta):
        if value <= timedelta(0):
            raise ValidationError("Window length must be strictly positive", details={"seconds": value.total_seconds()})
        return value
    raise ValidationError(f"Unsupported window length: {value!r}")


@dataclass(frozen=True)
class Window:
    """
    Неизменяемое окно `[start, end]` в UTC; `start` строго раньше `end`.

    На провод границы уходят целыми секундами; окно, схлопывающееся при
    округлении вниз, отклоняется при построении запроса.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        start = coerce_datetime(self.start)
        end = coerce_datetime(self.end)
        if start >= end:
            raise ValidationError(
                "Start time must be before end time",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class WindowBuilder:
    """
    Построитель `Window`.

    Комбинации параметров разрешаются в таком порядке:
    - start + end: длина, если задана, игнорируется;
    - start + length: end = start + length;
    - end + length: start = end - length;
    - только length: end = сейчас (UTC), start = end - length.
    Любая другая комбинация считается недоопределённой.
    """

    def __init__(self, *, now_func: Optional[Callable[[], datetime]] = None) -> None:
        self._start: Optional[datetime] = None
        self._end: Optional[datetime] = None
        self._length: Optional[timedelta] = None
        self._now = now_func or utc_now

    def start(self, start: datetime | date | str) -> "WindowBuilder":
        """Задать начало окна."""
        self._start = coerce_datetime(start)
        return self

    def end(self, end: datetime | date | str) -> "WindowBuilder":
        """Задать конец окна."""
        self._end = coerce_datetime(end)
        return self

    def length(self, length: LengthLike) -> "WindowBuilder":
        """Задать длину окна (`WindowLength`, строка вида `"3 years"` или `timedelta`)."""
        self._length = _coerce_length(length)
        return self

    def build(self) -> Window:
        """
        Собрать окно.

        Raises:
            ValidationError: окно пустое, перевёрнуто или недоопределено.
        """
        if self._start is not None and self._end is not None:
            if self._length is not None:
                logger.debug("Both start and end are set, ignoring window length %s", self._length)
            return Window(start=self._start, end=self._end)
        if self._length is None:
            raise ValidationError(
                "Must provide either start and end, or a length with an optional start or end",
                details={
                    "start": self._start.isoformat() if self._start else None,
                    "end": self._end.isoformat() if self._end else None,
                },
            )
        try:
            if self._start is not None:
                start, end = self._start, self._start + self._length
            elif self._end is not None:
                start, end = self._end - self._length, self._end
            else:
                end = coerce_datetime(self._now())
                start = end - self._length
        except OverflowError as exc:
            raise ValidationError(
                "Window is out of the supported range",
                details={"length_seconds": self._length.total_seconds()},
            ) from exc
        return Window(start=start, end=end)
