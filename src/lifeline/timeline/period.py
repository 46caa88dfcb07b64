"""Period keys at the four granularities.

Each variant knows its own string key and how a record date falls inside it:
years and months by ISO-string prefix, weeks and days by calendar comparison.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union

from lifeline.datemath import add_days, days_in_month, parse_date
from lifeline.errors import InvalidPeriodTransition


class Granularity(str, Enum):
    ANNUAL = "annual"
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"

    @property
    def child(self) -> Granularity | None:
        order = list(Granularity)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None

    @property
    def parent(self) -> Granularity | None:
        order = list(Granularity)
        idx = order.index(self)
        return order[idx - 1] if idx > 0 else None


_YEAR_RE = re.compile(r"^\d{4}$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class YearPeriod:
    year: int
    granularity = Granularity.ANNUAL

    @property
    def key(self) -> str:
        return f"{self.year:04d}"

    @property
    def first_day(self) -> date:
        return date(self.year, 1, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, 12, 31)

    def matches(self, record_date: str) -> bool:
        return record_date.startswith(self.key)


@dataclass(frozen=True)
class MonthPeriod:
    year: int
    month: int
    granularity = Granularity.MONTHLY

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, days_in_month(self.year, self.month))

    def matches(self, record_date: str) -> bool:
        return record_date.startswith(self.key)


@dataclass(frozen=True)
class WeekPeriod:
    """Seven consecutive days starting at ``start``, both ends inclusive."""

    start: date
    granularity = Granularity.WEEKLY

    @property
    def key(self) -> str:
        return self.start.isoformat()

    @property
    def first_day(self) -> date:
        return self.start

    @property
    def last_day(self) -> date:
        try:
            return add_days(self.start, 6)
        except OverflowError:
            return date.max

    def matches(self, record_date: str) -> bool:
        try:
            day = parse_date(record_date)
        except ValueError:
            return False
        return self.first_day <= day <= self.last_day


@dataclass(frozen=True)
class DayPeriod:
    day: date
    granularity = Granularity.DAILY

    @property
    def key(self) -> str:
        return self.day.isoformat()

    @property
    def first_day(self) -> date:
        return self.day

    @property
    def last_day(self) -> date:
        return self.day

    def matches(self, record_date: str) -> bool:
        return record_date == self.key


Period = Union[YearPeriod, MonthPeriod, WeekPeriod, DayPeriod]


def _parse_year(value: int | str) -> YearPeriod:
    if isinstance(value, bool):
        raise InvalidPeriodTransition(f"Not a year: {value!r}")
    if isinstance(value, int):
        year = value
    elif isinstance(value, str) and _YEAR_RE.match(value):
        year = int(value)
    else:
        raise InvalidPeriodTransition(f"Not a year: {value!r}")
    if not date.min.year <= year <= date.max.year:
        raise InvalidPeriodTransition(f"Year out of range: {year}")
    return YearPeriod(year)


def _parse_month(value: int | str) -> MonthPeriod:
    m = _MONTH_RE.match(value) if isinstance(value, str) else None
    if not m:
        raise InvalidPeriodTransition(f"Not a YYYY-MM month: {value!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < date.min.year:
        raise InvalidPeriodTransition(f"Month out of range: {value!r}")
    return MonthPeriod(year, month)


def _parse_day(value: int | str) -> date:
    try:
        return parse_date(value)  # type: ignore[arg-type]
    except (ValueError, TypeError) as e:
        raise InvalidPeriodTransition(f"Not a YYYY-MM-DD date: {value!r}") from e


def parse_period(value: int | str, granularity: Granularity | str) -> Period:
    """Build the period variant for ``value`` at ``granularity``.

    Raises InvalidPeriodTransition when the value has the wrong shape.
    """
    granularity = Granularity(granularity)
    if granularity is Granularity.ANNUAL:
        return _parse_year(value)
    if granularity is Granularity.MONTHLY:
        return _parse_month(value)
    if granularity is Granularity.WEEKLY:
        return WeekPeriod(_parse_day(value))
    return DayPeriod(_parse_day(value))
