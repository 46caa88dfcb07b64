"""Calendar arithmetic: life stats and month grids.

All functions work on ``datetime.date`` (proleptic Gregorian) so leap years
and month lengths come from the standard library rather than millisecond
arithmetic. Grids are Sunday-first (column 0 = Sunday).
"""

from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol, runtime_checkable

DAYS_PER_WEEK = 7
DAYS_PER_YEAR = 365.25
DEFAULT_HORIZON_WEEKS = 4160  # 80 years

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@runtime_checkable
class Clock(Protocol):
    """Source of the current wall-clock day."""

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by the local system time."""

    def today(self) -> date:
        return datetime.now().date()


class FixedClock:
    """Clock pinned to a given day. Useful for replaying a timeline as of a date."""

    def __init__(self, day: date) -> None:
        self.day = day

    def today(self) -> date:
        return self.day


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string. Raises ValueError otherwise."""
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise ValueError(f"Not an ISO date: {value!r}")
    return date.fromisoformat(value)


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def weeks_between(start: date, end: date) -> int:
    return days_between(start, end) // DAYS_PER_WEEK


def years_between(start: date, end: date) -> int:
    """Whole years from ``start`` to ``end``, counted as 365.25-day years."""
    return math.floor(days_between(start, end) / DAYS_PER_YEAR)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % DAYS_PER_WEEK


def month_grid(year: int, month: int) -> list[list[date | None]]:
    """Rows of seven cells covering the month, padded with None on both ends."""
    first = date(year, month, 1)
    cells: list[date | None] = [None] * sunday_weekday(first)
    cells.extend(date(year, month, d) for d in range(1, days_in_month(year, month) + 1))
    trailing = -len(cells) % DAYS_PER_WEEK
    cells.extend([None] * trailing)
    return [cells[i:i + DAYS_PER_WEEK] for i in range(0, len(cells), DAYS_PER_WEEK)]


def format_elapsed(seconds: int) -> str:
    """Render an elapsed recording time as ``MM:SS``."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


@dataclass(frozen=True)
class Stats:
    """Life statistics derived from a birth date. Never persisted."""

    birth_date: date
    weeks_lived: int
    total_weeks: int
    weeks_remaining: int
    percentage_lived: int
    days_lived: int
    years_lived: int


def compute_stats(birth_date: date, today: date,
                  total_weeks: int = DEFAULT_HORIZON_WEEKS) -> Stats:
    """Project a birth date onto the fixed-horizon week grid.

    A birth date in the future counts as zero time lived.
    """
    days = max(0, days_between(birth_date, today))
    weeks = days // DAYS_PER_WEEK
    percentage = math.floor(weeks / total_weeks * 100 + 0.5) if total_weeks else 100
    return Stats(
        birth_date=birth_date,
        weeks_lived=weeks,
        total_weeks=total_weeks,
        weeks_remaining=max(0, total_weeks - weeks),
        percentage_lived=min(100, percentage),
        days_lived=days,
        years_lived=max(0, years_between(birth_date, today)),
    )


@dataclass
class BirthProfile:
    """The person's birth date; stats are always re-derived from it."""

    birth_date: date

    @classmethod
    def from_iso(cls, value: str) -> BirthProfile:
        return cls(parse_date(value))

    def to_iso(self) -> str:
        return self.birth_date.isoformat()

    def stats(self, clock: Clock, total_weeks: int = DEFAULT_HORIZON_WEEKS) -> Stats:
        return compute_stats(self.birth_date, clock.today(), total_weeks)
