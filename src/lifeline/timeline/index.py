"""Period membership and status queries over a MemoryStore."""

from __future__ import annotations

from datetime import date
from enum import Enum

from lifeline.datemath import Clock, SystemClock
from lifeline.memory.models import MemoryRecord
from lifeline.memory.store import MemoryStore
from lifeline.timeline.period import (
    DayPeriod,
    Granularity,
    MonthPeriod,
    Period,
    WeekPeriod,
    YearPeriod,
    parse_period,
)


class PeriodStatus(str, Enum):
    HAS_MEMORY = "has_memory"
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


class TemporalIndex:
    """Answers "which records fall in this period" at every granularity.

    Queries scan the store, which is fine for a personal journal and keeps
    results in step with every save/delete without invalidation.
    """

    def __init__(self, store: MemoryStore, clock: Clock | None = None) -> None:
        self.store = store
        self.clock = clock or SystemClock()

    def members(self, period: Period) -> list[MemoryRecord]:
        if isinstance(period, DayPeriod):
            record = self.store.get(period.key)
            return [record] if record is not None else []
        return [r for r in self.store.records() if period.matches(r.date)]

    def member_count(self, period: Period) -> int:
        return len(self.members(period))

    def period_member_count(self, period: int | str, granularity: Granularity | str) -> int:
        """Count records in a period given as a raw key (year, ``YYYY-MM`` or week start)."""
        return self.member_count(parse_period(period, granularity))

    def has_memory(self, period: Period) -> bool:
        if isinstance(period, DayPeriod):
            return period.key in self.store
        return any(period.matches(d) for d in self.store.dates())

    def memory_for_day(self, day: date | str) -> MemoryRecord | None:
        key = day if isinstance(day, str) else day.isoformat()
        return self.store.get(key)

    def classify(self, period: Period) -> PeriodStatus:
        """Status used to render a period cell.

        Memory presence wins over everything, including "today".
        """
        if self.has_memory(period):
            return PeriodStatus.HAS_MEMORY
        today = self.clock.today()
        if isinstance(period, YearPeriod):
            return _compare(period.year, today.year)
        if isinstance(period, MonthPeriod):
            return _compare((period.year, period.month), (today.year, today.month))
        if isinstance(period, WeekPeriod):
            if period.last_day < today:
                return PeriodStatus.PAST
            if period.first_day > today:
                return PeriodStatus.FUTURE
            return PeriodStatus.CURRENT
        if period.day == today:
            return PeriodStatus.CURRENT
        return PeriodStatus.PAST if period.day < today else PeriodStatus.FUTURE


def _compare(value, current) -> PeriodStatus:
    if value < current:
        return PeriodStatus.PAST
    if value > current:
        return PeriodStatus.FUTURE
    return PeriodStatus.CURRENT
