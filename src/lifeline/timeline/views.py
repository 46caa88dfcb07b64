"""Cells for each level of the timeline, ready for a presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from lifeline.datemath import month_grid
from lifeline.memory.models import MemoryRecord
from lifeline.timeline.index import PeriodStatus, TemporalIndex
from lifeline.timeline.period import DayPeriod, MonthPeriod, Period, YearPeriod

# Years shown past the current one. Fixed for now; a candidate for config.
ANNUAL_LOOKAHEAD_YEARS = 10

MONTH_LABELS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@dataclass(frozen=True)
class PeriodCell:
    period: Period
    status: PeriodStatus
    count: int
    label: str = ""


@dataclass(frozen=True)
class DayCell:
    period: DayPeriod
    status: PeriodStatus
    memory: MemoryRecord | None


def year_range(birth_year: int, current_year: int) -> range:
    return range(birth_year, current_year + ANNUAL_LOOKAHEAD_YEARS + 1)


def annual_cells(index: TemporalIndex, birth_date: date) -> list[PeriodCell]:
    cells = []
    for year in year_range(birth_date.year, index.clock.today().year):
        period = YearPeriod(year)
        cells.append(PeriodCell(
            period=period,
            status=index.classify(period),
            count=index.member_count(period),
            label=f"{year % 100:02d}",
        ))
    return cells


def monthly_cells(index: TemporalIndex, year: int) -> list[PeriodCell]:
    cells = []
    for month, label in enumerate(MONTH_LABELS, start=1):
        period = MonthPeriod(year, month)
        cells.append(PeriodCell(
            period=period,
            status=index.classify(period),
            count=index.member_count(period),
            label=label,
        ))
    return cells


def weekly_grid(index: TemporalIndex, year: int, month: int) -> list[list[DayCell | None]]:
    """The month laid out Sunday-first; padding cells are None."""
    rows = []
    for row in month_grid(year, month):
        cells: list[DayCell | None] = []
        for day in row:
            if day is None:
                cells.append(None)
                continue
            period = DayPeriod(day)
            cells.append(DayCell(
                period=period,
                status=index.classify(period),
                memory=index.memory_for_day(day),
            ))
        rows.append(cells)
    return rows
