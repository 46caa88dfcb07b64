"""Temporal navigation: periods, membership queries and the drill-down stack."""

from lifeline.timeline.index import PeriodStatus, TemporalIndex
from lifeline.timeline.navigation import NavigationState
from lifeline.timeline.period import (
    DayPeriod,
    Granularity,
    MonthPeriod,
    Period,
    WeekPeriod,
    YearPeriod,
    parse_period,
)

__all__ = [
    "DayPeriod", "Granularity", "MonthPeriod", "NavigationState", "Period",
    "PeriodStatus", "TemporalIndex", "WeekPeriod", "YearPeriod", "parse_period",
]
