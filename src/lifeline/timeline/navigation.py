"""Drill-down stack: annual → monthly → weekly → daily.

The stack holds the period chosen at each level above the current view, so
``selected`` is always a period of the parent granularity and ``ascend``
restores exactly the selection the parent view had.
"""

from __future__ import annotations

import logging

from lifeline.errors import InvalidPeriodTransition
from lifeline.timeline.period import (
    DayPeriod,
    Granularity,
    MonthPeriod,
    Period,
    YearPeriod,
    parse_period,
)

logger = logging.getLogger(__name__)

_LEVELS = list(Granularity)

# What the view at each granularity selects when descending
_CHILD_KEY = {
    Granularity.ANNUAL: Granularity.ANNUAL,
    Granularity.MONTHLY: Granularity.MONTHLY,
    Granularity.WEEKLY: Granularity.DAILY,
}


class NavigationState:
    """Current granularity plus the selected period that led to it."""

    def __init__(self) -> None:
        self._stack: list[Period] = []

    @property
    def granularity(self) -> Granularity:
        return _LEVELS[len(self._stack)]

    @property
    def selected(self) -> Period | None:
        return self._stack[-1] if self._stack else None

    @property
    def selected_key(self) -> int | str | None:
        """The selection as the raw key views use: a year number or an ISO string."""
        period = self.selected
        if period is None:
            return None
        if isinstance(period, YearPeriod):
            return period.year
        return period.key

    @property
    def path(self) -> list[Period]:
        return list(self._stack)

    def descend(self, period: int | str) -> bool:
        """Select ``period`` in the current view and move one level down.

        Returns False (and leaves the state untouched) from the daily view, for
        a malformed key, or for a child outside the current selection.
        """
        granularity = self.granularity
        if granularity is Granularity.DAILY:
            logger.debug("descend(%r) ignored: already at daily view", period)
            return False
        try:
            child = parse_period(period, _CHILD_KEY[granularity])
            self._check_within_selection(child)
        except InvalidPeriodTransition as e:
            logger.debug("descend(%r) ignored at %s: %s", period, granularity.value, e)
            return False
        self._stack.append(child)
        logger.debug("Navigated %s → %s (%s)", granularity.value, self.granularity.value, child.key)
        return True

    def ascend(self) -> bool:
        if not self._stack:
            return False
        left = self._stack.pop()
        logger.debug("Navigated up from %s to %s", left.key, self.granularity.value)
        return True

    def reset(self) -> None:
        self._stack.clear()

    def _check_within_selection(self, child: Period) -> None:
        parent = self.selected
        if parent is None:
            return
        if isinstance(child, MonthPeriod) and child.year != parent.year:  # type: ignore[union-attr]
            raise InvalidPeriodTransition(f"{child.key} is outside {parent.key}")
        if isinstance(child, DayPeriod) and not (parent.first_day <= child.day <= parent.last_day):
            raise InvalidPeriodTransition(f"{child.key} is outside {parent.key}")
