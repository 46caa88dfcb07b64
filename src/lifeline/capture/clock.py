"""Recurring tick source on the running asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class _RepeatingTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float,
                 callback: Callable[[], None]) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self.cancelled = False
        self._next_at = loop.time() + interval
        self._arm()

    def _arm(self) -> None:
        self._handle = self._loop.call_at(self._next_at, self._fire)

    def _fire(self) -> None:
        if self.cancelled:
            return
        # Schedule against the ideal timeline so ticks don't drift
        self._next_at += self._interval
        self._arm()
        try:
            self._callback()
        except Exception:
            logger.exception("Tick callback failed")

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioTickSource:
    """Fires callbacks on the event loop; must be scheduled from inside a running loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, interval: float, callback: Callable[[], None]) -> _RepeatingTimer:
        loop = self._loop or asyncio.get_running_loop()
        return _RepeatingTimer(loop, interval, callback)
