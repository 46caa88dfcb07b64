"""Shared fakes for the capture device, recorder and tick source."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from lifeline.datemath import FixedClock


class FakeStream:
    def __init__(self) -> None:
        self.stop_calls = 0

    @property
    def stopped(self) -> bool:
        return self.stop_calls > 0

    def stop_all_tracks(self) -> None:
        self.stop_calls += 1


class FakeRecorder:
    """Records like a browser MediaRecorder: no data while paused, flush on stop."""

    def __init__(self, stream, on_data, on_stop, *, final_chunk=b"end", fire_stop=True):
        self.stream = stream
        self._on_data = on_data
        self._on_stop = on_stop
        self._final_chunk = final_chunk
        self._fire_stop = fire_stop
        self.state = "inactive"
        self.stop_calls = 0

    def start(self) -> None:
        self.state = "recording"

    def pause(self) -> None:
        self.state = "paused"

    def resume(self) -> None:
        self.state = "recording"

    def stop(self) -> None:
        self.stop_calls += 1
        self.state = "inactive"
        if self._final_chunk:
            self._on_data(self._final_chunk)
        if self._fire_stop:
            self._on_stop()

    def emit(self, chunk: bytes) -> None:
        if self.state == "recording":
            self._on_data(chunk)

    def finish(self) -> None:
        """Report a stop that was held back by ``fire_stop=False``."""
        self._on_stop()

    def emit_late(self, chunk: bytes) -> None:
        """Deliver a chunk regardless of state, like a stale event."""
        self._on_data(chunk)


class FakeProvider:
    def __init__(self, *, deny: Exception | None = None, recorder_error: Exception | None = None,
                 fire_stop: bool = True) -> None:
        self.deny = deny
        self.recorder_error = recorder_error
        self.fire_stop = fire_stop
        self.gate: asyncio.Event | None = None
        self.streams: list[FakeStream] = []
        self.recorders: list[FakeRecorder] = []
        self.constraints: list[dict] = []

    @property
    def recorder(self) -> FakeRecorder:
        return self.recorders[-1]

    @property
    def stream(self) -> FakeStream:
        return self.streams[-1]

    async def request_stream(self, constraints):
        self.constraints.append(constraints)
        if self.gate is not None:
            await self.gate.wait()
        if self.deny is not None:
            raise self.deny
        stream = FakeStream()
        self.streams.append(stream)
        return stream

    def create_recorder(self, stream, on_data, on_stop):
        if self.recorder_error is not None:
            raise self.recorder_error
        recorder = FakeRecorder(stream, on_data, on_stop, fire_stop=self.fire_stop)
        self.recorders.append(recorder)
        return recorder


class _ManualHandle:
    def __init__(self, callback) -> None:
        self.callback = callback
        self.cancel_calls = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_calls > 0

    def cancel(self) -> None:
        self.cancel_calls += 1


class ManualTicks:
    """Virtual tick source: time only moves when the test calls advance()."""

    def __init__(self) -> None:
        self.handles: list[_ManualHandle] = []

    @property
    def active(self) -> list[_ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def schedule(self, interval, callback):
        handle = _ManualHandle(callback)
        self.handles.append(handle)
        return handle

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            for handle in self.active:
                handle.callback()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def ticks() -> ManualTicks:
    return ManualTicks()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(date(2024, 3, 15))
