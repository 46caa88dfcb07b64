"""Protocols for the capture device provider and the tick source."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

# Recorder callbacks: one opaque chunk per data event, then a single stop event
DataCallback = Callable[[bytes], None]
StopCallback = Callable[[], None]

RECORDER_INACTIVE = "inactive"
RECORDER_RECORDING = "recording"
RECORDER_PAUSED = "paused"


@runtime_checkable
class Stream(Protocol):
    """A live audio/video stream granted by the device provider."""

    def stop_all_tracks(self) -> None: ...


@runtime_checkable
class Recorder(Protocol):
    """Recorder primitive bound to a stream."""

    @property
    def state(self) -> str:
        """One of ``inactive``, ``recording``, ``paused``."""
        ...

    def start(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def stop(self) -> None:
        """Stop recording. Remaining data is flushed, then the stop callback fires."""
        ...


@runtime_checkable
class DeviceProvider(Protocol):
    """Grants live streams and builds recorders on them."""

    async def request_stream(self, constraints: dict[str, bool]) -> Stream:
        """Return a live stream, or raise if the user or platform denies access."""
        ...

    def create_recorder(
        self, stream: Stream, on_data: DataCallback, on_stop: StopCallback
    ) -> Recorder: ...


@runtime_checkable
class TickHandle(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class TickSource(Protocol):
    """Schedules a recurring callback every ``interval`` seconds until cancelled."""

    def schedule(self, interval: float, callback: Callable[[], None]) -> TickHandle: ...
