"""Recording session state machine.

Lifecycle::

    IDLE --acquire()--> PREVIEWING --start()--> RECORDING <--pause()/resume()--> PAUSED
                                                    |                              |
                                                    +----------stop()--------------+
                                                    v
                                                 STOPPED --retake()--> IDLE

``dispose()`` returns any phase to IDLE, releasing the stream, the recorder,
the tick timer and any artifact still owned by the session. The device stream
is only held in PREVIEWING, RECORDING and PAUSED.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path

from lifeline.memory.locators import LocatorRegistry
from lifeline.capture.base import (
    RECORDER_INACTIVE,
    DeviceProvider,
    Recorder,
    Stream,
    TickHandle,
    TickSource,
)
from lifeline.capture.clock import AsyncioTickSource
from lifeline.config import CaptureConfig
from lifeline.errors import DeviceDenied, RecorderStartFailed
from lifeline.memory.export import export_video
from lifeline.memory.models import VideoArtifact

logger = logging.getLogger(__name__)


class CapturePhase(str, Enum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    RECORDING = "recording"
    PAUSED = "paused"
    STOPPED = "stopped"


class CaptureSession:
    """Owns one device stream, one recorder and the artifact they produce."""

    def __init__(
        self,
        provider: DeviceProvider,
        *,
        date: str = "",
        config: CaptureConfig | None = None,
        ticks: TickSource | None = None,
        locators: LocatorRegistry | None = None,
    ) -> None:
        self.provider = provider
        self.date = date
        self.config = config or CaptureConfig()
        self.ticks = ticks or AsyncioTickSource()
        self.locators = locators or LocatorRegistry()
        self.phase = CapturePhase.IDLE
        self.elapsed_seconds = 0
        self.artifact: VideoArtifact | None = None
        self.last_error: str | None = None
        self._stream: Stream | None = None
        self._recorder: Recorder | None = None
        self._recorder_token: object | None = None
        self._chunks: list[bytes] = []
        self._tick: TickHandle | None = None
        self._acquiring = False
        self._stopping = False
        self._stop_seen = False
        self._stop_event: asyncio.Event | None = None
        # Bumped by dispose(); in-flight acquire/stop compare against it
        self._generation = 0

    @property
    def has_stream(self) -> bool:
        return self._stream is not None

    @property
    def is_ticking(self) -> bool:
        return self._tick is not None

    async def __aenter__(self) -> CaptureSession:
        return self

    async def __aexit__(self, *exc) -> None:
        self.dispose()

    # ── Device acquisition ───────────────────────────────────

    async def acquire(self) -> bool:
        """Request a live stream and enter PREVIEWING.

        Raises DeviceDenied if the provider refuses. If the session is disposed
        while the request is outstanding, the granted stream is released at once
        and False is returned.
        """
        if self.phase is not CapturePhase.IDLE or self._acquiring:
            logger.debug("acquire() ignored in phase %s", self.phase.value)
            return False

        generation = self._generation
        self._acquiring = True
        try:
            stream = await self.provider.request_stream(self.config.constraints)
        except Exception as e:
            self.last_error = f"Camera or microphone unavailable: {e}"
            logger.warning("Device stream denied: %s", e)
            raise DeviceDenied(self.last_error) from e
        finally:
            self._acquiring = False

        if generation != self._generation or self.phase is not CapturePhase.IDLE:
            logger.info("Stream granted after session was disposed; releasing it")
            stream.stop_all_tracks()
            return False

        self._stream = stream
        self.last_error = None
        self.phase = CapturePhase.PREVIEWING
        logger.debug("Capture session previewing (date=%s)", self.date)
        return True

    # ── Recording ────────────────────────────────────────────

    def start(self) -> bool:
        """Begin recording on the acquired stream; the elapsed clock starts at 0."""
        if self.phase is not CapturePhase.PREVIEWING or self._stream is None:
            logger.debug("start() ignored in phase %s", self.phase.value)
            return False
        if self._recorder is not None:
            return False

        token = object()
        try:
            recorder = self.provider.create_recorder(
                self._stream,
                lambda chunk: self._on_data(token, chunk),
                lambda: self._on_stop(token),
            )
            recorder.start()
        except Exception as e:
            self.last_error = f"Recording could not start: {e}"
            logger.warning("Recorder start failed: %s", e)
            raise RecorderStartFailed(self.last_error) from e

        self._recorder = recorder
        self._recorder_token = token
        self._chunks = []
        self._stopping = False
        self._stop_seen = False
        self.elapsed_seconds = 0
        self.phase = CapturePhase.RECORDING
        self._start_clock()
        logger.info("Recording started (date=%s)", self.date)
        return True

    def pause(self) -> bool:
        if self.phase is not CapturePhase.RECORDING or self._recorder is None or self._stopping:
            logger.debug("pause() ignored in phase %s", self.phase.value)
            return False
        self._recorder.pause()
        self.phase = CapturePhase.PAUSED
        logger.debug("Recording paused at %ds", self.elapsed_seconds)
        return True

    def resume(self) -> bool:
        if self.phase is not CapturePhase.PAUSED or self._recorder is None or self._stopping:
            logger.debug("resume() ignored in phase %s", self.phase.value)
            return False
        self._recorder.resume()
        self.phase = CapturePhase.RECORDING
        logger.debug("Recording resumed at %ds", self.elapsed_seconds)
        return True

    async def stop(self) -> VideoArtifact | None:
        """Finalize buffered chunks into an artifact and release the device.

        Returns None (no-op) unless RECORDING or PAUSED, while another stop is already
        finalizing, or if the session is disposed while waiting for the recorder's
        stop event.
        """
        if self._stopping:
            logger.debug("stop() ignored: already stopping")
            return None
        if self.phase not in (CapturePhase.RECORDING, CapturePhase.PAUSED) or self._recorder is None:
            logger.debug("stop() ignored in phase %s", self.phase.value)
            return None

        generation = self._generation
        self._stopping = True
        self._stop_event = asyncio.Event()
        self._stop_clock()
        self._recorder.stop()

        if not self._stop_seen:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.config.stop_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Recorder did not report stop within %.1fs; finalizing %d chunks",
                    self.config.stop_timeout,
                    len(self._chunks),
                )

        if generation != self._generation:
            return None

        artifact = VideoArtifact.from_chunks(
            self._chunks, self.config.container, self.config.mime_type
        )
        self.locators.release(self.artifact)
        self.locators.attach(artifact)
        self.artifact = artifact
        self._chunks = []
        self._drop_recorder()
        self._release_stream()
        self._stopping = False
        self._stop_event = None
        self.phase = CapturePhase.STOPPED
        logger.info("Recording stopped: %ds, %d bytes", self.elapsed_seconds, artifact.size)
        return artifact

    def retake(self) -> bool:
        """Discard the finalized artifact and return to IDLE."""
        if self.phase is not CapturePhase.STOPPED:
            logger.debug("retake() ignored in phase %s", self.phase.value)
            return False
        self.locators.release(self.artifact)
        self.artifact = None
        self.elapsed_seconds = 0
        self.phase = CapturePhase.IDLE
        logger.debug("Artifact discarded for retake (date=%s)", self.date)
        return True

    def download(self, dest_dir: Path) -> Path | None:
        """Write the finalized artifact as ``memory-<date>.<container>``."""
        if self.phase is not CapturePhase.STOPPED or self.artifact is None:
            logger.debug("download() ignored in phase %s", self.phase.value)
            return None
        return export_video(self.artifact, self.date, dest_dir)

    def detach_artifact(self) -> VideoArtifact | None:
        """Hand the artifact (and its live locator) over to a memory record."""
        artifact, self.artifact = self.artifact, None
        return artifact

    # ── Teardown ─────────────────────────────────────────────

    def dispose(self) -> None:
        """Release everything the session holds and return to IDLE.

        Safe to call from any phase and any number of times.
        """
        self._generation += 1
        self._stop_clock()
        recorder = self._drop_recorder()
        if recorder is not None and recorder.state != RECORDER_INACTIVE:
            try:
                recorder.stop()
            except Exception as e:
                logger.warning("Recorder stop during dispose failed: %s", e)
        self._release_stream()
        self.locators.release(self.artifact)
        self.artifact = None
        self._chunks = []
        self._stopping = False
        if self._stop_event is not None:
            self._stop_event.set()
            self._stop_event = None
        self.elapsed_seconds = 0
        if self.phase is not CapturePhase.IDLE:
            logger.debug("Capture session disposed from %s", self.phase.value)
        self.phase = CapturePhase.IDLE

    # ── Internals ────────────────────────────────────────────

    def _on_data(self, token: object, chunk: bytes) -> None:
        if token is not self._recorder_token or not chunk:
            return
        if self.phase is CapturePhase.RECORDING or self._stopping:
            self._chunks.append(chunk)

    def _on_stop(self, token: object) -> None:
        if token is not self._recorder_token:
            return
        self._stop_seen = True
        if self._stop_event is not None:
            self._stop_event.set()

    def _on_tick(self) -> None:
        if self.phase is CapturePhase.RECORDING:
            self.elapsed_seconds += 1

    def _start_clock(self) -> None:
        if self._tick is not None:
            return
        self._tick = self.ticks.schedule(self.config.tick_interval, self._on_tick)

    def _stop_clock(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None

    def _drop_recorder(self) -> Recorder | None:
        recorder, self._recorder = self._recorder, None
        self._recorder_token = None
        return recorder

    def _release_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop_all_tracks()
            logger.debug("Device stream released")
