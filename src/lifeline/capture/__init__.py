"""Video capture: device contracts, locators and the recording session."""

from lifeline.memory.locators import LocatorRegistry
from lifeline.capture.base import DeviceProvider, Recorder, Stream, TickHandle, TickSource
from lifeline.capture.clock import AsyncioTickSource
from lifeline.capture.session import CapturePhase, CaptureSession

__all__ = [
    "AsyncioTickSource", "CapturePhase", "CaptureSession", "DeviceProvider",
    "LocatorRegistry", "Recorder", "Stream", "TickHandle", "TickSource",
]
