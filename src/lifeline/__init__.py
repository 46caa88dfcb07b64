"""lifeline: dated life memories on a week-by-week timeline."""

from lifeline.capture.session import CapturePhase, CaptureSession
from lifeline.datemath import BirthProfile, Stats, compute_stats, month_grid
from lifeline.journal import Editor, Journal
from lifeline.memory.models import MemoryRecord, VideoArtifact
from lifeline.memory.store import MemoryStore
from lifeline.timeline.index import TemporalIndex
from lifeline.timeline.navigation import NavigationState
from lifeline.timeline.period import Granularity

__version__ = "0.1.0"
__all__ = [
    "BirthProfile", "CapturePhase", "CaptureSession", "Editor", "Granularity",
    "Journal", "MemoryRecord", "MemoryStore", "NavigationState", "Stats",
    "TemporalIndex", "VideoArtifact", "compute_stats", "month_grid",
]
