"""Memory records, the in-memory store and file export."""

from lifeline.memory.models import (
    CATEGORIES,
    EMOTIONS,
    MemoryRecord,
    VideoArtifact,
)
from lifeline.memory.locators import LocatorRegistry
from lifeline.memory.store import MemoryStore

__all__ = [
    "CATEGORIES", "EMOTIONS", "LocatorRegistry", "MemoryRecord", "MemoryStore", "VideoArtifact",
]
