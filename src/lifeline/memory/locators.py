"""Transient locators for recorded artifacts.

A locator is a revocable handle a presentation layer uses to display an
artifact without copying its bytes. Every locator created must eventually be
revoked; ``live_count`` lets callers and tests check nothing leaked.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lifeline.memory.models import VideoArtifact

logger = logging.getLogger(__name__)

_SCHEME = "blob:lifeline/"


class LocatorRegistry:
    """Issues and revokes locators, keeping the artifact reachable while live."""

    def __init__(self) -> None:
        self._live: dict[str, VideoArtifact] = {}

    @property
    def live_count(self) -> int:
        return len(self._live)

    def create(self, artifact: VideoArtifact) -> str:
        locator = _SCHEME + uuid.uuid4().hex
        self._live[locator] = artifact
        logger.debug("Locator created: %s (%d bytes)", locator, artifact.size)
        return locator

    def resolve(self, locator: str) -> VideoArtifact | None:
        return self._live.get(locator)

    def is_live(self, locator: str | None) -> bool:
        return locator is not None and locator in self._live

    def revoke(self, locator: str | None) -> bool:
        if locator is None or locator not in self._live:
            return False
        del self._live[locator]
        logger.debug("Locator revoked: %s", locator)
        return True

    def attach(self, artifact: VideoArtifact) -> str:
        """Give ``artifact`` a fresh locator, revoking its previous one first."""
        self.release(artifact)
        artifact.locator = self.create(artifact)
        return artifact.locator

    def release(self, artifact: VideoArtifact | None) -> None:
        """Invalidate the artifact's locator, if it has one."""
        if artifact is None or artifact.locator is None:
            return
        self.revoke(artifact.locator)
        artifact.locator = None
