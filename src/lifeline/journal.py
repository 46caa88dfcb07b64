"""Journal — ties the birth profile, memory store, timeline and capture together.

Responsibilities:
1. Load/persist the birth profile and memories through a key-value store
2. Drill-down navigation and the cells for the current view
3. Memory editor lifecycle: one open editor at a time, each with its own
   capture session, torn down through a single routine on save, close or shutdown
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any

from lifeline.capture.base import DeviceProvider, TickSource
from lifeline.capture.session import CaptureSession
from lifeline.config import LifelineConfig
from lifeline.datemath import BirthProfile, Clock, Stats, SystemClock, parse_date
from lifeline.memory.export import export_markdown, load_markdown
from lifeline.memory.locators import LocatorRegistry
from lifeline.memory.models import MemoryRecord
from lifeline.memory.store import MemoryStore
from lifeline.storage import BIRTHDATE_KEY, KeyValueStore
from lifeline.timeline.index import TemporalIndex
from lifeline.timeline.navigation import NavigationState
from lifeline.timeline.period import DayPeriod, Granularity, MonthPeriod, YearPeriod
from lifeline.timeline.views import (
    DayCell,
    PeriodCell,
    annual_cells,
    monthly_cells,
    weekly_grid,
)

logger = logging.getLogger(__name__)


@dataclass
class Editor:
    """An open memory editor: a working copy of the record plus its recorder."""

    draft: MemoryRecord
    capture: CaptureSession | None = None

    def update(self, **fields: Any) -> MemoryRecord:
        """Change draft fields. Unknown emotion/category keys raise UnknownKeyError."""
        fields.pop("date", None)
        fields.pop("video", None)
        self.draft = replace(self.draft, **fields)
        return self.draft

    def clear_video(self) -> None:
        """Drop the draft's existing video; takes effect when the editor is saved."""
        self.draft.video = None


class Journal:
    """Top-level entry point for a presentation layer."""

    def __init__(
        self,
        config: LifelineConfig,
        kv: KeyValueStore,
        *,
        provider: DeviceProvider | None = None,
        clock: Clock | None = None,
        ticks: TickSource | None = None,
    ) -> None:
        self.config = config
        self.kv = kv
        self.provider = provider
        self.clock = clock or SystemClock()
        self.ticks = ticks
        self.locators = LocatorRegistry()
        self.memories = MemoryStore(self.locators)
        self.index = TemporalIndex(self.memories, self.clock)
        self.navigation = NavigationState()
        self.profile: BirthProfile | None = None
        self._editor: Editor | None = None

    # ── Persistence ──────────────────────────────────────────

    def load(self) -> None:
        raw = self.kv.get(BIRTHDATE_KEY)
        if isinstance(raw, str) and raw:
            try:
                self.profile = BirthProfile.from_iso(raw)
            except ValueError:
                logger.warning("Ignoring stored birth date %r", raw)
        self.memories.load(self.kv)

    def set_birth_date(self, value: str | date) -> BirthProfile:
        birth = parse_date(value) if isinstance(value, str) else value
        self.profile = BirthProfile(birth)
        self.kv.set(BIRTHDATE_KEY, self.profile.to_iso())
        self.navigation.reset()
        logger.info("Birth date set to %s", self.profile.to_iso())
        return self.profile

    def stats(self) -> Stats | None:
        if self.profile is None:
            return None
        return self.profile.stats(self.clock, self.config.timeline.horizon_weeks)

    # ── Memories ─────────────────────────────────────────────

    def save_memory(self, record: MemoryRecord) -> MemoryRecord | None:
        stored = self.memories.save(record)
        self.memories.persist(self.kv)
        return stored

    def delete_memory(self, date: str) -> bool:
        removed = self.memories.delete(date)
        if removed:
            self.memories.persist(self.kv)
        return removed

    def export_memory(self, date: str, dest_dir: Path | None = None) -> Path | None:
        record = self.memories.get(date)
        if record is None:
            return None
        return export_markdown(record, dest_dir or self.config.export_dir)

    def import_memory(self, path: Path) -> MemoryRecord | None:
        """Save a record read from an exported markdown file.

        Replaces the text of any memory already stored for that day but keeps
        its video, since the markdown only names the video file.
        """
        record = load_markdown(path)
        existing = self.memories.get(record.date)
        if existing is not None and record.video is None:
            record.video = existing.video
        stored = self.save_memory(record)
        logger.info("Imported memory %s from %s", record.date, path)
        return stored

    # ── Navigation ───────────────────────────────────────────

    def descend(self, period: int | str) -> bool:
        return self.navigation.descend(period)

    def ascend(self) -> bool:
        return self.navigation.ascend()

    def annual_view(self) -> list[PeriodCell]:
        if self.profile is None:
            return []
        return annual_cells(self.index, self.profile.birth_date)

    def monthly_view(self) -> list[PeriodCell]:
        selected = self.navigation.selected
        if not isinstance(selected, YearPeriod):
            return []
        return monthly_cells(self.index, selected.year)

    def weekly_view(self) -> list[list[DayCell | None]]:
        selected = self.navigation.selected
        if not isinstance(selected, MonthPeriod):
            return []
        return weekly_grid(self.index, selected.year, selected.month)

    def daily_view(self) -> MemoryRecord | None:
        selected = self.navigation.selected
        if not isinstance(selected, DayPeriod):
            return None
        return self.index.memory_for_day(selected.day)

    def view(self):
        """Cells for whatever granularity the navigation is at."""
        granularity = self.navigation.granularity
        if granularity is Granularity.ANNUAL:
            return self.annual_view()
        if granularity is Granularity.MONTHLY:
            return self.monthly_view()
        if granularity is Granularity.WEEKLY:
            return self.weekly_view()
        return self.daily_view()

    # ── Editor lifecycle ─────────────────────────────────────

    @property
    def editor(self) -> Editor | None:
        return self._editor

    def open_editor(self, date: str) -> Editor:
        """Open the editor for ``date``, closing any editor already open."""
        parse_date(date)
        self._teardown_editor()
        existing = self.memories.get(date)
        draft = existing.copy() if existing is not None else MemoryRecord(date=date)
        capture = None
        if self.provider is not None:
            capture = CaptureSession(
                self.provider,
                date=date,
                config=self.config.capture,
                ticks=self.ticks,
                locators=self.locators,
            )
        self._editor = Editor(draft=draft, capture=capture)
        logger.debug("Editor opened for %s (%s)", date, "existing" if existing else "new")
        return self._editor

    def save_editor(self) -> MemoryRecord | None:
        """Persist the draft (a blank title deletes the date's record) and close."""
        editor = self._editor
        if editor is None:
            return None
        try:
            record = editor.draft
            artifact = editor.capture.detach_artifact() if editor.capture else None
            if artifact is not None:
                record.video = artifact
            stored = self.save_memory(record)
            if stored is None and artifact is not None:
                self.locators.release(artifact)
            return stored
        finally:
            self._teardown_editor()

    def close_editor(self) -> None:
        """Discard the draft and release the capture session."""
        self._teardown_editor()

    def shutdown(self) -> None:
        """Release everything before the host goes away."""
        self._teardown_editor()
        logger.debug("Journal shut down (%d live locators)", self.locators.live_count)

    def _teardown_editor(self) -> None:
        editor, self._editor = self._editor, None
        if editor is None:
            return
        if editor.capture is not None:
            editor.capture.dispose()
