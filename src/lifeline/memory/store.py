"""In-memory collection of memory records, one per calendar day.

The dict is the source of truth while the process runs; ``load``/``persist``
move it to and from a key-value store. Every mutation is a single dict
assignment or deletion, so readers never see a half-updated record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from lifeline.memory.locators import LocatorRegistry
from lifeline.errors import LifelineError
from lifeline.memory.models import MemoryRecord
from lifeline.storage import MEMORIES_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class MemoryStore:
    """CRUD over memory records with at-most-one-record-per-date."""

    def __init__(self, locators: LocatorRegistry | None = None) -> None:
        self.locators = locators or LocatorRegistry()
        self._records: dict[str, MemoryRecord] = {}

    # ── Queries ───────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, date: str) -> bool:
        return date in self._records

    def __iter__(self) -> Iterator[MemoryRecord]:
        return iter(self.records())

    def get(self, date: str) -> MemoryRecord | None:
        return self._records.get(date)

    def records(self) -> list[MemoryRecord]:
        """Snapshot of all records, ordered by date."""
        return [self._records[d] for d in sorted(self._records)]

    def dates(self) -> list[str]:
        return sorted(self._records)

    # ── Mutations ─────────────────────────────────────────────

    def save(self, record: MemoryRecord) -> MemoryRecord | None:
        """Insert or replace the record for ``record.date``.

        A blank title deletes whatever was stored for that date. Returns the
        stored record, or None when the save turned into a delete.
        """
        if record.is_blank:
            self.delete(record.date)
            return None

        previous = self._records.get(record.date)
        self._records[record.date] = record
        if previous is not None and previous.video is not record.video:
            self.locators.release(previous.video)
        logger.debug(
            "%s memory %s: %s",
            "Replaced" if previous is not None else "Saved",
            record.date,
            record.title[:60],
        )
        return record

    def delete(self, date: str) -> bool:
        previous = self._records.pop(date, None)
        if previous is None:
            return False
        self.locators.release(previous.video)
        logger.debug("Deleted memory %s", date)
        return True

    def clear(self) -> None:
        for record in self._records.values():
            self.locators.release(record.video)
        self._records = {}

    # ── Persistence ───────────────────────────────────────────

    def load(self, kv: KeyValueStore) -> int:
        """Replace the collection with what ``kv`` holds. Returns records loaded."""
        raw = kv.get(MEMORIES_KEY)
        loaded: dict[str, MemoryRecord] = {}
        if raw is not None and not isinstance(raw, list):
            logger.warning("Ignoring stored memories: expected a list, got %s", type(raw).__name__)
            raw = None
        for item in raw or []:
            try:
                record = MemoryRecord.from_dict(item)
            except (LifelineError, ValueError, KeyError, TypeError) as e:
                logger.warning("Skipping malformed memory %r: %s", item, e)
                continue
            if record.is_blank:
                logger.debug("Skipping untitled memory %s", record.date)
                continue
            # Later entries win, matching replace-on-save
            loaded[record.date] = record
        self.clear()
        self._records = loaded
        logger.info("Loaded %d memories", len(loaded))
        return len(loaded)

    def persist(self, kv: KeyValueStore) -> bool:
        ok = kv.set(MEMORIES_KEY, [r.to_dict() for r in self.records()])
        if not ok:
            logger.warning("Failed to persist %d memories", len(self._records))
        return ok
