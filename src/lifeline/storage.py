"""Persistent key-value store contract and the two stores shipped with lifeline.

Values are opaque JSON-serializable blobs. The journal uses two keys:
``birthdate`` (an ISO date string) and ``memories`` (a list of record objects).
"""

from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

BIRTHDATE_KEY = "birthdate"
MEMORIES_KEY = "memories"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStore(Protocol):
    """get/set of JSON blobs by key."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> bool: ...


class InMemoryStore:
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> bool:
        # Round-trip through JSON so non-serializable values fail like on disk
        try:
            self._data[key] = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            logger.warning("Refusing to store %s: %s", key, e)
            return False
        return True


class JsonFileStore:
    """One ``<key>.json`` file per key under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    def set(self, key: str, value: Any) -> bool:
        path = self._path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            logger.warning("Refusing to store %s: %s", key, e)
            return False
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            logger.warning("Could not write %s: %s", path, e)
            return False
        logger.debug("Wrote %s (%d bytes)", path, len(payload))
        return True
