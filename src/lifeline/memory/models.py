"""Memory record data model and the emotion/category tables."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from lifeline.datemath import parse_date
from lifeline.errors import UnknownKeyError


@dataclass(frozen=True)
class Label:
    icon: str
    name: str


EMOTIONS: dict[str, Label] = {
    "happy": Label("😊", "Happy"),
    "excited": Label("🤩", "Excited"),
    "peaceful": Label("😌", "Peaceful"),
    "grateful": Label("🙏", "Grateful"),
    "loved": Label("❤️", "Loved"),
    "accomplished": Label("🎉", "Accomplished"),
    "thoughtful": Label("🤔", "Thoughtful"),
    "adventurous": Label("🗺️", "Adventurous"),
}

CATEGORIES: dict[str, Label] = {
    "life": Label("♥", "Life"),
    "travel": Label("📍", "Travel"),
    "people": Label("👥", "People"),
    "achievement": Label("★", "Achievement"),
    "moment": Label("🕒", "Moment"),
}

DEFAULT_EMOTION = "happy"
DEFAULT_CATEGORY = "life"


def validate_emotion(key: str) -> str:
    if key not in EMOTIONS:
        raise UnknownKeyError(f"Unknown emotion: {key!r} (expected one of {list(EMOTIONS)})")
    return key


def validate_category(key: str) -> str:
    if key not in CATEGORIES:
        raise UnknownKeyError(f"Unknown category: {key!r} (expected one of {list(CATEGORIES)})")
    return key


@dataclass
class VideoArtifact:
    """A finalized recording.

    ``data`` is None for placeholders restored from persistent storage, since
    binary payloads only live for the session that recorded them.
    """

    data: bytes | None
    container: str = "webm"
    mime_type: str = "video/webm"
    size: int = 0
    locator: str | None = None

    @classmethod
    def from_chunks(cls, chunks: list[bytes], container: str, mime_type: str) -> VideoArtifact:
        data = b"".join(chunks)
        return cls(data=data, container=container, mime_type=mime_type, size=len(data))

    @property
    def available(self) -> bool:
        return self.data is not None

    def placeholder(self) -> dict[str, Any]:
        return {"container": self.container, "mimeType": self.mime_type, "size": self.size}

    @classmethod
    def from_placeholder(cls, data: dict[str, Any]) -> VideoArtifact:
        return cls(
            data=None,
            container=str(data.get("container", "webm")),
            mime_type=str(data.get("mimeType", "video/webm")),
            size=int(data.get("size", 0)),
        )


@dataclass
class MemoryRecord:
    """One memory, keyed by its calendar day."""

    date: str
    title: str = ""
    description: str = ""
    emotion: str = DEFAULT_EMOTION
    category: str = DEFAULT_CATEGORY
    location: str = ""
    people: str = ""
    video: VideoArtifact | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for name in ("title", "description", "location", "people"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a string")
        parse_date(self.date)
        validate_emotion(self.emotion)
        validate_category(self.category)

    @property
    def is_blank(self) -> bool:
        return not self.title.strip()

    def copy(self) -> MemoryRecord:
        """Shallow copy; the video artifact object is shared, not duplicated."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "title": self.title,
            "description": self.description,
            "emotion": self.emotion,
            "category": self.category,
            "location": self.location,
            "people": self.people,
            "video": self.video.placeholder() if self.video else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryRecord:
        """Build a record from stored data. Raises TypeError/ValueError/KeyError when malformed."""
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        video = data.get("video")
        return cls(
            date=_text(data, "date", None),
            title=_text(data, "title"),
            description=_text(data, "description"),
            emotion=_text(data, "emotion", DEFAULT_EMOTION),
            category=_text(data, "category", DEFAULT_CATEGORY),
            location=_text(data, "location"),
            people=_text(data, "people"),
            video=VideoArtifact.from_placeholder(video) if isinstance(video, dict) else None,
        )


def _text(data: dict[str, Any], key: str, default: str | None = "") -> str:
    if key not in data:
        if default is None:
            raise KeyError(key)
        return default
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value
