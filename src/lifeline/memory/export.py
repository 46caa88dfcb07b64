"""Export artifacts and records as standalone files.

Videos are written as ``memory-<date>.<container>``; records as markdown with
YAML front matter (``memory-<date>.md``) so they stay readable outside lifeline.
"""

from __future__ import annotations

import logging
from pathlib import Path

import frontmatter
import yaml

from lifeline.memory.models import CATEGORIES, EMOTIONS, MemoryRecord, VideoArtifact

logger = logging.getLogger(__name__)


def export_filename(date: str, extension: str) -> str:
    return f"memory-{date}.{extension}"


def export_video(artifact: VideoArtifact, date: str, dest_dir: Path) -> Path:
    """Write the artifact's bytes. Raises ValueError for placeholder artifacts."""
    if artifact.data is None:
        raise ValueError(f"No recorded data for {date}: only a placeholder was stored")
    dest_dir.mkdir(parents=True, exist_ok=True)
    path = dest_dir / export_filename(date, artifact.container)
    path.write_bytes(artifact.data)
    logger.info("Exported video %s (%d bytes)", path, artifact.size)
    return path


def render_markdown(record: MemoryRecord) -> str:
    emotion = EMOTIONS[record.emotion]
    category = CATEGORIES[record.category]
    heading = f"# {emotion.icon} {record.title}\n\n_{category.name} · {emotion.name}_\n\n"
    post = frontmatter.Post(
        heading + record.description,
        date=record.date,
        title=record.title,
        emotion=record.emotion,
        category=record.category,
        location=record.location,
        people=record.people,
    )
    if record.video is not None:
        post["video"] = export_filename(record.date, record.video.container)
    return frontmatter.dumps(post) + "\n"


def export_markdown(record: MemoryRecord, dest_dir: Path) -> Path:
    dest_dir.mkdir(parents=True, exist_ok=True)
    path = dest_dir / export_filename(record.date, "md")
    path.write_text(render_markdown(record), encoding="utf-8")
    logger.info("Exported memory %s to %s", record.date, path)
    return path


def load_markdown(path: Path) -> MemoryRecord:
    """Read a file written by ``export_markdown`` back into a record (no video).

    Raises ValueError when the front matter is not valid YAML or names an
    invalid date, emotion or category.
    """
    try:
        post = frontmatter.load(str(path))
    except yaml.YAMLError as e:
        raise ValueError(f"Bad front matter in {path}: {e}") from e
    content = post.content.lstrip()
    if content.startswith("# "):
        # Drop the heading and tag line rendered on export
        parts = content.split("\n\n", 2)
        content = parts[2] if len(parts) == 3 else ""
    return MemoryRecord(
        date=str(post.get("date", "")),
        title=str(post.get("title", "") or ""),
        description=content.strip(),
        emotion=str(post.get("emotion", "happy")),
        category=str(post.get("category", "life")),
        location=str(post.get("location", "") or ""),
        people=str(post.get("people", "") or ""),
    )
