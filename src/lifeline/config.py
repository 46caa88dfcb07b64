"""Configuration loading from environment variables and lifeline.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_HOME_DIR = Path.home() / ".lifeline"
_DEFAULT_DATA_DIR = _HOME_DIR / "data"
_DEFAULT_EXPORT_DIR = _HOME_DIR / "exports"
_CONFIG_FILENAME = "lifeline.toml"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class CaptureConfig:
    """Video capture settings."""

    container: str = "webm"
    mime_type: str = "video/webm"
    video: bool = True
    audio: bool = True
    tick_interval: float = 1.0
    stop_timeout: float = 5.0

    @property
    def constraints(self) -> dict[str, bool]:
        return {"video": self.video, "audio": self.audio}


@dataclass
class TimelineConfig:
    """Timeline settings."""

    horizon_weeks: int = 4160


@dataclass
class LifelineConfig:
    """Top-level Lifeline configuration."""

    capture: CaptureConfig = field(default_factory=CaptureConfig)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    data_dir: Path = _DEFAULT_DATA_DIR
    export_dir: Path = _DEFAULT_EXPORT_DIR
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> LifelineConfig:
    """Load configuration from environment variables and optional lifeline.toml.

    Priority: environment variables > lifeline.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        for candidate in [Path.cwd() / _CONFIG_FILENAME, _HOME_DIR / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    capture_data = file_data.get("capture", {})
    timeline_data = file_data.get("timeline", {})

    config = LifelineConfig(
        capture=CaptureConfig(
            container=os.getenv("LIFELINE_CONTAINER", capture_data.get("container", "webm")),
            mime_type=capture_data.get("mime_type", "video/webm"),
            video=_env_flag("LIFELINE_CAPTURE_VIDEO", capture_data.get("video", True)),
            audio=_env_flag("LIFELINE_CAPTURE_AUDIO", capture_data.get("audio", True)),
            tick_interval=float(capture_data.get("tick_interval", 1.0)),
            stop_timeout=float(
                os.getenv("LIFELINE_STOP_TIMEOUT", capture_data.get("stop_timeout", 5.0))
            ),
        ),
        timeline=TimelineConfig(
            horizon_weeks=int(timeline_data.get("horizon_weeks", 4160)),
        ),
        data_dir=Path(
            os.getenv("LIFELINE_DATA_DIR", file_data.get("data_dir", str(_DEFAULT_DATA_DIR)))
        ).expanduser(),
        export_dir=Path(
            os.getenv("LIFELINE_EXPORT_DIR", file_data.get("export_dir", str(_DEFAULT_EXPORT_DIR)))
        ).expanduser(),
        log_level=os.getenv("LIFELINE_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
