"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Pomodian/settings.json

Usage::

    settings = load_settings()
    settings.work_minutes = 50
    save_settings(settings)
    orchestrator.update_settings(settings)   # the timer keeps its own copy
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import InvalidConfiguration

if TYPE_CHECKING:
    from .timer.engine import Mode


logger = logging.getLogger(__name__)

# Reuse the app-support directory from db.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomodian"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

_MINUTE_FIELDS = ("work_minutes", "short_break_minutes", "long_break_minutes")


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    long_break_interval: int = 4           # work sessions per long break
    auto_start_breaks: bool = False
    auto_start_work: bool = False

    # ── acknowledgment window ─────────────────────────────────────────
    grace_delay_seconds: float = 1.0       # before an auto-start fires
    ack_timeout_seconds: float = 10.0      # window auto-closes after this

    # ── notifications ─────────────────────────────────────────────────
    play_sound: bool = True
    notifications_enabled: bool = True     # completion banner in the front-end

    def duration_seconds(self, mode: Mode) -> int:
        """Full countdown length for *mode*."""
        from .timer.engine import Mode

        minutes = {
            Mode.WORK: self.work_minutes,
            Mode.SHORT_BREAK: self.short_break_minutes,
            Mode.LONG_BREAK: self.long_break_minutes,
        }[mode]
        return minutes * 60

    def validate(self) -> None:
        """Raise :class:`InvalidConfiguration` if any value is out of range."""
        for name in (*_MINUTE_FIELDS, "long_break_interval"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidConfiguration(f"{name} must be positive, got {value}")

        for name in ("grace_delay_seconds", "ack_timeout_seconds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfiguration(f"{name} must be a number, got {value!r}")
        if self.grace_delay_seconds < 0:
            raise InvalidConfiguration("grace_delay_seconds must not be negative")
        if self.ack_timeout_seconds <= 0:
            raise InvalidConfiguration("ack_timeout_seconds must be positive")


def load_settings(path: Path = SETTINGS_PATH) -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        settings = Settings(**filtered)
        settings.validate()
    except (OSError, ValueError, TypeError, AttributeError, InvalidConfiguration) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", path, exc)
        return Settings()
    return settings


def save_settings(settings: Settings, path: Path = SETTINGS_PATH) -> None:
    """Write settings to disk as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
