"""Application settings with JSON persistence.

Settings are stored at::

    $XDG_CONFIG_HOME/pomogate/config.json   (~/.config/pomogate/config.json)

Durations are stored as whole seconds but may be written by hand as
``"20m"``, ``"90s"`` or ``"1m30s"``.  A missing file means defaults; a
file that exists but does not parse, or holds unknown keys or invalid
values, is a ``SettingsError``.

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any

from .errors import SettingsError


# ── paths ─────────────────────────────────────────────────────────────────


def _xdg_dir(env_var: str, fallback: str) -> Path:
    base = os.environ.get(env_var) or str(Path.home() / fallback)
    return Path(base) / "pomogate"


CONFIG_DIR = _xdg_dir("XDG_CONFIG_HOME", ".config")
DATA_DIR = _xdg_dir("XDG_DATA_HOME", ".local/share")
STATE_DIR = _xdg_dir("XDG_STATE_HOME", ".local/state")

SETTINGS_PATH = CONFIG_DIR / "config.json"
STATS_PATH = DATA_DIR / "stats.db"
LOG_DIR = STATE_DIR / "logs"
SOUNDS_DIR = DATA_DIR / "sounds"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── pomodoro ──────────────────────────────────────────────────────
    work_duration: int = 20 * 60           # seconds
    break_duration: int = 5 * 60
    long_break_duration: int = 10 * 60
    long_break_every: int = 4              # pomodori per long break
    notification_duration: int = 60       # heads-up before a break
    forgive_duration: int = 8
    overtime_duration: int = 2 * 60
    require_work_goal: bool = True

    # ── notifications & audio ─────────────────────────────────────────
    notifications_enabled: bool = True
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── appearance ────────────────────────────────────────────────────
    font_family: str = "sans-serif"
    background: str = "#1A1A2E"
    text: str = "#E2E2F0"
    accent: str = "#CBA6F7"
    danger: str = "#F38BA8"


DURATION_FIELDS = (
    "work_duration",
    "break_duration",
    "long_break_duration",
    "notification_duration",
    "forgive_duration",
    "overtime_duration",
)
COLOR_FIELDS = ("background", "text", "accent", "danger")

_DURATION_RE = re.compile(r"^\s*(?:(\d+)\s*m)?\s*(?:(\d+)\s*s)?\s*$")
_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


# ── parsing ───────────────────────────────────────────────────────────────


def parse_duration(value: Any) -> int:
    """Whole seconds from an int or a ``"<m>m<s>s"`` string."""
    if isinstance(value, bool):
        raise SettingsError(f"Invalid duration {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _DURATION_RE.match(value)
        if match and any(match.groups()):
            minutes, seconds = (int(g or 0) for g in match.groups())
            return minutes * 60 + seconds
    raise SettingsError(
        f"Invalid duration {value!r}: use seconds or a number followed "
        "by m for minutes and/or s for seconds"
    )


def format_duration(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    if minutes and secs:
        return f"{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m"
    return f"{secs}s"


def _check_type(name: str, value: Any, expected: type) -> None:
    if expected is int and isinstance(value, bool):
        raise SettingsError(f"{name} must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise SettingsError(
            f"{name} must be {expected.__name__}, got {type(value).__name__}"
        )


def settings_from_dict(data: Any) -> Settings:
    """Validate raw JSON data into ``Settings``."""
    if not isinstance(data, dict):
        raise SettingsError("Config must be a JSON object")

    valid_keys = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - valid_keys)
    if unknown:
        raise SettingsError(f"Unknown config keys: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    defaults = Settings()
    for name, raw in data.items():
        if name in DURATION_FIELDS:
            values[name] = parse_duration(raw)
        else:
            _check_type(name, raw, type(getattr(defaults, name)))
            values[name] = raw

    settings = Settings(**values)
    validate_settings(settings)
    return settings


def validate_settings(settings: Settings) -> None:
    for name in DURATION_FIELDS:
        if getattr(settings, name) < 0:
            raise SettingsError(f"{name} must not be negative")
    for name in ("work_duration", "break_duration", "long_break_duration"):
        if getattr(settings, name) == 0:
            raise SettingsError(f"{name} must be positive")
    if settings.long_break_every < 1:
        raise SettingsError("long_break_every must be at least 1")
    if not 0 <= settings.sound_volume <= 100:
        raise SettingsError("sound_volume must be between 0 and 100")
    if not settings.font_family.strip():
        raise SettingsError("font_family must not be empty")
    for name in COLOR_FIELDS:
        if not _COLOR_RE.match(getattr(settings, name)):
            raise SettingsError(
                f"{name} must be a hex color like #RRGGBB, "
                f"got {getattr(settings, name)!r}"
            )


# ── persistence ───────────────────────────────────────────────────────────


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    data = asdict(settings)
    for name in DURATION_FIELDS:
        data[name] = format_duration(data[name])
    return data


def default_settings_json() -> str:
    return json.dumps(settings_to_dict(Settings()), indent=2) + "\n"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults when absent."""
    path = path or SETTINGS_PATH
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Settings()
    except OSError as exc:
        raise SettingsError(f"Cannot read {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Cannot parse {path}: {exc}") from exc
    try:
        return settings_from_dict(data)
    except SettingsError as exc:
        raise SettingsError(f"Invalid config {path}: {exc}") from exc


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(settings_to_dict(settings), indent=2) + "\n",
        encoding="utf-8",
    )


def write_default_settings(path: Path | None = None) -> Path:
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_settings_json(), encoding="utf-8")
    return path
