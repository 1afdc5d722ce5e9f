"""Shared constants and utility helpers for termtris."""

from __future__ import annotations

from pathlib import Path
from typing import Any
import json

BOARD_ROWS = 18
BOARD_COLS = 10
EMPTY = 0

INITIAL_PERIOD = 50
INTER_FRAME_US = 23000
SUSPEND_TICKS = 60
BLINK_TICKS = 10
SOFT_DROP_FREEZE = 10
RESULT_DELAY_S = 2.0

AUDIO_CHUNK = 2048
SAMPLE_RATE = 44100
AUDIO_CHANNELS = 2
SILENCE = 128

DEFAULT_PORT = 37280
MIN_PORT = 1025
MAX_PORT = 65535

DATA_DIR = Path(".termtris")
SETTINGS_FILE = DATA_DIR / "settings.json"
LOG_FILE = DATA_DIR / "termtris.log"
SOUND_DIR = Path("sound")


def ensure_data_dirs() -> None:
    """Create the data directory for settings and logs."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def clamp(value: int, minimum: int, maximum: int) -> int:
    """Clamp a value into a closed interval."""
    return max(minimum, min(maximum, value))


def lenient_int(text: str | int | None, default: int = 0) -> int:
    """Parse an integer, returning default for anything unparsable."""
    if text is None:
        return default
    try:
        return int(text)
    except (TypeError, ValueError):
        return default


def load_json(path: Path, default: Any) -> Any:
    """Load JSON data, returning default when missing or malformed."""
    if not path.exists():
        return default
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (json.JSONDecodeError, OSError):
        return default


def save_json(path: Path, payload: Any) -> None:
    """Save JSON data with deterministic formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)
