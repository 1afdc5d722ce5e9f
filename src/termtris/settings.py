"""Runtime configuration and optional persisted preferences."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from . import utils
from .utils import (
    DEFAULT_PORT,
    INTER_FRAME_US,
    MAX_PORT,
    MIN_PORT,
    SOUND_DIR,
    clamp,
    ensure_data_dirs,
    lenient_int,
    load_json,
    save_json,
)

MAX_LEVEL = 9
MAX_HANDICAP = 5
DEFAULT_TARGET_LINES = 25
MAX_TARGET_LINES = 99


class GameMode(str, Enum):
    """Available gameplay modes."""

    ENDLESS = "endless"
    TARGET = "target"
    VERSUS = "versus"


class NetRole(str, Enum):
    """Side of the peer connection this process plays."""

    NONE = "none"
    SERVER = "server"
    CLIENT = "client"


class Action(str, Enum):
    """Player intents a key can be bound to."""

    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    ROTATE = "rotate"
    ROTATE_BACK = "rotate_back"
    PAUSE = "pause"
    QUIT = "quit"


@dataclass(slots=True)
class Controls:
    """Key bindings; each action accepts several keys."""

    left: tuple[str, ...] = ("j", "KEY_LEFT")
    right: tuple[str, ...] = ("l", "KEY_RIGHT")
    down: tuple[str, ...] = ("k", "KEY_DOWN")
    rotate: tuple[str, ...] = ("i", "f", "KEY_UP")
    rotate_back: tuple[str, ...] = ("u", "d")
    pause: tuple[str, ...] = ("p", "\r")
    quit: tuple[str, ...] = ("\x1b",)

    def action_for(self, key: str) -> Action | None:
        """Return the action bound to a key, if any."""
        for action in Action:
            if key in getattr(self, action.value):
                return action
        return None


@dataclass(slots=True)
class Preferences:
    """Player preferences kept between sessions."""

    controls: Controls = field(default_factory=Controls)
    sound_dir: str = str(SOUND_DIR)
    frame_us: int = INTER_FRAME_US


@dataclass(slots=True)
class GameConfig:
    """Sanitized session configuration handed to the engine."""

    mode: GameMode = GameMode.ENDLESS
    level: int = 0
    handicap: int = 0
    target_lines: int = DEFAULT_TARGET_LINES
    role: NetRole = NetRole.NONE
    host: str = "localhost"
    port: int = DEFAULT_PORT
    seed: int | None = None
    preferences: Preferences = field(default_factory=Preferences)

    @classmethod
    def from_values(
        cls,
        mode: GameMode | str = GameMode.ENDLESS,
        level: Any = 0,
        handicap: Any = 0,
        target_lines: Any = DEFAULT_TARGET_LINES,
        role: NetRole | str = NetRole.NONE,
        host: str = "localhost",
        port: Any = DEFAULT_PORT,
        seed: int | None = None,
        preferences: Preferences | None = None,
    ) -> "GameConfig":
        """Build a config, clamping out-of-range values instead of rejecting them."""
        mode = GameMode(mode)
        role = NetRole(role)
        if role is not NetRole.NONE:
            mode = GameMode.VERSUS
        return cls(
            mode=mode,
            level=clamp(lenient_int(level), 0, MAX_LEVEL),
            handicap=clamp(lenient_int(handicap), 0, MAX_HANDICAP),
            target_lines=clamp(lenient_int(target_lines, DEFAULT_TARGET_LINES), 1, MAX_TARGET_LINES),
            role=role,
            host=host or "localhost",
            port=sanitize_port(port),
            seed=seed,
            preferences=preferences or Preferences(),
        )

    @property
    def starting_lines(self) -> int:
        return self.target_lines if self.mode is GameMode.TARGET else 0


def sanitize_port(value: Any) -> int:
    """Return a usable port; zero or garbage selects the default."""
    port = lenient_int(value)
    if port == 0:
        return DEFAULT_PORT
    return clamp(port, MIN_PORT, MAX_PORT)


class SettingsManager:
    """Load and save preferences from the data directory."""

    def __init__(self) -> None:
        self.preferences = self.load()

    def load(self) -> Preferences:
        """Load preferences from disk with safe defaults."""
        raw = load_json(utils.SETTINGS_FILE, {})
        if not isinstance(raw, dict):
            raw = {}
        prefs = Preferences()
        prefs.sound_dir = str(raw.get("sound_dir", prefs.sound_dir))
        prefs.frame_us = max(1000, lenient_int(raw.get("frame_us"), prefs.frame_us))
        prefs.controls = self._load_controls(raw.get("controls", {}), prefs.controls)
        return prefs

    @staticmethod
    def _load_controls(payload: Any, defaults: Controls) -> Controls:
        if not isinstance(payload, dict):
            return defaults
        values = {}
        for action in Action:
            keys = payload.get(action.value)
            if isinstance(keys, list) and all(isinstance(key, str) for key in keys):
                values[action.value] = tuple(keys)
            else:
                values[action.value] = getattr(defaults, action.value)
        return Controls(**values)

    def save(self) -> None:
        """Persist preferences to disk."""
        ensure_data_dirs()
        payload = asdict(self.preferences)
        payload["controls"] = {key: list(value) for key, value in payload["controls"].items()}
        save_json(utils.SETTINGS_FILE, payload)

    @property
    def sound_root(self) -> Path:
        return Path(self.preferences.sound_dir)
