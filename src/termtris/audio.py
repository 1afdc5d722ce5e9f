"""Raw PCM mixing: looping background track plus one sound effect at a time."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import BinaryIO, Protocol
import logging

import pygame

from .utils import AUDIO_CHANNELS, AUDIO_CHUNK, SAMPLE_RATE, SILENCE

logger = logging.getLogger(__name__)


class Sfx(str, Enum):
    """Sound effects, named after their file in the sfx directory."""

    DROP = "Drop"
    GRID_DROP = "Grid_drop"
    LINE = "Line"
    LOST = "Lost"
    MOVE = "Move"
    PAUSE = "Pause"
    ROTATION = "Rotation"
    TETRIS = "Tetris"
    WIN = "Win"


class AudioSink(Protocol):
    """Anything that accepts unsigned 8-bit PCM chunks."""

    def write(self, chunk: bytes) -> None: ...

    def close(self) -> None: ...


class PygameSink:
    """Queues PCM chunks on a dedicated pygame mixer channel."""

    def __init__(self, rate: int = SAMPLE_RATE, channels: int = AUDIO_CHANNELS) -> None:
        # size=8 selects unsigned 8-bit samples
        pygame.mixer.init(frequency=rate, size=8, channels=channels, buffer=AUDIO_CHUNK // channels)
        init = pygame.mixer.get_init()
        if init is None or init[1] != 8:
            pygame.mixer.quit()
            raise pygame.error(f"unsigned 8-bit output not available (got {init})")
        self.channels = init[2]
        self.channel = pygame.mixer.Channel(0)

    def write(self, chunk: bytes) -> None:
        usable = len(chunk) - len(chunk) % self.channels
        if usable <= 0:
            return
        sound = pygame.mixer.Sound(buffer=chunk[:usable])
        if self.channel.get_busy():
            self.channel.queue(sound)
        else:
            self.channel.play(sound)

    def close(self) -> None:
        pygame.mixer.quit()


def open_sink() -> AudioSink | None:
    """Open the sound device, or return None when it is unavailable."""
    try:
        return PygameSink()
    except pygame.error as exc:
        logger.warning("sound device unavailable: %s", exc)
        return None


def mix(background: bytes, effect: bytes) -> bytes:
    """Overlay effect samples onto background samples around the silence bias."""
    mixed = bytearray(background)
    for i, sample in enumerate(effect[: len(mixed)]):
        mixed[i] = max(0, min(255, mixed[i] + sample - SILENCE))
    return bytes(mixed)


class AudioMixer:
    """Loops background music and overlays at most one active sound effect.

    A mixer without a sink or background track is disabled: every call is a
    no-op and the game runs silently.
    """

    def __init__(
        self,
        sink: AudioSink | None,
        background: BinaryIO | None,
        effects: dict[Sfx, BinaryIO] | None = None,
        chunk_size: int = AUDIO_CHUNK,
    ) -> None:
        self.sink = sink
        self.background = background
        self.effects = effects or {}
        self.chunk_size = chunk_size
        self.active: BinaryIO | None = None
        self.enabled = sink is not None and background is not None

    @classmethod
    def disabled(cls) -> "AudioMixer":
        return cls(None, None)

    @classmethod
    def load(cls, root: Path, sink: AudioSink | None) -> "AudioMixer":
        """Open bgm.raw and sfx/*.raw under root; missing effects are skipped."""
        if sink is None:
            return cls.disabled()
        try:
            background = (root / "bgm.raw").open("rb")
        except OSError as exc:
            logger.warning("background track unavailable: %s", exc)
            sink.close()
            return cls.disabled()

        effects: dict[Sfx, BinaryIO] = {}
        for effect in Sfx:
            path = root / "sfx" / f"{effect.value}.raw"
            try:
                effects[effect] = path.open("rb")
            except OSError:
                logger.warning("sound effect missing: %s", path)
        return cls(sink, background, effects)

    @property
    def busy(self) -> bool:
        """True while a sound effect is still playing."""
        return self.active is not None

    def play(self, effect: Sfx) -> None:
        """Make `effect` the active one, rewinding any effect cut short."""
        if not self.enabled:
            return
        if self.active is not None:
            self.active.seek(0)
        self.active = self.effects.get(effect)

    def update(self, silent: bool = False) -> None:
        """Produce and write one chunk; `silent` replaces the music with silence."""
        if not self.enabled or self.sink is None or self.background is None:
            return

        if silent:
            chunk = bytes((SILENCE,)) * self.chunk_size
        else:
            chunk = self.background.read(self.chunk_size)
            if not chunk:
                self.background.seek(0)
                chunk = self.background.read(self.chunk_size)
        if not chunk:
            return

        if self.active is not None:
            effect = self.active.read(len(chunk))
            if not effect:
                self.active.seek(0)
                self.active = None
            else:
                chunk = mix(chunk, effect)

        self.sink.write(chunk)

    def close(self) -> None:
        if self.background is not None:
            self.background.close()
        for stream in self.effects.values():
            stream.close()
        if self.sink is not None:
            self.sink.close()
        self.enabled = False
        self.active = None
