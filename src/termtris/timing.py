"""Constant inter-frame pacing."""

from __future__ import annotations

from typing import Callable
import time

from .utils import INTER_FRAME_US


class FramePacer:
    """Sleeps away whatever is left of the frame since the previous call."""

    def __init__(
        self,
        frame_us: int = INTER_FRAME_US,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.frame_s = frame_us / 1_000_000
        self.clock = clock
        self.sleep = sleep
        self.last = clock()

    def wait(self) -> float:
        """Block until a full frame has elapsed; return the time slept."""
        elapsed = self.clock() - self.last
        remaining = self.frame_s - elapsed
        if remaining > 0:
            self.sleep(remaining)
        else:
            remaining = 0.0
        self.last = self.clock()
        return remaining
