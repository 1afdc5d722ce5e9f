"""Line-clear state machine: scanning, blinking, collapsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .board import Board
from .utils import BLINK_TICKS, SUSPEND_TICKS

MAX_MARKED = 4


class ClearPhase(Enum):
    SCANNING = auto()
    BLINKING = auto()
    COLLAPSING = auto()


@dataclass(slots=True)
class LineClearer:
    """Marks complete rows, holds them for the suspend window, then removes them."""

    phase: ClearPhase = ClearPhase.SCANNING
    marked: list[int] = field(default_factory=list)
    countdown: int = 0

    @property
    def suspended(self) -> bool:
        return self.countdown > 0

    @property
    def rows_visible(self) -> bool:
        """Blink state of the marked rows for the renderer."""
        if self.phase is not ClearPhase.BLINKING:
            return True
        return (self.countdown // BLINK_TICKS) % 2 == 0

    def scan(self, board: Board) -> int:
        """Mark complete rows and open the suspend window; return how many."""
        rows = board.complete_rows()[:MAX_MARKED]
        if not rows:
            return 0
        self.marked = rows
        self.countdown = SUSPEND_TICKS
        self.phase = ClearPhase.BLINKING
        return len(rows)

    def tick(self, board: Board) -> bool:
        """Advance the suspend window; return True on the tick rows collapse."""
        if not self.suspended:
            return False
        self.countdown -= 1
        if self.countdown > 0:
            return False
        self.collapse(board)
        return True

    def collapse(self, board: Board) -> None:
        self.phase = ClearPhase.COLLAPSING
        for row in sorted(self.marked):
            board.remove_row(row)
        self.marked = []
        self.phase = ClearPhase.SCANNING

    def settled(self, board: Board) -> Board:
        """Copy of the board with the marked rows already removed."""
        result = board.copy()
        for row in sorted(self.marked):
            result.remove_row(row)
        return result

    def shift_marked(self, count: int) -> None:
        """Follow marked rows after the stack was pushed up by penalty rows."""
        self.marked = [row - count for row in self.marked if row - count >= 0]
