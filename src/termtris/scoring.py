"""Score, level, line counter and drop period bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field

from .settings import GameMode
from .utils import INITIAL_PERIOD, clamp

LINE_COEFFICIENTS = (0, 40, 100, 300, 1200)
LINES_PER_LEVEL = 10
PERIODS: tuple[int, ...] = tuple(INITIAL_PERIOD - 2 * level for level in range(20))


def period_for(level: int) -> int:
    """Ticks between automatic drops at a level, clamped to the table."""
    return PERIODS[clamp(level, 0, len(PERIODS) - 1)]


def clear_score(count: int, level: int) -> int:
    """Points for clearing `count` rows at once."""
    return LINE_COEFFICIENTS[clamp(count, 0, len(LINE_COEFFICIENTS) - 1)] * (level + 1)


@dataclass(slots=True)
class ScoreKeeper:
    """Mutable score state for one session.

    In target mode `lines` counts down to zero; otherwise it counts cleared
    rows and drives the level.
    """

    mode: GameMode = GameMode.ENDLESS
    level: int = 0
    lines: int = 0
    score: int = 0
    period: int = field(init=False)

    def __post_init__(self) -> None:
        self.period = period_for(self.level)

    def record_clear(self, count: int) -> int:
        """Account for `count` cleared rows and return the points awarded."""
        for _ in range(count):
            self._count_line()
        self.period = period_for(self.level)
        points = clear_score(count, self.level)
        self.score += points
        return points

    def _count_line(self) -> None:
        if self.mode is GameMode.TARGET:
            self.lines = max(0, self.lines - 1)
            return
        self.lines += 1
        if self.lines % LINES_PER_LEVEL == 0:
            self.level = max(self.level, self.lines // LINES_PER_LEVEL)

    @property
    def target_reached(self) -> bool:
        return self.mode is GameMode.TARGET and self.lines <= 0
