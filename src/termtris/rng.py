"""Linear-congruential generator used for pieces, crumbles and the void column."""

from __future__ import annotations

from typing import Sequence, TypeVar
import time

T = TypeVar("T")

_MULTIPLIER = 1103515245
_INCREMENT = 12345
_STATE_MASK = 0xFFFFFFFF
_OUTPUT_MASK = (1 << 30) - 1


class LcgRandom:
    """Reproducible 32-bit LCG; every draw lies in [0, 2**30).

    Seeded once from the wall clock when no seed is given, so two sessions
    started in the same second produce the same piece sequence.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = int(time.time())
        self.state = seed & _STATE_MASK

    def next(self) -> int:
        """Advance the state and return the next draw."""
        self.state = (_MULTIPLIER * self.state + _INCREMENT) & _STATE_MASK
        return self.state & _OUTPUT_MASK

    def below(self, bound: int) -> int:
        """Return a draw reduced modulo bound."""
        return self.next() % bound

    def piece(self) -> int:
        """Return a shape index in 0..6."""
        return self.below(7)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.below(len(items))]
