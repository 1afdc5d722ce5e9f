"""Falling piece: committed position plus a tentative move awaiting validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .board import Board
from .pieces import lit_cells, orientation_mask, rotate, spawn_row

SPAWN_COL = 3


class MoveKind(Enum):
    """What a tentative move changes, in order of precedence."""

    NONE = auto()
    ROTATE = auto()
    SHIFT = auto()
    DROP = auto()


@dataclass(slots=True)
class FallingPiece:
    """State and movement rules for the piece under player control."""

    shape: int = 0
    orientation: int = 0
    col: int = SPAWN_COL
    row: int = 0
    next_orientation: int = field(default=0, init=False)
    next_col: int = field(default=SPAWN_COL, init=False)
    next_row: int = field(default=0, init=False)
    hit: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.next_orientation = self.orientation
        self.next_col = self.col
        self.next_row = self.row

    def spawn_next(self, shape: int) -> None:
        """Reset to the spawn position with a new shape."""
        self.shape = shape
        self.orientation = self.next_orientation = 0
        self.col = self.next_col = SPAWN_COL
        self.row = self.next_row = spawn_row(shape)
        self.hit = False

    def shift(self, delta: int) -> None:
        """Queue a horizontal move."""
        self.next_col += delta

    def turn(self, direction: int) -> None:
        """Queue a rotation; +1 forward, -1 backward."""
        self.next_orientation = rotate(self.shape, self.next_orientation, direction)

    def pending_move(self) -> MoveKind:
        if self.next_orientation != self.orientation:
            return MoveKind.ROTATE
        if self.next_col != self.col:
            return MoveKind.SHIFT
        if self.next_row != self.row:
            return MoveKind.DROP
        return MoveKind.NONE

    def commit_move(self, board: Board) -> bool:
        """Apply the tentative move if it fits, otherwise roll back one axis.

        A rejected downward move marks the piece as hit and only restores the
        row; any other rejected move restores column and orientation.
        """
        if board.can_place(self.shape, self.next_orientation, self.next_col, self.next_row):
            self.orientation = self.next_orientation
            self.col = self.next_col
            self.row = self.next_row
            return True

        if self.next_row != self.row:
            self.hit = True
            self.next_row = self.row
        else:
            self.next_col = self.col
            self.next_orientation = self.orientation
        return False

    def drop_one_step(self, board: Board) -> bool:
        """Try to move the piece down by one row."""
        self.next_row += 1
        return self.commit_move(board)

    def fits(self, board: Board) -> bool:
        """Check the committed position against the board."""
        return board.can_place(self.shape, self.orientation, self.col, self.row)

    def fix_into_board(self, board: Board) -> None:
        board.fix(self.shape, self.orientation, self.col, self.row)

    def cells(self) -> list[tuple[int, int]]:
        """Absolute (col, row) of every lit cell, including ones above the grid."""
        mask = orientation_mask(self.shape, self.orientation)
        if mask is None:
            return []
        return [(self.col + x, self.row + y) for x, y in lit_cells(mask)]
