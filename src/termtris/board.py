"""Playfield grid and the collision/row operations performed on it."""

from __future__ import annotations

from dataclasses import dataclass, field

from .pieces import color_of, is_lit, lit_cells, orientation_mask
from .rng import LcgRandom
from .utils import BOARD_COLS, BOARD_ROWS, EMPTY

CRUMBLE_LUT = (1, 2, 3, 4, 5, 6, 7) + (EMPTY,) * 13
PENALTY_COLOR = 1


def _empty_row() -> list[int]:
    return [EMPTY] * BOARD_COLS


@dataclass(slots=True)
class Board:
    """18x10 grid; each cell is EMPTY or a color tag in 1..7."""

    cells: list[list[int]] = field(default_factory=lambda: [_empty_row() for _ in range(BOARD_ROWS)])

    @classmethod
    def from_rows(cls, rows: list[str]) -> "Board":
        """Build a board from text rows, bottom-aligned; '.' is empty, digits are colors."""
        board = cls()
        offset = BOARD_ROWS - len(rows)
        for y, text in enumerate(rows):
            for x, char in enumerate(text):
                board.cells[offset + y][x] = EMPTY if char == "." else int(char)
        return board

    def copy(self) -> "Board":
        return Board([list(row) for row in self.cells])

    def can_place(self, shape: int, orientation: int, col: int, row: int) -> bool:
        """Return whether the shape fits at (col, row); rows above the grid are allowed."""
        mask = orientation_mask(shape, orientation)
        if mask is None:
            return False
        for x in range(4):
            for y in range(4):
                if not is_lit(mask, x, y):
                    continue
                bx, by = col + x, row + y
                if bx < 0 or bx >= BOARD_COLS or by >= BOARD_ROWS:
                    return False
                if by >= 0 and self.cells[by][bx] != EMPTY:
                    return False
        return True

    def fix(self, shape: int, orientation: int, col: int, row: int) -> None:
        """Write every lit cell of the piece into the grid with its color tag."""
        mask = orientation_mask(shape, orientation)
        if mask is None:
            return
        color = color_of(shape)
        for x, y in lit_cells(mask):
            by = row + y
            if 0 <= by < BOARD_ROWS:
                self.cells[by][col + x] = color

    def is_row_complete(self, row: int) -> bool:
        return all(cell != EMPTY for cell in self.cells[row])

    def complete_rows(self) -> list[int]:
        """Indices of complete rows, top to bottom."""
        return [row for row in range(BOARD_ROWS) if self.is_row_complete(row)]

    def remove_row(self, row: int) -> None:
        """Shift every row above `row` down by one and empty the top row."""
        for y in range(row, 0, -1):
            self.cells[y] = list(self.cells[y - 1])
        self.cells[0] = _empty_row()

    def add_lines(self, count: int, void_col: int) -> None:
        """Push the stack up by `count` rows and fill the bottom with penalty blocks."""
        count = max(0, min(BOARD_ROWS, count))
        if count == 0:
            return
        del self.cells[:count]
        for _ in range(count):
            self.cells.append([EMPTY if x == void_col else PENALTY_COLOR for x in range(BOARD_COLS)])

    def add_crumbles(self, handicap: int, rng: LcgRandom) -> None:
        """Fill the bottom 2*handicap rows with random blocks (7 in 20 cells)."""
        for y in range(BOARD_ROWS - 1, BOARD_ROWS - 1 - 2 * handicap, -1):
            for x in range(BOARD_COLS):
                self.cells[y][x] = rng.choice(CRUMBLE_LUT)

    def height(self) -> int:
        """Index of the topmost occupied row; BOARD_ROWS when the board is empty."""
        for y, row in enumerate(self.cells):
            if any(cell != EMPTY for cell in row):
                return y
        return BOARD_ROWS

    def occupied_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell != EMPTY)
