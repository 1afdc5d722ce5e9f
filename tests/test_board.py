from __future__ import annotations

from termtris.board import PENALTY_COLOR, Board
from termtris.pieces import SHAPE_COUNT, SPRITES, lit_cells
from termtris.rng import LcgRandom
from termtris.utils import BOARD_COLS, BOARD_ROWS, EMPTY


def _expected_fit(board: Board, shape: int, orientation: int, col: int, row: int) -> bool:
    mask = SPRITES[shape][orientation]
    assert mask is not None
    for x, y in lit_cells(mask):
        bx, by = col + x, row + y
        if bx < 0 or bx >= BOARD_COLS or by >= BOARD_ROWS:
            return False
        if by >= 0 and board.cells[by][bx] != EMPTY:
            return False
    return True


def test_can_place_respects_walls_and_floor() -> None:
    board = Board()
    assert board.can_place(0, 0, 6, 5)
    assert not board.can_place(0, 0, -1, 5)
    assert not board.can_place(0, 0, 7, 5)
    assert board.can_place(0, 0, 3, 15)
    assert not board.can_place(0, 0, 3, 16)


def test_can_place_allows_rows_above_grid() -> None:
    board = Board()
    assert board.can_place(1, 0, 3, -2)
    assert board.can_place(1, 0, 3, -10)


def test_can_place_rejects_absent_orientation() -> None:
    assert not Board().can_place(1, 2, 3, 3)


def test_can_place_matches_cell_rule_everywhere() -> None:
    board = Board.from_rows(["..3.......", "1...5...77", "22..5....7"])
    board.cells[2][6] = 4
    for shape in range(SHAPE_COUNT):
        for orientation, mask in enumerate(SPRITES[shape]):
            if mask is None:
                continue
            for col in range(-3, BOARD_COLS + 1):
                for row in range(-4, BOARD_ROWS + 1):
                    assert board.can_place(shape, orientation, col, row) == _expected_fit(
                        board, shape, orientation, col, row
                    )


def test_fix_writes_color_and_skips_rows_above_grid() -> None:
    board = Board()
    board.fix(0, 1, 0, -2)
    assert [board.cells[row][1] for row in range(3)] == [1, 1, 0]
    board.fix(1, 0, 3, 15)
    assert board.cells[16][4] == 2 and board.cells[17][5] == 2


def test_complete_rows_and_remove_row_conserve_cells() -> None:
    board = Board.from_rows(["..4.......", "1111111111", "3.3.3.3.3."])
    assert board.complete_rows() == [16]
    before = board.occupied_count()
    board.remove_row(16)
    assert board.occupied_count() == before - BOARD_COLS
    assert board.cells[16][2] == 4
    assert board.cells[0] == [EMPTY] * BOARD_COLS
    assert board.complete_rows() == []


def test_add_lines_pushes_stack_up_with_void_column() -> None:
    board = Board.from_rows(["5........."])
    board.add_lines(2, void_col=4)
    assert board.cells[15][0] == 5
    for row in (16, 17):
        assert board.cells[row].count(EMPTY) == 1
        assert board.cells[row][4] == EMPTY
        assert board.cells[row][0] == PENALTY_COLOR


def test_add_lines_is_clamped_to_board_height() -> None:
    board = Board()
    board.add_lines(40, void_col=0)
    assert len(board.cells) == BOARD_ROWS
    assert all(row[0] == EMPTY for row in board.cells)


def test_crumbles_fill_only_handicap_rows() -> None:
    board = Board()
    board.add_crumbles(2, LcgRandom(7))
    assert all(cell == EMPTY for row in board.cells[:14] for cell in row)
    assert all(0 <= cell <= 7 for row in board.cells[14:] for cell in row)
    assert board.occupied_count() > 0


def test_height_reports_topmost_row() -> None:
    board = Board()
    assert board.height() == BOARD_ROWS
    board.cells[12][9] = 3
    board.cells[15][0] = 3
    assert board.height() == 12


def test_copy_is_independent() -> None:
    board = Board.from_rows(["..3......."])
    clone = board.copy()
    clone.cells[17][2] = EMPTY
    assert board.cells[17][2] == 3
