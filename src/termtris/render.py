"""Draw a session through a cell-addressed drawing sink."""

from __future__ import annotations

from typing import Protocol

from .game import EndStatus, GameSession
from .pieces import color_of, lit_cells, orientation_mask
from .settings import GameMode
from .utils import BOARD_COLS, BOARD_ROWS, EMPTY

CELL_WIDTH = 2
BORDER = 7
GAUGE_EMPTY = 7
GAUGE_FILL = 3
MASK_COLOR = 5
SIDEBAR_COL = BOARD_COLS + 2
GAUGE_COL = SIDEBAR_COL + 8

END_MESSAGES = {
    EndStatus.WON: (" YOU WON !", 2),
    EndStatus.LOST: ("  LOST !  ", 1),
    EndStatus.PEER_LEFT: ("PEER LEFT ", 3),
    EndStatus.QUIT: ("BYE BYE !!", 3),
}


class DrawSink(Protocol):
    def set_color(self, row: int, col: int, color: int, width: int = CELL_WIDTH) -> None: ...

    def put_text(self, row: int, col: int, text: str, color: int | None = None) -> None: ...

    def flush(self) -> None: ...


class BoardView:
    """Renders the playfield, sidebar and peer gauge each frame."""

    def __init__(self, sink: DrawSink) -> None:
        self.sink = sink

    def render(self, session: GameSession) -> None:
        self._draw_frame()
        if session.end is not EndStatus.NONE:
            text, color = END_MESSAGES[session.end]
            self._draw_message(text, color)
        elif session.paused:
            self._draw_message("* pause! *", 3)
        else:
            self._draw_board(session)
            self._draw_next(session.next_shape)
        self._draw_stats(session)
        if session.config.mode is GameMode.VERSUS:
            self._draw_gauge(session.peer_height)
        self.sink.flush()

    def _cell(self, row: int, col: int, color: int) -> None:
        self.sink.set_color(row, col * CELL_WIDTH, color)

    def _draw_frame(self) -> None:
        for row in range(BOARD_ROWS + 1):
            self._cell(row, 0, BORDER)
            self._cell(row, BOARD_COLS + 1, BORDER)
        for col in range(BOARD_COLS + 2):
            self._cell(BOARD_ROWS, col, BORDER)

    def _draw_board(self, session: GameSession) -> None:
        hidden = set() if session.clearer.rows_visible else set(session.clearer.marked)
        for row, cells in enumerate(session.board.cells):
            for col, value in enumerate(cells):
                self._cell(row, col + 1, EMPTY if row in hidden else value)
        color = color_of(session.piece.shape)
        for col, row in session.piece.cells():
            if 0 <= row < BOARD_ROWS:
                self._cell(row, col + 1, color)

    def _draw_next(self, shape: int) -> None:
        mask = orientation_mask(shape, 0)
        for row in range(4):
            for col in range(4):
                self._cell(12 + row, SIDEBAR_COL + col, EMPTY)
        if mask is None:
            return
        for x, y in lit_cells(mask):
            self._cell(12 + y, SIDEBAR_COL + x, color_of(shape))

    def _draw_message(self, text: str, color: int) -> None:
        for row in range(BOARD_ROWS):
            for col in range(BOARD_COLS):
                self._cell(row, col + 1, MASK_COLOR)
        self.sink.put_text(6, CELL_WIDTH + (BOARD_COLS * CELL_WIDTH - len(text)) // 2, text, color)

    def _draw_stats(self, session: GameSession) -> None:
        left = SIDEBAR_COL * CELL_WIDTH
        score = session.score
        rows = [("level", score.level), ("lines", score.lines)]
        if session.config.mode is not GameMode.TARGET:
            rows.insert(0, ("score", score.score))
        for index, (label, value) in enumerate(rows):
            self.sink.put_text(1 + index * 3, left, label)
            self.sink.put_text(2 + index * 3, left, f"{value:>8}")

    def _draw_gauge(self, peer_height: int) -> None:
        for row in range(BOARD_ROWS):
            self._cell(row, GAUGE_COL, GAUGE_EMPTY if row < peer_height else GAUGE_FILL)
