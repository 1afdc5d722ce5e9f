from __future__ import annotations

from termtris.game import EndStatus, GameSession
from termtris.lines import ClearPhase
from termtris.piece import FallingPiece
from termtris.render import BORDER, CELL_WIDTH, GAUGE_COL, GAUGE_EMPTY, GAUGE_FILL, MASK_COLOR, BoardView
from termtris.settings import GameConfig


class FakeSink:
    def __init__(self) -> None:
        self.cells: dict[tuple[int, int], int] = {}
        self.texts: list[str] = []
        self.flushes = 0

    def set_color(self, row: int, col: int, color: int, width: int = CELL_WIDTH) -> None:
        self.cells[(row, col)] = color

    def put_text(self, row: int, col: int, text: str, color: int | None = None) -> None:
        self.texts.append(text.strip())

    def flush(self) -> None:
        self.flushes += 1


def _render(session: GameSession) -> FakeSink:
    sink = FakeSink()
    BoardView(sink).render(session)
    return sink


def _session(mode: str = "endless") -> GameSession:
    session = GameSession.create(GameConfig.from_values(mode=mode, seed=3))
    session.piece = FallingPiece(shape=1, col=3, row=5)
    return session


def test_frame_board_and_piece_are_drawn() -> None:
    session = _session()
    session.board.cells[17][0] = 4
    sink = _render(session)
    assert sink.cells[(0, 0)] == BORDER
    assert sink.cells[(18, 5 * CELL_WIDTH)] == BORDER
    assert sink.cells[(17, 1 * CELL_WIDTH)] == 4
    assert sink.cells[(6, 5 * CELL_WIDTH)] == 2
    assert sink.cells[(0, 1 * CELL_WIDTH)] == 0
    assert sink.flushes == 1


def test_stats_hide_score_in_target_mode() -> None:
    assert "score" in _render(_session()).texts
    texts = _render(_session("target")).texts
    assert "score" not in texts
    assert "lines" in texts and "25" in texts


def test_blinking_rows_are_hidden() -> None:
    session = _session()
    session.board.cells[17] = [3] * 10
    session.clearer.marked = [17]
    session.clearer.phase = ClearPhase.BLINKING
    session.clearer.countdown = 50
    assert _render(session).cells[(17, 1 * CELL_WIDTH)] == 0
    session.clearer.countdown = 40
    assert _render(session).cells[(17, 1 * CELL_WIDTH)] == 3


def test_pause_masks_the_board() -> None:
    session = _session()
    session.paused = True
    sink = _render(session)
    assert "* pause! *" in sink.texts
    assert sink.cells[(6, 5 * CELL_WIDTH)] == MASK_COLOR


def test_end_message_replaces_pause() -> None:
    session = _session()
    session.paused = True
    session.end = EndStatus.LOST
    texts = _render(session).texts
    assert "LOST !" in texts
    assert "* pause! *" not in texts


def test_gauge_only_in_versus_mode() -> None:
    assert (0, GAUGE_COL * CELL_WIDTH) not in _render(_session()).cells
    session = _session("versus")
    session.peer_height = 15
    sink = _render(session)
    assert sink.cells[(14, GAUGE_COL * CELL_WIDTH)] == GAUGE_EMPTY
    assert sink.cells[(15, GAUGE_COL * CELL_WIDTH)] == GAUGE_FILL
    assert sink.cells[(17, GAUGE_COL * CELL_WIDTH)] == GAUGE_FILL
