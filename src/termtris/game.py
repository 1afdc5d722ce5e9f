"""Session state, the per-frame tick and the run loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol
import logging

from .audio import AudioMixer, Sfx
from .board import Board
from .lines import LineClearer
from .network import PeerDisconnected, PeerLink
from .piece import FallingPiece, MoveKind
from .protocol import Message, MessageKind
from .rng import LcgRandom
from .scoring import ScoreKeeper
from .settings import Action, Controls, GameConfig, GameMode
from .timing import FramePacer
from .utils import BOARD_COLS, BOARD_ROWS, RESULT_DELAY_S, SOFT_DROP_FREEZE

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Coarse state of a session, derived from its fields."""

    RUNNING = auto()
    SUSPENDED = auto()
    PAUSED = auto()
    ENDED = auto()


class EndStatus(Enum):
    NONE = auto()
    WON = auto()
    LOST = auto()
    QUIT = auto()
    PEER_LEFT = auto()


class KeySource(Protocol):
    def read_key(self) -> str | None: ...


class SessionView(Protocol):
    def render(self, session: "GameSession") -> None: ...


@dataclass(slots=True)
class GameSession:
    """Everything one game mutates; owned by a single tick loop."""

    config: GameConfig
    rng: LcgRandom
    board: Board
    piece: FallingPiece
    next_shape: int
    score: ScoreKeeper
    clearer: LineClearer = field(default_factory=LineClearer)
    mixer: AudioMixer = field(default_factory=AudioMixer.disabled)
    peer: PeerLink | None = None
    paused: bool = False
    frame: int = 0
    freeze: int = 0
    height: int = BOARD_ROWS
    peer_height: int = BOARD_ROWS
    pending_lines: int = 0
    void_col: int = 0
    end: EndStatus = EndStatus.NONE
    stop_requested: bool = False

    @classmethod
    def create(
        cls,
        config: GameConfig,
        mixer: AudioMixer | None = None,
        peer: PeerLink | None = None,
    ) -> "GameSession":
        """Set up board, first pieces and counters from a sanitized config."""
        rng = LcgRandom(config.seed)
        void_col = rng.below(BOARD_COLS) if config.mode is GameMode.VERSUS else 0
        board = Board()
        board.add_crumbles(config.handicap, rng)

        piece = FallingPiece()
        piece.spawn_next(rng.piece())
        return cls(
            config=config,
            rng=rng,
            board=board,
            piece=piece,
            next_shape=rng.piece(),
            score=ScoreKeeper(mode=config.mode, level=config.level, lines=config.starting_lines),
            mixer=mixer or AudioMixer.disabled(),
            peer=peer,
            void_col=void_col,
        )

    @property
    def status(self) -> GameStatus:
        if self.end is not EndStatus.NONE:
            return GameStatus.ENDED
        if self.clearer.suspended:
            return GameStatus.SUSPENDED
        if self.paused:
            return GameStatus.PAUSED
        return GameStatus.RUNNING

    def close(self) -> None:
        """Release the peer socket and audio handles."""
        if self.peer is not None:
            self.peer.close()
        self.mixer.close()


class TetrisGame:
    """Drives a session one tick at a time."""

    def __init__(
        self,
        session: GameSession,
        controls: Controls | None = None,
        keys: KeySource | None = None,
        view: SessionView | None = None,
        pacer: FramePacer | None = None,
    ) -> None:
        self.session = session
        self.controls = controls or session.config.preferences.controls
        self.keys = keys
        self.view = view
        self.pacer = pacer or FramePacer(session.config.preferences.frame_us)

    def run(self) -> EndStatus:
        """Tick until the game ends and the last sound effect has played."""
        session = self.session
        while session.end is EndStatus.NONE or session.mixer.busy:
            self.pacer.wait()
            key = self.keys.read_key() if self.keys is not None else None
            self.tick(key)
            if self.view is not None:
                self.view.render(session)
        if self.view is not None:
            self.view.render(session)
            self.pacer.sleep(RESULT_DELAY_S)
        logger.info("game over: %s, score %d", session.end.name, session.score.score)
        return session.end

    def request_stop(self) -> None:
        """Ask the loop to end the game at the next tick boundary."""
        self.session.stop_requested = True

    def tick(self, key: str | None = None) -> None:
        """Advance the simulation by one frame."""
        s = self.session
        if s.stop_requested and s.end is EndStatus.NONE:
            self._quit()

        if s.end is EndStatus.NONE and not s.clearer.suspended:
            moved_down = False
            if key is not None:
                moved_down = self.handle_key(key)
            if s.end is EndStatus.NONE and not s.paused and s.frame >= s.score.period:
                moved_down |= self._drop()
            if moved_down:
                s.frame = 0
            if s.piece.hit:
                self._piece_hit()
            if s.freeze:
                s.freeze -= 1
            if not s.paused:
                s.frame += 1
            if s.end is EndStatus.NONE and s.score.target_reached:
                self._finish(EndStatus.WON, Sfx.WIN)
            if s.peer is not None and s.end is EndStatus.NONE:
                self._poll_peer()

        if s.end is EndStatus.NONE and s.clearer.tick(s.board):
            self._after_collapse()

        s.mixer.update(silent=s.paused or s.end is not EndStatus.NONE)

    def handle_key(self, key: str) -> bool:
        """Apply one key press; return True if the piece moved down."""
        s = self.session
        action = self.controls.action_for(key)
        if action is Action.PAUSE:
            self._send(MessageKind.PAUSE)
            self.toggle_pause()
            return False
        if action is Action.QUIT:
            self._quit()
            return False
        if s.paused or action is None:
            return False

        if action is Action.LEFT:
            s.piece.shift(-1)
        elif action is Action.RIGHT:
            s.piece.shift(1)
        elif action is Action.ROTATE:
            s.piece.turn(1)
        elif action is Action.ROTATE_BACK:
            s.piece.turn(-1)
        elif action is Action.DOWN:
            return not s.freeze and self._drop()
        self._commit()
        return False

    def toggle_pause(self) -> None:
        s = self.session
        s.paused = not s.paused
        if s.paused:
            s.mixer.play(Sfx.PAUSE)

    def _commit(self) -> bool:
        s = self.session
        kind = s.piece.pending_move()
        applied = s.piece.commit_move(s.board)
        if applied and kind is MoveKind.ROTATE:
            s.mixer.play(Sfx.ROTATION)
        elif applied and kind is MoveKind.SHIFT:
            s.mixer.play(Sfx.MOVE)
        return applied

    def _drop(self) -> bool:
        s = self.session
        return s.piece.drop_one_step(s.board)

    def _piece_hit(self) -> None:
        """Fix the piece, spawn the next, then clear, check loss and take penalties."""
        s = self.session
        s.mixer.play(Sfx.DROP)
        s.piece.fix_into_board(s.board)
        s.piece.spawn_next(s.next_shape)
        s.next_shape = s.rng.piece()

        count = s.clearer.scan(s.board)
        s.score.record_clear(count)
        if count:
            s.mixer.play(Sfx.TETRIS if count == 4 else Sfx.LINE)
            if count > 1:
                self._send(MessageKind.LINES, count - 1)

        if not self._piece_fits_after_clear():
            self._lose()
            return
        if s.pending_lines:
            self._apply_penalty()
        if s.peer is not None:
            self._update_height()
        s.freeze = SOFT_DROP_FREEZE

    def _apply_penalty(self) -> None:
        s = self.session
        count = min(s.pending_lines, BOARD_ROWS)
        s.pending_lines = 0
        s.board.add_lines(count, s.void_col)
        s.clearer.shift_marked(count)
        if self._piece_fits_after_clear():
            s.mixer.play(Sfx.GRID_DROP)
        else:
            self._lose()

    def _piece_fits_after_clear(self) -> bool:
        """Check the piece against the board as it will be once marked rows are gone."""
        s = self.session
        return s.piece.fits(s.clearer.settled(s.board))

    def _after_collapse(self) -> None:
        if self.session.peer is not None:
            self._update_height()

    def _update_height(self) -> None:
        s = self.session
        height = s.board.height()
        if height != s.height:
            s.height = height
            self._send(MessageKind.HEIGHT, height)

    def _poll_peer(self) -> None:
        s = self.session
        if s.peer is None:
            return
        try:
            message = s.peer.poll()
        except PeerDisconnected as exc:
            logger.warning("%s", exc)
            self._finish(EndStatus.PEER_LEFT)
            return
        if message is None:
            return

        if message.kind is MessageKind.HEIGHT:
            s.peer_height = message.value
        elif message.kind is MessageKind.LINES:
            s.pending_lines += message.value
        elif message.kind is MessageKind.LOST:
            self._finish(EndStatus.WON, Sfx.WIN)
        elif message.kind is MessageKind.QUIT:
            self._finish(EndStatus.PEER_LEFT)
        elif message.kind is MessageKind.PAUSE:
            self.toggle_pause()

    def _send(self, kind: MessageKind, value: int = 0) -> None:
        if self.session.peer is not None:
            self.session.peer.send(Message(kind, value))

    def _lose(self) -> None:
        self._finish(EndStatus.LOST, Sfx.LOST)
        self._send(MessageKind.LOST)

    def _quit(self) -> None:
        self._finish(EndStatus.QUIT)
        self._send(MessageKind.QUIT)

    def _finish(self, status: EndStatus, effect: Sfx | None = None) -> None:
        self.session.end = status
        if effect is not None:
            self.session.mixer.play(effect)
