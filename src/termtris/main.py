"""Executable entrypoint for termtris."""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from . import utils
from .audio import AudioMixer, open_sink
from .game import GameSession, TetrisGame
from .network import NetworkSetupError, PeerLink
from .render import BoardView
from .settings import Action, GameConfig, GameMode, NetRole, SettingsManager
from .terminal import TerminalError, TerminalScreen

logger = logging.getLogger("termtris")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="termtris", description="Falling-block puzzle for the terminal.")
    parser.add_argument("--mode", default=GameMode.ENDLESS.value, choices=[mode.value for mode in GameMode])
    parser.add_argument("--level", default="0", help="starting level, 0-9")
    parser.add_argument("--handicap", default="0", help="rows of random blocks / 2, 0-5")
    parser.add_argument("--lines", default=None, help="lines to clear in target mode")
    net = parser.add_mutually_exclusive_group()
    net.add_argument("--listen", metavar="PORT", help="host a versus game on PORT")
    net.add_argument("--connect", metavar="HOST:PORT", help="join a versus game")
    parser.add_argument("--sound-dir", default=None, help="directory holding bgm.raw and sfx/")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--keys", action="store_true", help="print key bindings and exit")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)
    if args.mode == GameMode.VERSUS.value and args.listen is None and args.connect is None:
        parser.error("versus mode needs --listen or --connect")
    return args


def build_config(args: argparse.Namespace, manager: SettingsManager) -> GameConfig:
    """Turn parsed arguments into a sanitized session config."""
    role = NetRole.NONE
    host, port = "localhost", "0"
    if args.listen is not None:
        role, port = NetRole.SERVER, args.listen.lstrip(":")
    elif args.connect is not None:
        role = NetRole.CLIENT
        host, sep, port = args.connect.rpartition(":")
        if not sep:
            host, port = args.connect, "0"
    if args.sound_dir:
        manager.preferences.sound_dir = args.sound_dir
    return GameConfig.from_values(
        mode=args.mode,
        level=args.level,
        handicap=args.handicap,
        target_lines=args.lines,
        role=role,
        host=host,
        port=port,
        seed=args.seed,
        preferences=manager.preferences,
    )


def configure_logging(verbose: bool) -> None:
    """Log to a file; the terminal is busy with the game."""
    utils.ensure_data_dirs()
    logging.basicConfig(
        filename=str(utils.LOG_FILE),
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def describe_keys(manager: SettingsManager) -> str:
    controls = manager.preferences.controls
    names = {"\x1b": "Esc", "\r": "Enter"}
    lines = []
    for action in Action:
        keys = ", ".join(names.get(key, key) for key in getattr(controls, action.value))
        lines.append(f"{action.value:<12} {keys}")
    return "\n".join(lines)


def connect_peer(config: GameConfig) -> PeerLink | None:
    if config.role is NetRole.SERVER:
        print(f"Waiting for a peer on port {config.port}")
        return PeerLink.listen(config.port)
    if config.role is NetRole.CLIENT:
        print(f"Connecting to {config.host}:{config.port}")
        return PeerLink.connect(config.host, config.port)
    return None


def main(argv: list[str] | None = None) -> int:
    """Launch the game."""
    args = parse_args(argv)
    manager = SettingsManager()
    if args.keys:
        print(describe_keys(manager))
        return 0

    configure_logging(args.verbose)
    config = build_config(args, manager)
    logger.info("starting %s game at level %d", config.mode.value, config.level)

    try:
        peer = connect_peer(config)
    except NetworkSetupError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    mixer = AudioMixer.load(manager.sound_root, open_sink())
    print("Music enabled" if mixer.enabled else "Music disabled")

    session = GameSession.create(config, mixer=mixer, peer=peer)
    screen = TerminalScreen()
    game = TetrisGame(session, keys=screen, view=BoardView(screen))

    def _stop(signum: int, frame: object) -> None:
        game.request_stop()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)
    try:
        screen.open()
        game.run()
    except TerminalError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        screen.close()
        session.close()

    print(f"{session.end.name.lower()} - score {session.score.score}, lines {session.score.lines}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
