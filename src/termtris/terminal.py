"""Raw-mode terminal: ANSI drawing sink and non-blocking key reader."""

from __future__ import annotations

from typing import TextIO
import os
import sys
import termios
import tty

CSI = "\x1b["
HIDE_CURSOR = CSI + "?25l"
SHOW_CURSOR = CSI + "?25h"
CLEAR = CSI + "H" + CSI + "J"
RESET = CSI + "0m"

ARROWS = {"A": "KEY_UP", "B": "KEY_DOWN", "C": "KEY_RIGHT", "D": "KEY_LEFT"}


class TerminalError(RuntimeError):
    """Raised when the terminal cannot be switched to raw mode."""


class TerminalScreen:
    """Buffers cursor-addressed output and flushes it once per frame."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.fd = self.stdin.fileno()
        self.saved_attrs: list | None = None
        self.buffer: list[str] = []

    def open(self) -> None:
        """Enter raw non-blocking mode and clear the screen."""
        try:
            self.saved_attrs = termios.tcgetattr(self.fd)
            tty.setraw(self.fd)
        except termios.error as exc:
            raise TerminalError(f"cannot configure terminal: {exc}") from exc
        os.set_blocking(self.fd, False)
        self.stdout.write(HIDE_CURSOR + CLEAR)
        self.stdout.flush()

    def close(self) -> None:
        """Drop unread input and restore the terminal as it was."""
        if self.saved_attrs is None:
            return
        while self._read_byte() is not None:
            pass
        os.set_blocking(self.fd, True)
        termios.tcsetattr(self.fd, termios.TCSANOW, self.saved_attrs)
        self.saved_attrs = None
        self.stdout.write(RESET + SHOW_CURSOR + CLEAR)
        self.stdout.flush()

    def __enter__(self) -> "TerminalScreen":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def set_color(self, row: int, col: int, color: int, width: int = 2) -> None:
        """Paint `width` cells at (row, col) with background color 0..7."""
        self.buffer.append(f"{CSI}{row + 1};{col + 1}H{CSI}4{color}m{' ' * width}{RESET}")

    def put_text(self, row: int, col: int, text: str, color: int | None = None) -> None:
        style = f"{CSI}3{color}m" if color is not None else ""
        self.buffer.append(f"{CSI}{row + 1};{col + 1}H{style}{text}{RESET}")

    def flush(self) -> None:
        if not self.buffer:
            return
        self.stdout.write("".join(self.buffer))
        self.stdout.flush()
        self.buffer.clear()

    def _read_byte(self) -> str | None:
        try:
            data = os.read(self.fd, 1)
        except BlockingIOError:
            return None
        if not data:
            return None
        return data.decode("latin-1")

    def read_key(self) -> str | None:
        """Return one key, decoding arrow sequences; a bare Esc is returned as is."""
        key = self._read_byte()
        if key != "\x1b":
            return key
        follow = self._read_byte()
        if follow is None:
            return key
        if follow == "[":
            return ARROWS.get(self._read_byte() or "")
        return None
