"""One-byte peer messages: 3-bit kind, 5-bit value."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

CODE_MASK = 0xE0
VALUE_MASK = 0x1F


class ProtocolError(ValueError):
    """Raised when a received byte carries an unknown message code."""


class MessageKind(IntEnum):
    """Message codes as they appear in the top three bits of the byte."""

    HEIGHT = 0x00
    LINES = 0x20
    LOST = 0x40
    QUIT = 0x60
    PAUSE = 0x80


@dataclass(frozen=True, slots=True)
class Message:
    kind: MessageKind
    value: int = 0


def encode(message: Message) -> int:
    """Pack a message into its wire byte; the value is taken modulo 32."""
    return int(message.kind) | (message.value & VALUE_MASK)


def decode(byte: int) -> Message:
    """Unpack a wire byte, raising ProtocolError for unknown codes."""
    code = byte & CODE_MASK
    try:
        kind = MessageKind(code)
    except ValueError as exc:
        raise ProtocolError(f"unknown message code 0x{code:02x}") from exc
    return Message(kind, byte & VALUE_MASK)
