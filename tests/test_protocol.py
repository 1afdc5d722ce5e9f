from __future__ import annotations

import pytest

from termtris.protocol import Message, MessageKind, ProtocolError, decode, encode


@pytest.mark.parametrize(
    "message, byte",
    [
        (Message(MessageKind.HEIGHT, 17), 0x11),
        (Message(MessageKind.LINES, 3), 0x23),
        (Message(MessageKind.LOST), 0x40),
        (Message(MessageKind.QUIT), 0x60),
        (Message(MessageKind.PAUSE), 0x80),
    ],
)
def test_encode_packs_code_and_value(message: Message, byte: int) -> None:
    assert encode(message) == byte
    assert decode(byte) == message


def test_value_is_truncated_to_five_bits() -> None:
    assert encode(Message(MessageKind.HEIGHT, 18)) == 0x12
    assert encode(Message(MessageKind.LINES, 33)) == 0x21


def test_decode_splits_bits() -> None:
    message = decode(0x3F)
    assert message.kind is MessageKind.LINES
    assert message.value == 0x1F


@pytest.mark.parametrize("byte", [0xA0, 0xC5, 0xE0, 0xFF])
def test_unknown_codes_raise(byte: int) -> None:
    with pytest.raises(ProtocolError):
        decode(byte)
