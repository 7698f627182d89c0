#!/usr/bin/env python3
"""
Octal Escape Decoder
====================

The league database stores text as Latin-1 bytes, but parts of it were written
with C-style octal escapes (``\\344`` for ``ä``) instead of the raw byte. This
module resolves those escapes and decodes the result to text.

Only a backslash followed by exactly three octal digits is treated as an
escape. Anything else, including a truncated escape at the end of the input,
passes through as a literal backslash.
"""

from enum import Enum

BACKSLASH = ord('\\')
ZERO = ord('0')
SEVEN = ord('7')

# Windows-1252 is the superset of ISO-8859-1 MySQL calls "latin1".
TEXT_ENCODING = 'cp1252'


class DecodeState(Enum):
    """Scan states of a single decode call"""
    CHAR = "char"
    BACKSLASH = "backslash"
    FIRST = "first"
    SECOND = "second"


def parse_octal(byte: int):
    """Return the value of an ASCII octal digit, or None."""
    if byte < ZERO or byte > SEVEN:
        return None
    return byte - ZERO


def is_octal_escape(data: bytes, pos: int) -> bool:
    """True if ``data[pos:pos + 4]`` is a backslash and three octal digits."""
    return (
        len(data) > pos + 3
        and data[pos] == BACKSLASH
        and parse_octal(data[pos + 1]) is not None
        and parse_octal(data[pos + 2]) is not None
        and parse_octal(data[pos + 3]) is not None
    )


def resolve_escapes(data: bytes) -> bytes:
    """Replace every valid ``\\NNN`` escape with the byte it encodes."""
    out = bytearray()
    state = DecodeState.CHAR
    acc = 0

    for pos, byte in enumerate(data):
        if state is DecodeState.CHAR:
            if is_octal_escape(data, pos):
                state = DecodeState.BACKSLASH
            else:
                out.append(byte)
        elif state is DecodeState.BACKSLASH:
            acc = parse_octal(byte)
            state = DecodeState.FIRST
        elif state is DecodeState.FIRST:
            acc = (acc << 3) + parse_octal(byte)
            state = DecodeState.SECOND
        else:
            # \4xx and above overflow a byte; keep the low 8 bits.
            out.append(((acc << 3) + parse_octal(byte)) & 0xFF)
            state = DecodeState.CHAR

    return bytes(out)


def decode_bytes(data: bytes) -> str:
    """
    Decode a league byte string to text.

    Octal escapes are resolved first, then the bytes are decoded as
    Windows-1252. Bytes without a mapping become U+FFFD. Never raises.

    >>> decode_bytes(rb"Fu\\337ball")
    'Fußball'
    """
    return resolve_escapes(bytes(data)).decode(TEXT_ENCODING, errors='replace')
