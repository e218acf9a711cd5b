"""Minimal UTF-8 codec used to find multi-byte codepoint boundaries."""
from __future__ import annotations

from typing import Final

UNICODE_MAX: Final[int] = 0x10FFFF


class DecodeError(ValueError):
    """Raised when a byte sequence is not a valid UTF-8 encoded codepoint."""


class EncodeError(ValueError):
    """Raised when a codepoint cannot be represented in UTF-8."""


def _build_length_table() -> tuple[int, ...]:
    table = [0] * 256
    for lead in range(0x00, 0x80):
        table[lead] = 1
    for lead in range(0xC2, 0xE0):
        table[lead] = 2
    for lead in range(0xE0, 0xF0):
        table[lead] = 3
    for lead in range(0xF0, 0xF5):
        table[lead] = 4
    return tuple(table)


_SEQUENCE_LENGTHS: Final[tuple[int, ...]] = _build_length_table()

_LEAD_MASKS: Final[tuple[int, ...]] = (0x7F, 0x1F, 0x0F, 0x07)

_LEAD_MARKERS: Final[tuple[int, ...]] = (0x00, 0xC0, 0xE0, 0xF0)


def sequence_length(lead: int) -> int:
    """Return the sequence length announced by ``lead`` (0 when it cannot lead)."""

    return _SEQUENCE_LENGTHS[int(lead) & 0xFF]


def decode_codepoint(data: bytes | bytearray, length: int | None = None) -> tuple[int, int]:
    """Decode the sequence at the start of ``data``.

    ``length`` is the number of valid bytes in ``data`` and defaults to the
    whole buffer. Returns ``(codepoint, consumed)``; raises :class:`DecodeError`
    for truncated input, bytes that cannot lead a sequence, broken continuation
    bytes, values beyond U+10FFFF, surrogates and noncharacters.
    """

    available = len(data) if length is None else min(length, len(data))
    if available <= 0:
        raise DecodeError("empty buffer")

    size = sequence_length(data[0])
    if size == 0:
        raise DecodeError(f"byte 0x{data[0]:02x} cannot start a sequence")
    if size > available:
        raise DecodeError(f"sequence needs {size} bytes, only {available} available")

    value = data[0] & _LEAD_MASKS[size - 1]
    for index in range(1, size):
        byte = data[index]
        if byte & 0xC0 != 0x80:
            raise DecodeError(f"byte 0x{byte:02x} at {index} is not a continuation byte")
        value = (value << 6) | (byte & 0x3F)

    if value > UNICODE_MAX:
        raise DecodeError(f"U+{value:X} is beyond the Unicode range")
    if 0xD800 <= value <= 0xDFFF:
        raise DecodeError(f"U+{value:04X} is a surrogate")
    if 0xFDD0 <= value <= 0xFDEF:
        raise DecodeError(f"U+{value:04X} is a noncharacter")
    if value & 0xFFFE == 0xFFFE:
        raise DecodeError(f"U+{value:04X} is a plane-end noncharacter")
    return value, size


def encode_codepoint(codepoint: int) -> bytes:
    """Encode ``codepoint`` as UTF-8.

    Surrogates are encoded without complaint even though
    :func:`decode_codepoint` rejects them; only values outside
    ``0..0x10FFFF`` raise :class:`EncodeError`.
    """

    value = int(codepoint)
    if value < 0 or value >= 0x110000:
        raise EncodeError(f"codepoint {value:#x} cannot be encoded")

    if value < 0x80:
        size = 1
    elif value < 0x800:
        size = 2
    elif value < 0x10000:
        size = 3
    else:
        size = 4

    encoded = bytearray(size)
    for index in range(size - 1, 0, -1):
        encoded[index] = (value & 0x3F) | 0x80
        value >>= 6
    encoded[0] = value | _LEAD_MARKERS[size - 1]
    return bytes(encoded)


__all__ = [
    "DecodeError",
    "EncodeError",
    "UNICODE_MAX",
    "decode_codepoint",
    "encode_codepoint",
    "sequence_length",
]
