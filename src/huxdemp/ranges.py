"""Range expressions such as ``0x8-0xD,0x20`` expanded into byte values."""
from __future__ import annotations

from typing import Final

MAX_RANGE_ENTRIES: Final[int] = 256

_PREFIX_BASES: Final[dict[str, int]] = {"0x": 16, "0o": 8, "0b": 2}


class ConfigSyntaxError(ValueError):
    """Raised when a range expression or colour statement is malformed."""


def parse_number(text: str) -> int:
    """Parse ``text`` using ``0x``/``0o``/``0b`` prefixes, decimal otherwise.

    A leading zero does not select octal: ``"0300"`` is three hundred.
    """

    literal = text.strip()
    base = _PREFIX_BASES.get(literal[:2].lower(), 10)
    digits = literal[2:] if base != 10 else literal
    try:
        return int(digits, base)
    except ValueError as exc:
        raise ConfigSyntaxError(f"'{text}' is not a valid number") from exc


def _parse_byte(text: str) -> int:
    value = parse_number(text)
    if not 0 <= value <= 0xFF:
        raise ConfigSyntaxError(f"'{text.strip()}' is out of range (0-255)")
    return value


def expand_range(expression: str) -> list[int]:
    """Expand ``expression`` into byte values, preserving order and duplicates."""

    values: list[int] = []
    for item in expression.split(","):
        item = item.strip()
        if not item:
            continue
        if "-" in item:
            low_text, high_text = item.split("-", 1)
            low, high = _parse_byte(low_text), _parse_byte(high_text)
            if low > high:
                raise ConfigSyntaxError(f"'{item}' is a descending range")
            expanded = range(low, high + 1)
        else:
            value = _parse_byte(item)
            expanded = range(value, value + 1)

        if len(values) + len(expanded) > MAX_RANGE_ENTRIES:
            raise ConfigSyntaxError(
                f"'{expression}' expands to more than {MAX_RANGE_ENTRIES} entries"
            )
        values.extend(expanded)
    return values


__all__ = ["ConfigSyntaxError", "MAX_RANGE_ENTRIES", "expand_range", "parse_number"]
