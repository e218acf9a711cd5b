"""Per-byte colour styles and the ``key=value;...`` language that sets them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Iterable, Iterator, Mapping

from .ranges import ConfigSyntaxError, expand_range, parse_number

LOGGER = logging.getLogger(__name__)

DEFAULT_COLORS: Final[str] = (
    "printable=15;blackspace=1;nul=8;whitespace=8;128-255=3;1-8=6;11-31=6"
)

PRESETS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "printable": "0x20-0x7E",
        "unprintable": "0x0-0x1F,0x7F",
        "whitespace": "0x8-0xD,0x20",
        "blackspace": "0x08,0x7F",
        "nul": "0x0",
        "del": "0x7F",
    }
)


class StyleTable:
    """Style identifier for each of the 256 byte values (default ``0``)."""

    __slots__ = ("_styles",)

    def __init__(self, styles: Iterable[int] | None = None) -> None:
        self._styles = bytearray(256)
        if styles is not None:
            values = bytes(styles)
            if len(values) != 256:
                raise ValueError("a style table needs exactly 256 entries")
            self._styles[:] = values

    def __getitem__(self, byte: int) -> int:
        return self._styles[byte]

    def __setitem__(self, byte: int, style: int) -> None:
        if not 0 <= byte <= 0xFF:
            raise IndexError(f"byte {byte} outside 0-255")
        if not 0 <= style <= 0xFF:
            raise ValueError(f"style {style} outside 0-255")
        self._styles[byte] = style

    def __iter__(self) -> Iterator[int]:
        return iter(self._styles)

    def __len__(self) -> int:
        return 256

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleTable):
            return NotImplemented
        return self._styles == other._styles

    def __repr__(self) -> str:
        styled = sum(1 for style in self._styles if style)
        return f"StyleTable(<{styled} styled bytes>)"

    def copy(self) -> StyleTable:
        return StyleTable(self._styles)


@dataclass(frozen=True)
class ConfigStatement:
    """One parsed ``range=style`` statement."""

    source: str
    values: tuple[int, ...]
    style: int


def parse_statement(statement: str) -> ConfigStatement:
    """Parse a single ``key=value`` statement."""

    key, sep, value = statement.partition("=")
    if not sep:
        raise ConfigSyntaxError(f"'{statement}' is malformed (expected key=value)")

    key = key.strip()
    source = PRESETS.get(key, key)
    try:
        values = expand_range(source)
    except ConfigSyntaxError as exc:
        raise ConfigSyntaxError(f"'{source}' is not a valid range: {exc}") from exc

    style = parse_number(value)
    if not 0 <= style <= 0xFF:
        raise ConfigSyntaxError(f"'{style}' is out of range (only 256 colours)")
    return ConfigStatement(source=source, values=tuple(values), style=style)


def parse_config(text: str) -> list[ConfigStatement]:
    """Parse every ``;``-separated statement of ``text``; empty statements are skipped."""

    return [
        parse_statement(statement)
        for statement in text.split(";")
        if statement.strip()
    ]


def apply_config(table: StyleTable, text: str) -> int:
    """Apply ``text`` to ``table`` and return the number of writes.

    The whole string is parsed before anything is written, so a malformed
    statement leaves ``table`` untouched.
    """

    statements = parse_config(text)
    writes = 0
    for statement in statements:
        for byte in statement.values:
            table[byte] = statement.style
            writes += 1
    return writes


def load_styles(
    sources: Iterable[str | None], table: StyleTable | None = None
) -> StyleTable:
    """Apply each configuration source in order, skipping ones that fail to parse."""

    styles = table if table is not None else StyleTable()
    for source in sources:
        if not source:
            continue
        try:
            apply_config(styles, source)
        except ConfigSyntaxError as exc:
            LOGGER.warning("couldn't parse colour config: %s", exc)
    return styles


__all__ = [
    "ConfigStatement",
    "ConfigSyntaxError",
    "DEFAULT_COLORS",
    "PRESETS",
    "StyleTable",
    "apply_config",
    "load_styles",
    "parse_config",
    "parse_statement",
]
