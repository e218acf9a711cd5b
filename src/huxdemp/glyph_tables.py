"""Glyph tables used to draw bytes in the ASCII column."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Mapping, Sequence


@dataclass(frozen=True)
class GlyphTable:
    """Optional replacement text for each byte value."""

    name: str
    glyphs: tuple[str | None, ...]

    def __post_init__(self) -> None:
        if len(self.glyphs) != 256:
            raise ValueError(f"glyph table {self.name!r} needs exactly 256 entries")

    def lookup(self, byte: int) -> str | None:
        """Return the override for ``byte`` or ``None`` to fall back to the literal."""

        return self.glyphs[int(byte) & 0xFF]


def _build_control_glyphs() -> tuple[str | None, ...]:
    table: list[str | None] = [None] * 256
    for code in range(0x20):
        table[code] = chr(0x2400 + code)
    table[0x7F] = "␡"
    return tuple(table)


def _build_default_glyphs() -> tuple[str | None, ...]:
    table: list[str | None] = [None] * 256
    for code in range(0x20):
        table[code] = "•"
    for code in range(0x08, 0x0E):
        table[code] = "_"
    table[0x00] = "0"
    table[0x7F] = "«"
    for code in range(0x80, 0x100):
        table[code] = "·"
    return tuple(table)


_CP437_LOW: Final[str] = (
    " ☺☻♥♦♣♠•◘○◙♂♀♪♫☼"
    "►◄↕‼¶§▬↨↑↓→←∟↔▲▼"
)


def _build_cp437_glyphs() -> tuple[str | None, ...]:
    table: list[str | None] = [None] * 256
    for code, glyph in enumerate(_CP437_LOW):
        table[code] = glyph
    table[0x7F] = "⌂"
    for code in range(0x80, 0x100):
        table[code] = bytes([code]).decode("cp437")
    table[0xFF] = " "
    return tuple(table)


CONTROL_GLYPHS: Final[tuple[str | None, ...]] = _build_control_glyphs()

DEFAULT_TABLE: Final[GlyphTable] = GlyphTable("default", _build_default_glyphs())

CP437_TABLE: Final[GlyphTable] = GlyphTable("cp437", _build_cp437_glyphs())

# ``None`` selects literal rendering with no overrides.
GLYPH_TABLES: Final[Mapping[str, GlyphTable | None]] = MappingProxyType(
    {
        "default": DEFAULT_TABLE,
        "cp437": CP437_TABLE,
        "classic": None,
        "none": None,
    }
)


def resolve_glyph_table(
    name: str, tables: Mapping[str, GlyphTable | None] = GLYPH_TABLES
) -> GlyphTable | None:
    """Return the table named by ``name`` or an unambiguous prefix of it."""

    key = name.strip().lower()
    if key in tables:
        return tables[key]
    matches: Sequence[str] = [candidate for candidate in tables if key and candidate.startswith(key)]
    if len(matches) == 1:
        return tables[matches[0]]
    if matches:
        raise KeyError(f"ambiguous glyph table {name!r}: {', '.join(matches)}")
    raise KeyError(f"unknown glyph table {name!r} (expected {', '.join(tables)})")


def is_printable(byte: int) -> bool:
    return 0x20 <= byte <= 0x7E


def format_glyph(
    byte: int, table: GlyphTable | None = None, *, control_glyphs: bool = False
) -> str:
    """Return the text shown for ``byte`` in the ASCII column."""

    if control_glyphs:
        glyph = CONTROL_GLYPHS[byte]
        if glyph is not None:
            return glyph
    if table is not None:
        override = table.lookup(byte)
        if override:
            return override
    return chr(byte) if is_printable(byte) else "."


__all__ = [
    "CONTROL_GLYPHS",
    "CP437_TABLE",
    "DEFAULT_TABLE",
    "GLYPH_TABLES",
    "GlyphTable",
    "format_glyph",
    "is_printable",
    "resolve_glyph_table",
]
