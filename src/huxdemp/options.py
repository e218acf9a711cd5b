"""Immutable dump options and the colour decision."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Mapping, Protocol

from .columns import DEFAULT_COLUMNS, MAX_COLUMNS, Column, parse_columns
from .glyph_tables import DEFAULT_TABLE, GlyphTable

MAX_LINE_WIDTH: Final[int] = 128

DEFAULT_LINE_WIDTH: Final[int] = 16


class ActionMode(Enum):
    """When to use a feature such as colours or the pager."""

    ALWAYS = "always"
    AUTO = "auto"
    NEVER = "never"

    @classmethod
    def parse(cls, text: str) -> ActionMode:
        """Accept a mode name or an unambiguous prefix (``al``, ``au``, ``ne``)."""

        key = text.strip().lower()
        matches = [mode for mode in cls if key and mode.value.startswith(key)]
        if len(matches) != 1:
            choices = ", ".join(mode.value for mode in cls)
            raise ValueError(f"invalid mode {text!r} (expected {choices})")
        return matches[0]


@dataclass(frozen=True)
class DumpOptions:
    """Everything the renderer needs to know about the dump layout."""

    line_width: int = DEFAULT_LINE_WIDTH
    control_glyphs: bool = False
    utf8: bool = False
    color: ActionMode = ActionMode.AUTO
    skip: int = 0
    length: int | None = None
    glyph_table: GlyphTable | None = DEFAULT_TABLE
    columns: tuple[Column, ...] = field(
        default_factory=lambda: parse_columns(DEFAULT_COLUMNS)
    )

    def __post_init__(self) -> None:
        if not 1 <= self.line_width <= MAX_LINE_WIDTH:
            raise ValueError(f"line width must be between 1 and {MAX_LINE_WIDTH}")
        if self.skip < 0:
            raise ValueError("skip offset must not be negative")
        if self.length is not None and self.length < 0:
            raise ValueError("length must not be negative")
        object.__setattr__(self, "columns", tuple(self.columns))
        if not 1 <= len(self.columns) <= MAX_COLUMNS:
            raise ValueError(f"between 1 and {MAX_COLUMNS} columns are required")

    @property
    def half_width(self) -> int:
        return self.line_width // 2


class _TerminalLike(Protocol):
    def isatty(self) -> bool: ...


def decide_color(
    mode: ActionMode, stream: _TerminalLike, environ: Mapping[str, str]
) -> bool:
    """Resolve ``mode`` to a boolean for output going to ``stream``."""

    if mode is ActionMode.ALWAYS:
        return True
    if mode is ActionMode.NEVER:
        return False
    if not stream.isatty():
        return False
    if "NO_COLOR" in environ:
        return False
    term = environ.get("TERM")
    return bool(term) and term != "dumb"


__all__ = [
    "ActionMode",
    "DEFAULT_LINE_WIDTH",
    "DumpOptions",
    "MAX_LINE_WIDTH",
    "decide_color",
]
