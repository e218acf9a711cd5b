"""Column pipeline description: which columns make up a dump line, in order."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


MAX_COLUMNS: Final[int] = 255

DEFAULT_COLUMNS: Final[str] = "offset,bytes,ascii"


class ColumnKind(Enum):
    """Kinds of column a dump line can contain."""

    OFFSET = "offset"
    BYTES = "bytes"
    BYTES_LEFT = "bytes-left"
    BYTES_RIGHT = "bytes-right"
    ASCII = "ascii"
    ASCII_LEFT = "ascii-left"
    ASCII_RIGHT = "ascii-right"
    PLUGIN = "plugin"


_BUILTIN_KINDS: Final[dict[str, ColumnKind]] = {
    kind.value: kind for kind in ColumnKind if kind is not ColumnKind.PLUGIN
}


@dataclass(frozen=True)
class Column:
    """A single column; plugin columns carry the provider name."""

    kind: ColumnKind
    plugin: str | None = None

    def __post_init__(self) -> None:
        if (self.kind is ColumnKind.PLUGIN) != bool(self.plugin):
            raise ValueError("plugin columns, and only plugin columns, need a plugin name")

    @classmethod
    def plugin_column(cls, name: str) -> Column:
        return cls(ColumnKind.PLUGIN, name)

    @property
    def name(self) -> str:
        return self.plugin if self.plugin is not None else self.kind.value


def parse_column(name: str) -> Column:
    """Return the builtin column called ``name`` or a plugin column."""

    kind = _BUILTIN_KINDS.get(name)
    if kind is not None:
        return Column(kind)
    return Column.plugin_column(name)


def parse_columns(spec: str) -> tuple[Column, ...]:
    """Parse a comma-separated column list such as ``offset,bytes,ascii``."""

    names = [item.strip() for item in spec.split(",")]
    columns = tuple(parse_column(name) for name in names if name)
    if not columns:
        raise ValueError("at least one column is required")
    if len(columns) > MAX_COLUMNS:
        raise ValueError(f"received more than {MAX_COLUMNS} columns")
    return columns


__all__ = [
    "Column",
    "ColumnKind",
    "DEFAULT_COLUMNS",
    "MAX_COLUMNS",
    "parse_column",
    "parse_columns",
]
