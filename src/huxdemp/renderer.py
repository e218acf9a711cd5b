"""Render one chunk of bytes into the text of each dump column.

Every renderer returns the text for a single column of a single line. The
visible width of the builtin columns depends only on the configured line
width, never on how many bytes the chunk holds, so the short final line of
a stream stays aligned with the lines above it:

* ``bytes``: ``3 * width + 1`` cells (the extra cell splits the two halves)
* ``bytes-left`` / ``bytes-right``: ``3 * half`` / ``3 * (width - half)``
* ``ascii``: ``width + 2`` cells, the halves ``half + 2`` / ``width - half + 2``

When colours are on, each byte is painted with the 256-colour foreground
from the :class:`~huxdemp.styles.StyleTable`. With UTF-8 highlighting also
enabled, bytes that belong to one multi-byte sequence share a grey
background; the span is tracked by :class:`Utf8BoundaryState`, which lives
for a whole stream so sequences that straddle two lines stay highlighted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Final, Mapping

from .columns import Column, ColumnKind
from .glyph_tables import format_glyph
from .options import DumpOptions
from .plugins import PluginError, PluginRegistry
from .styles import StyleTable
from .utf8 import sequence_length

_RESET: Final[str] = "\x1b[m"
_OFFSET_STYLE: Final[str] = "\x1b[37m"
# Keeps the highlight background across the gap to the next byte.
_KEEP_BACKGROUND: Final[str] = "\x1b[37m\x1b[22m"
_HIGHLIGHT_BACKGROUND: Final[int] = 100
_HIGHLIGHT_FOREGROUND: Final[int] = 97


@dataclass
class Utf8BoundaryState:
    """Span of the multi-byte sequence currently being drawn.

    ``start`` is the stream offset of the lead byte (``None`` before the first
    byte of a stream) and ``trailing`` the number of continuation bytes that
    follow it. Bytes that cannot lead a sequence get ``trailing == -1``.
    """

    start: int | None = None
    trailing: int = -1

    def reset(self) -> None:
        self.start = None
        self.trailing = -1

    @property
    def end(self) -> int | None:
        if self.start is None:
            return None
        return self.start + self.trailing

    def track(self, offset: int, byte: int) -> None:
        """Start a new span at ``offset`` once the previous one has been passed."""

        if self.start is None or self.start + self.trailing < offset:
            self.start = offset
            self.trailing = sequence_length(byte) - 1

    def highlights(self, offset: int) -> bool:
        """Return ``True`` when ``offset`` lies inside a multi-byte span."""

        if self.start is None or self.trailing <= 0:
            return False
        return self.start <= offset <= self.start + self.trailing


@dataclass
class RenderContext:
    """Shared inputs of the column renderers for one stream."""

    options: DumpOptions
    styles: StyleTable = field(default_factory=StyleTable)
    color: bool = False
    plugins: PluginRegistry | None = None
    utf8_state: Utf8BoundaryState = field(default_factory=Utf8BoundaryState)

    @property
    def highlight_utf8(self) -> bool:
        return self.color and self.options.utf8


def _valid(chunk: bytes, count: int | None) -> int:
    return len(chunk) if count is None else min(count, len(chunk))


def render_offset(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    if ctx.color:
        return f"{_OFFSET_STYLE}{offset:4x}{_RESET}"
    return f"{offset:08x}"


def _render_byte(ctx: RenderContext, byte: int, offset: int) -> str:
    if not ctx.color:
        return f"{byte:02x} "

    state = ctx.utf8_state
    highlighted = False
    if ctx.highlight_utf8:
        state.track(offset, byte)
        highlighted = state.highlights(offset)

    if highlighted:
        background, foreground = _HIGHLIGHT_BACKGROUND, _HIGHLIGHT_FOREGROUND
    else:
        background, foreground = 0, ctx.styles[byte]
    cell = f"\x1b[{background}m\x1b[38;5;{foreground}m{byte:02x}"

    end = state.end
    if highlighted and end is not None and offset < end:
        return f"{cell}{_KEEP_BACKGROUND} "
    return f"{cell}{_RESET} "


def _render_byte_run(
    ctx: RenderContext, chunk: bytes, offset: int, first: int, last: int, split: int | None
) -> list[str]:
    parts: list[str] = []
    for index in range(first, last):
        if index == split:
            parts.append(" ")
        parts.append(_render_byte(ctx, chunk[index], offset + index))
    if ctx.color:
        parts.append(_RESET)
    return parts


def render_bytes(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    width = ctx.options.line_width
    half = ctx.options.half_width
    valid = _valid(chunk, count)

    parts = _render_byte_run(ctx, chunk, offset, 0, valid, half)
    parts.append(" " * ((width - valid) * 3))
    if valid <= half:
        parts.append(" ")
    return "".join(parts)


def render_bytes_left(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    half = ctx.options.half_width
    valid = min(_valid(chunk, count), half)

    parts = _render_byte_run(ctx, chunk, offset, 0, valid, None)
    parts.append(" " * ((half - valid) * 3))
    return "".join(parts)


def render_bytes_right(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    width = ctx.options.line_width
    half = ctx.options.half_width
    valid = max(_valid(chunk, count), half)

    parts = _render_byte_run(ctx, chunk, offset, half, valid, None)
    parts.append(" " * ((width - valid) * 3))
    return "".join(parts)


def _render_glyphs(ctx: RenderContext, data: bytes, declared_width: int) -> str:
    options = ctx.options
    parts = ["│" if ctx.color else "|"]
    for byte in data:
        glyph = format_glyph(
            byte, options.glyph_table, control_glyphs=options.control_glyphs
        )
        if ctx.color:
            parts.append(f"\x1b[38;5;{ctx.styles[byte]}m{glyph}{_RESET}")
        else:
            parts.append(glyph)
    parts.append(" " * (declared_width - len(data)))
    parts.append("│" if ctx.color else "|")
    return "".join(parts)


def render_ascii(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    valid = _valid(chunk, count)
    return _render_glyphs(ctx, chunk[:valid], ctx.options.line_width)


def render_ascii_left(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    half = ctx.options.half_width
    valid = min(_valid(chunk, count), half)
    return _render_glyphs(ctx, chunk[:valid], half)


def render_ascii_right(
    ctx: RenderContext, chunk: bytes, offset: int, count: int | None = None
) -> str:
    half = ctx.options.half_width
    valid = _valid(chunk, count)
    return _render_glyphs(ctx, chunk[half:valid], ctx.options.line_width - half)


def render_plugin(
    ctx: RenderContext,
    column: Column,
    chunk: bytes,
    offset: int,
    count: int | None = None,
) -> str:
    """Delegate to the plugin named by ``column``; its output is not checked."""

    if ctx.plugins is None or column.plugin is None:
        raise PluginError(f"no plugin registry available for column {column.name!r}")
    provider = ctx.plugins.resolve(column.plugin)
    valid = _valid(chunk, count)
    return provider(bytes(chunk[:valid]), valid, offset)


_Renderer = Callable[[RenderContext, bytes, int, int | None], str]

_BUILTIN_RENDERERS: Final[Mapping[ColumnKind, _Renderer]] = {
    ColumnKind.OFFSET: render_offset,
    ColumnKind.BYTES: render_bytes,
    ColumnKind.BYTES_LEFT: render_bytes_left,
    ColumnKind.BYTES_RIGHT: render_bytes_right,
    ColumnKind.ASCII: render_ascii,
    ColumnKind.ASCII_LEFT: render_ascii_left,
    ColumnKind.ASCII_RIGHT: render_ascii_right,
}


def render_column(
    ctx: RenderContext,
    column: Column,
    chunk: bytes,
    offset: int,
    count: int | None = None,
) -> str:
    """Render ``column`` for ``chunk`` whose first byte sits at ``offset``."""

    if column.kind is ColumnKind.PLUGIN:
        return render_plugin(ctx, column, chunk, offset, count)
    renderer = _BUILTIN_RENDERERS.get(column.kind)
    if renderer is None:
        raise ValueError(f"unsupported column kind: {column.kind!r}")
    return renderer(ctx, chunk, offset, count)


__all__ = [
    "RenderContext",
    "Utf8BoundaryState",
    "render_ascii",
    "render_ascii_left",
    "render_ascii_right",
    "render_bytes",
    "render_bytes_left",
    "render_bytes_right",
    "render_column",
    "render_offset",
    "render_plugin",
]
