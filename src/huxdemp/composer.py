"""Drive the read loop over input streams and assemble dump lines."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Final, Iterable, TextIO

from .options import DumpOptions
from .plugins import PluginRegistry
from .renderer import RenderContext, render_column
from .styles import StyleTable

LOGGER = logging.getLogger(__name__)

COLUMN_SEPARATOR: Final[str] = "    "

STDIN_PATH: Final[str] = "-"


class StreamError(OSError):
    """Raised when an input stream cannot be opened or positioned."""


class LineComposer:
    """Turn streams into dump text using a fixed set of options."""

    def __init__(
        self,
        options: DumpOptions,
        styles: StyleTable | None = None,
        *,
        color: bool = False,
        plugins: PluginRegistry | None = None,
    ) -> None:
        self._context = RenderContext(
            options=options,
            styles=styles if styles is not None else StyleTable(),
            color=color,
            plugins=plugins,
        )

    @property
    def options(self) -> DumpOptions:
        return self._context.options

    @property
    def context(self) -> RenderContext:
        return self._context

    def compose_line(self, chunk: bytes, offset: int) -> str:
        """Render every configured column for ``chunk`` at stream ``offset``."""

        parts: list[str] = []
        for column in self._context.options.columns:
            parts.append(render_column(self._context, column, chunk, offset))
            parts.append(COLUMN_SEPARATOR)
        parts.append("\n")
        return "".join(parts)

    def dump(self, stream: BinaryIO, out: TextIO, *, name: str = STDIN_PATH) -> int:
        """Write the dump of ``stream`` to ``out`` and return the bytes shown.

        A blank line always follows the dump, including when positioning the
        stream fails and :class:`StreamError` is raised.
        """

        self._context.utf8_state.reset()
        try:
            return self._dump_lines(stream, out, name=name)
        finally:
            out.write("\n")

    def _dump_lines(self, stream: BinaryIO, out: TextIO, *, name: str) -> int:
        options = self._context.options
        offset = self._seek(stream, options.skip, name=name)
        start_offset = offset

        while True:
            max_read = options.line_width
            if options.length:
                remaining = options.length - (offset - start_offset)
                max_read = min(max_read, remaining)
            chunk = _read_chunk(stream, max_read)
            if not chunk:
                break
            out.write(self.compose_line(chunk, offset))
            offset += len(chunk)
        return offset - start_offset

    @staticmethod
    def _seek(stream: BinaryIO, skip: int, *, name: str) -> int:
        if skip == 0:
            return 0
        try:
            stream.seek(skip)
            # Past-the-end seeks report the position the stream actually holds.
            return stream.tell()
        except (OSError, ValueError) as exc:
            raise StreamError(f"\"{name}\": couldn't seek to offset {skip}: {exc}") from exc


def _read_chunk(stream: BinaryIO, size: int) -> bytes:
    # Pipes may hand back short reads; only end-of-input may shorten a line.
    buffer = bytearray()
    while len(buffer) < size:
        more = stream.read(size - len(buffer))
        if not more:
            break
        buffer.extend(more)
    return bytes(buffer)


def dump_paths(
    paths: Iterable[str | Path],
    out: TextIO,
    composer: LineComposer,
    *,
    stdin: BinaryIO | None = None,
) -> int:
    """Dump each path in order and return how many could not be processed.

    ``-`` reads ``stdin`` (the process's standard input by default). A path
    that cannot be opened or positioned is reported and skipped.
    """

    failures = 0
    for path in paths:
        name = str(path)
        if name == STDIN_PATH:
            source = stdin if stdin is not None else sys.stdin.buffer
            if not _dump_one(composer, source, out, name):
                failures += 1
            continue

        try:
            stream = open(path, "rb")
        except OSError as exc:
            LOGGER.warning("\"%s\": %s", name, exc.strerror or exc)
            out.write("\n")
            failures += 1
            continue
        with stream:
            if not _dump_one(composer, stream, out, name):
                failures += 1
    return failures


def _dump_one(composer: LineComposer, stream: BinaryIO, out: TextIO, name: str) -> bool:
    try:
        composer.dump(stream, out, name=name)
    except StreamError as exc:
        LOGGER.warning("%s", exc)
        return False
    except BrokenPipeError:
        raise
    except OSError as exc:
        LOGGER.warning("\"%s\": read failed: %s", name, exc.strerror or exc)
        return False
    return True


__all__ = ["COLUMN_SEPARATOR", "LineComposer", "StreamError", "dump_paths"]
