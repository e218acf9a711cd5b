"""Pipe dump output through less(1) when requested."""
from __future__ import annotations

import contextlib
import logging
import subprocess
import sys
from typing import Callable, Iterator, Sequence, TextIO

from .options import ActionMode

LOGGER = logging.getLogger(__name__)

PopenFactory = Callable[..., "subprocess.Popen[str]"]


def pager_command(mode: ActionMode, stdout: TextIO) -> list[str] | None:
    """Return the pager argv for ``mode`` or ``None`` to write directly.

    ``-F`` lets less exit at once when the output fits on one screen.
    """

    if mode is ActionMode.NEVER:
        return None
    if mode is ActionMode.ALWAYS:
        return ["less", "-R"]
    if stdout.isatty():
        return ["less", "-F", "-R"]
    return None


@contextlib.contextmanager
def paged_output(
    mode: ActionMode,
    stdout: TextIO | None = None,
    *,
    popen: PopenFactory = subprocess.Popen,
) -> Iterator[TextIO]:
    """Yield the stream dump text should be written to."""

    target = stdout if stdout is not None else sys.stdout
    command = pager_command(mode, target)
    if command is None:
        yield target
        return

    try:
        process = popen(
            command,
            stdin=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        LOGGER.warning("couldn't execute pager (use '-P never' to disable): %s", exc)
        yield target
        return

    assert process.stdin is not None
    try:
        yield process.stdin
    finally:
        # The pager may already be gone when the user quits early.
        with contextlib.suppress(BrokenPipeError):
            process.stdin.close()
        _report_exit(command, process.wait())


def _report_exit(command: Sequence[str], returncode: int) -> None:
    if returncode != 0:
        LOGGER.warning(
            "%s exited with status %d, possibly because it couldn't be found",
            command[0],
            returncode,
        )
        LOGGER.warning("hint: use `-P never` to disable the pager")


__all__ = ["paged_output", "pager_command"]
