"""Dump files or standard input as hex, with optional colours."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, List, Mapping, Sequence, TextIO

from . import __version__
from .columns import DEFAULT_COLUMNS, ColumnKind, parse_columns
from .composer import STDIN_PATH, LineComposer, dump_paths
from .glyph_tables import DEFAULT_TABLE, resolve_glyph_table
from .options import (
    DEFAULT_LINE_WIDTH,
    MAX_LINE_WIDTH,
    ActionMode,
    DumpOptions,
    decide_color,
)
from .pager import paged_output
from .plugins import PluginRegistry
from .ranges import ConfigSyntaxError, parse_number
from .settings import Settings, SettingsError, find_settings_file, load_settings
from .styles import DEFAULT_COLORS, StyleTable, load_styles

LOGGER = logging.getLogger(__name__)

_EPILOG = """\
Arguments are processed the way cat(1) does: each one is read as a file, a
lone "-" (or no argument at all) reads standard input.

Colours are configured with $HUXD_COLORS, e.g. "printable=15;0x41=9", applied
after the builtin palette and the settings file's [colors] config.
"""


def _parse_count(value: str) -> int:
    try:
        number = parse_number(value)
    except ConfigSyntaxError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def _parse_mode(value: str) -> ActionMode:
    try:
        return ActionMode.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_plugin_spec(value: str) -> tuple[str, str]:
    name, sep, import_path = value.partition("=")
    if not sep or not name.strip() or not import_path.strip():
        raise argparse.ArgumentTypeError("expected NAME=MODULE:ATTRIBUTE")
    return name.strip(), import_path.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="huxd",
        description=__doc__,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Files to dump; '-' reads standard input",
    )
    parser.add_argument(
        "-c",
        dest="control_glyphs",
        action="count",
        default=0,
        help="Toggle Unicode glyphs for control characters (e.g. ␀ for NUL)",
    )
    parser.add_argument(
        "-u",
        dest="utf8",
        action="count",
        default=0,
        help="Toggle highlighting of bytes that belong to one UTF-8 character",
    )
    parser.add_argument(
        "-f",
        dest="columns",
        metavar="FORMAT",
        default=None,
        help=(
            f"Columns to display (default: {DEFAULT_COLUMNS!r}); one of offset, "
            "bytes, bytes-left, bytes-right, ascii, ascii-left, ascii-right, "
            "or a plugin name"
        ),
    )
    parser.add_argument(
        "-l",
        dest="line_width",
        metavar="BYTES",
        type=_parse_count,
        default=None,
        help=f"Bytes per line (default: {DEFAULT_LINE_WIDTH}, at most {MAX_LINE_WIDTH})",
    )
    parser.add_argument(
        "-n",
        dest="length",
        metavar="LENGTH",
        type=_parse_count,
        default=0,
        help="Maximum number of bytes to read from each input",
    )
    parser.add_argument(
        "-s",
        dest="skip",
        metavar="OFFSET",
        type=_parse_count,
        default=0,
        help="Number of bytes to skip from the start of each input",
    )
    parser.add_argument(
        "-t",
        dest="table",
        metavar="TABLE",
        default=None,
        help="Glyph table for the ASCII column: default, cp437 or classic",
    )
    parser.add_argument(
        "-C",
        dest="color",
        metavar="WHEN",
        type=_parse_mode,
        default=None,
        help="When to use colours: auto, always, never",
    )
    parser.add_argument(
        "-P",
        dest="pager",
        metavar="WHEN",
        type=_parse_mode,
        default=None,
        help="When to page the output through less(1): auto, always, never",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"huxd v{__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: $HUXD_CONFIG or ~/.config/huxd/config.toml)",
    )
    parser.add_argument(
        "--plugin",
        dest="plugins",
        metavar="NAME=MODULE:ATTR",
        type=_parse_plugin_spec,
        action="append",
        default=[],
        help="Register a Python callable as the plugin column NAME",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic verbosity",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed command-line arguments for ``huxd``."""

    return build_parser().parse_args(argv)


def resolve_settings(
    config_path: Path | None, environ: Mapping[str, str]
) -> Settings:
    """Load the settings file named on the command line or found in the environment."""

    path = config_path if config_path is not None else find_settings_file(environ)
    if path is None:
        return Settings()
    if not path.is_file():
        raise SettingsError(f"settings file not found: {path}")
    LOGGER.debug("loading settings from %s", path)
    return load_settings(path)


def build_options(args: argparse.Namespace, settings: Settings) -> DumpOptions:
    """Combine command-line arguments with settings into :class:`DumpOptions`."""

    line_width = args.line_width
    if line_width is None:
        line_width = settings.line_width or DEFAULT_LINE_WIDTH
    if line_width > MAX_LINE_WIDTH:
        LOGGER.warning("%d are much too many bytes for you, sorry", line_width)
        line_width = MAX_LINE_WIDTH

    table_name = args.table or settings.table
    glyph_table = resolve_glyph_table(table_name) if table_name else DEFAULT_TABLE

    return DumpOptions(
        line_width=line_width,
        control_glyphs=bool(settings.control_glyphs) ^ bool(args.control_glyphs % 2),
        utf8=bool(settings.utf8) ^ bool(args.utf8 % 2),
        color=args.color or settings.color or ActionMode.AUTO,
        skip=args.skip,
        length=args.length or None,
        glyph_table=glyph_table,
        columns=parse_columns(args.columns or settings.columns or DEFAULT_COLUMNS),
    )


def build_plugins(
    args: argparse.Namespace, settings: Settings, options: DumpOptions
) -> PluginRegistry:
    """Load configured plugins and check every plugin column can be resolved."""

    registry = PluginRegistry()
    registry.load_all(settings.plugins)
    for name, import_path in args.plugins:
        registry.load(name, import_path)
    registry.require(
        column.name for column in options.columns if column.kind is ColumnKind.PLUGIN
    )
    return registry


def build_styles(
    color: bool, settings: Settings, environ: Mapping[str, str]
) -> StyleTable:
    """Populate the style table: builtin palette, settings file, then ``$HUXD_COLORS``."""

    styles = StyleTable()
    if color:
        load_styles([DEFAULT_COLORS, settings.colors, environ.get("HUXD_COLORS")], styles)
    return styles


def _silence_stdout() -> None:
    # Python flushes stdout at exit; point it at devnull so a closed pipe stays quiet.
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError) as exc:
        LOGGER.debug("couldn't redirect stdout after a broken pipe: %s", exc)


def main(
    argv: List[str] | None = None,
    *,
    stdin: BinaryIO | None = None,
    stdout: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Entry point for the ``huxd`` command."""

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="huxd: %(message)s",
        stream=sys.stderr,
    )
    environment = environ if environ is not None else os.environ
    target = stdout if stdout is not None else sys.stdout

    try:
        settings = resolve_settings(args.config, environment)
        options = build_options(args, settings)
        plugins = build_plugins(args, settings, options)
    except (OSError, LookupError, ValueError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        raise SystemExit(f"huxd: {message}") from exc

    color = decide_color(options.color, target, environment)
    styles = build_styles(color, settings, environment)
    composer = LineComposer(options, styles, color=color, plugins=plugins)
    pager_mode = args.pager or settings.pager or ActionMode.AUTO

    paths = args.files or [STDIN_PATH]
    try:
        with paged_output(pager_mode, target) as out:
            failures = dump_paths(paths, out, composer, stdin=stdin)
    except BrokenPipeError:
        _silence_stdout()
        return 1
    return 1 if failures else 0


__all__ = [
    "build_options",
    "build_parser",
    "build_plugins",
    "build_styles",
    "main",
    "parse_args",
    "resolve_settings",
]
