from __future__ import annotations

import pytest

from huxdemp.columns import (
    DEFAULT_COLUMNS,
    MAX_COLUMNS,
    Column,
    ColumnKind,
    parse_columns,
)
from huxdemp.options import ActionMode, DumpOptions, decide_color


class _Stream:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def test_parse_columns_preserves_order_and_plugins() -> None:
    columns = parse_columns("ascii, offset,bytes-left,,utf8-wide,bytes-right")

    assert columns == (
        Column(ColumnKind.ASCII),
        Column(ColumnKind.OFFSET),
        Column(ColumnKind.BYTES_LEFT),
        Column.plugin_column("utf8-wide"),
        Column(ColumnKind.BYTES_RIGHT),
    )
    assert columns[3].name == "utf8-wide"


def test_parse_columns_default() -> None:
    assert [column.kind for column in parse_columns(DEFAULT_COLUMNS)] == [
        ColumnKind.OFFSET,
        ColumnKind.BYTES,
        ColumnKind.ASCII,
    ]


def test_parse_columns_limits() -> None:
    with pytest.raises(ValueError):
        parse_columns(" , ")
    with pytest.raises(ValueError):
        parse_columns(",".join(["offset"] * (MAX_COLUMNS + 1)))
    assert len(parse_columns(",".join(["offset"] * MAX_COLUMNS))) == MAX_COLUMNS


def test_column_plugin_name_invariant() -> None:
    with pytest.raises(ValueError):
        Column(ColumnKind.PLUGIN)
    with pytest.raises(ValueError):
        Column(ColumnKind.BYTES, "bytes")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("always", ActionMode.ALWAYS),
        ("al", ActionMode.ALWAYS),
        ("auto", ActionMode.AUTO),
        ("au", ActionMode.AUTO),
        ("NEVER", ActionMode.NEVER),
        ("n", ActionMode.NEVER),
    ],
)
def test_action_mode_parse(text: str, expected: ActionMode) -> None:
    assert ActionMode.parse(text) is expected


@pytest.mark.parametrize("text", ["a", "", "sometimes"])
def test_action_mode_parse_rejects_ambiguous(text: str) -> None:
    with pytest.raises(ValueError):
        ActionMode.parse(text)


def test_dump_options_defaults() -> None:
    options = DumpOptions()

    assert options.line_width == 16
    assert options.half_width == 8
    assert options.length is None
    assert options.color is ActionMode.AUTO
    assert [column.kind for column in options.columns] == [
        ColumnKind.OFFSET,
        ColumnKind.BYTES,
        ColumnKind.ASCII,
    ]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"line_width": 0},
        {"line_width": 129},
        {"skip": -1},
        {"length": -5},
        {"columns": ()},
    ],
)
def test_dump_options_validation(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        DumpOptions(**kwargs)


def test_dump_options_accepts_maximum_width() -> None:
    assert DumpOptions(line_width=128).line_width == 128


def test_decide_color_explicit_modes_ignore_environment() -> None:
    assert decide_color(ActionMode.ALWAYS, _Stream(False), {"NO_COLOR": "1"}) is True
    assert decide_color(ActionMode.NEVER, _Stream(True), {"TERM": "xterm"}) is False


@pytest.mark.parametrize(
    "tty, environ, expected",
    [
        (True, {"TERM": "xterm-256color"}, True),
        (False, {"TERM": "xterm-256color"}, False),
        (True, {"TERM": "xterm", "NO_COLOR": ""}, False),
        (True, {"TERM": "dumb"}, False),
        (True, {}, False),
    ],
)
def test_decide_color_auto(tty: bool, environ: dict, expected: bool) -> None:
    assert decide_color(ActionMode.AUTO, _Stream(tty), environ) is expected
