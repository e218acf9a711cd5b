from __future__ import annotations

import pytest

from huxdemp.ranges import ConfigSyntaxError, expand_range, parse_number


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", 42),
        ("0x2A", 42),
        ("0X2a", 42),
        ("0o52", 42),
        ("0b101010", 42),
        ("0300", 300),
        ("  7 ", 7),
    ],
)
def test_parse_number_detects_base_from_prefix(text: str, expected: int) -> None:
    assert parse_number(text) == expected


@pytest.mark.parametrize("text", ["", "0x", "abc", "0b2", "0o9", "1.5"])
def test_parse_number_rejects_garbage(text: str) -> None:
    with pytest.raises(ConfigSyntaxError):
        parse_number(text)


def test_expand_range_whitespace_example() -> None:
    assert expand_range("0x8-0xD,0x20") == [8, 9, 10, 11, 12, 13, 32]


def test_expand_range_keeps_order_and_duplicates() -> None:
    assert expand_range("5,1-3,2") == [5, 1, 2, 3, 2]


def test_expand_range_skips_empty_items() -> None:
    assert expand_range("1,,2,") == [1, 2]
    assert expand_range("") == []


def test_expand_range_accepts_full_byte_range() -> None:
    values = expand_range("0-255")

    assert values == list(range(256))


@pytest.mark.parametrize(
    "expression",
    [
        pytest.param("256", id="value-too-large"),
        pytest.param("0-0x100", id="range-end-too-large"),
        pytest.param("zz", id="not-a-number"),
        pytest.param("1-x", id="bad-range-end"),
        pytest.param("9-3", id="descending"),
        pytest.param("0-255,0", id="overflow"),
        pytest.param("0-200,0-100", id="overflow-across-items"),
    ],
)
def test_expand_range_rejects_invalid_expressions(expression: str) -> None:
    with pytest.raises(ConfigSyntaxError):
        expand_range(expression)


def test_config_syntax_error_is_value_error() -> None:
    assert issubclass(ConfigSyntaxError, ValueError)
