from __future__ import annotations

import sys
import types

import pytest

from huxdemp.plugins import PluginError, PluginRegistry, plugin_key, utf8_column


def _install_module(monkeypatch: pytest.MonkeyPatch, name: str, **attributes) -> None:
    module = types.ModuleType(name)
    for attribute, value in attributes.items():
        setattr(module, attribute, value)
    monkeypatch.setitem(sys.modules, name, module)


def _length_column(chunk: bytes, count: int, offset: int) -> str:
    return f"{offset}:{count}"


def test_plugin_key_trims_at_first_dash() -> None:
    assert plugin_key("utf8") == "utf8"
    assert plugin_key("utf8-wide-extra") == "utf8"


def test_utf8_column_pads_multibyte_characters() -> None:
    data = "A€B".encode()

    assert utf8_column(data, len(data), 0) == "A€  B"


def test_utf8_column_marks_invalid_and_truncated_bytes() -> None:
    assert utf8_column(b"\x80A", 2, 0) == ".A"
    assert utf8_column(b"A\xe2", 2, 0) == "A."
    assert utf8_column(b"A\xe2\x82", 3, 0) == "A.."


def test_utf8_column_hides_unprintable_characters() -> None:
    assert utf8_column(b"\x00\tz", 3, 0) == "..z"


def test_utf8_column_only_reads_valid_count() -> None:
    assert utf8_column(b"abcdef", 2, 0) == "ab"


def test_registry_includes_builtin_utf8() -> None:
    registry = PluginRegistry()

    assert "utf8" in registry
    assert "utf8-anything" in registry
    assert registry.resolve("utf8-wide") is utf8_column
    assert PluginRegistry(include_builtins=False).names() == []


def test_registry_register_and_resolve() -> None:
    registry = PluginRegistry({"len-x": _length_column})

    assert registry.resolve("len") is _length_column
    assert registry.names() == ["len", "utf8"]


def test_registry_rejects_bad_registrations() -> None:
    registry = PluginRegistry()

    with pytest.raises(ValueError):
        registry.register("", _length_column)
    with pytest.raises(TypeError):
        registry.register("thing", "not callable")  # type: ignore[arg-type]


def test_registry_resolve_unknown_name() -> None:
    with pytest.raises(PluginError, match="missing"):
        PluginRegistry().resolve("missing-column")


def test_registry_require_checks_every_name() -> None:
    registry = PluginRegistry()

    registry.require(["utf8", "utf8-x"])
    with pytest.raises(PluginError):
        registry.require(["utf8", "nope"])


def test_registry_load_import_path(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_module(monkeypatch, "huxd_test_plugins", length=_length_column)
    registry = PluginRegistry()

    provider = registry.load("len", "huxd_test_plugins:length")

    assert provider is _length_column
    assert registry.resolve("len-extra")(b"abc", 3, 16) == "16:3"


def test_registry_load_dotted_attribute(monkeypatch: pytest.MonkeyPatch) -> None:
    holder = types.SimpleNamespace(column=_length_column)
    _install_module(monkeypatch, "huxd_test_plugins", holder=holder)
    registry = PluginRegistry()

    registry.load_all({"a": "huxd_test_plugins:holder.column"})

    assert registry.resolve("a") is _length_column


def test_registry_load_dotted_module_path(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_module(monkeypatch, "huxd_test_plugins", length=_length_column)
    registry = PluginRegistry()

    registry.load("len", "huxd_test_plugins.length")

    assert registry.resolve("len") is _length_column


@pytest.mark.parametrize(
    "import_path, message",
    [
        ("no_colon_or_dot", "must include a module"),
        (":attr", "must name a module"),
        ("huxd_no_such_module_xyz:thing", "could not be imported"),
        ("os:no_such_attribute", "missing attribute"),
        ("os:sep", "non-callable"),
    ],
)
def test_registry_load_errors(import_path: str, message: str) -> None:
    with pytest.raises(PluginError, match=message):
        PluginRegistry().load("bad", import_path)


def test_plugin_error_is_lookup_error() -> None:
    assert issubclass(PluginError, LookupError)
