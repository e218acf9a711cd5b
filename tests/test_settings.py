from __future__ import annotations

from pathlib import Path

import pytest

from huxdemp.options import ActionMode
from huxdemp.settings import Settings, SettingsError, find_settings_file, load_settings


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_settings_reads_every_section(tmp_path: Path) -> None:
    config = _write(
        tmp_path / "config.toml",
        """
[dump]
line_width = 8
columns = "offset,bytes-left,ascii"
table = "cp437"
control_glyphs = true
utf8 = false
color = "always"
pager = "never"

[colors]
config = "printable=2;nul=1"

[plugins]
len = "some_module:column"
""",
    )

    settings = load_settings(config)

    assert settings == Settings(
        line_width=8,
        columns="offset,bytes-left,ascii",
        table="cp437",
        control_glyphs=True,
        utf8=False,
        color=ActionMode.ALWAYS,
        pager=ActionMode.NEVER,
        colors="printable=2;nul=1",
        plugins={"len": "some_module:column"},
    )


def test_load_settings_empty_file_keeps_defaults(tmp_path: Path) -> None:
    settings = load_settings(_write(tmp_path / "config.toml", ""))

    assert settings == Settings()
    assert dict(settings.plugins) == {}


def test_settings_plugins_are_read_only() -> None:
    settings = Settings(plugins={"a": "m:f"})

    with pytest.raises(TypeError):
        settings.plugins["b"] = "m:g"  # type: ignore[index]


@pytest.mark.parametrize(
    "text, message",
    [
        pytest.param("[dump\n", "config.toml", id="malformed-toml"),
        pytest.param("dump = 3\n", r"\[dump\] must be a table", id="dump-not-table"),
        pytest.param("[dump]\nline_width = 0\n", "between 1 and 128", id="width-zero"),
        pytest.param("[dump]\nline_width = 200\n", "between 1 and 128", id="width-large"),
        pytest.param("[dump]\nline_width = true\n", "integer", id="width-bool"),
        pytest.param("[dump]\nutf8 = \"yes\"\n", "boolean", id="utf8-string"),
        pytest.param("[dump]\ncolor = \"sometimes\"\n", "color", id="bad-mode"),
        pytest.param("[dump]\ntable = 3\n", "string", id="table-number"),
        pytest.param("[colors]\nconfig = 1\n", "string", id="colors-number"),
        pytest.param("plugins = \"x\"\n", "plugins", id="plugins-not-table"),
        pytest.param("[plugins]\nlen = \"\"\n", "module:attribute", id="plugin-empty"),
    ],
)
def test_load_settings_rejects_invalid_values(tmp_path: Path, text: str, message: str) -> None:
    config = _write(tmp_path / "config.toml", text)

    with pytest.raises(SettingsError, match=message):
        load_settings(config)


def test_find_settings_file_prefers_explicit_variable(tmp_path: Path) -> None:
    explicit = tmp_path / "elsewhere.toml"

    found = find_settings_file({"HUXD_CONFIG": str(explicit)}, home=tmp_path)

    assert found == explicit


def test_find_settings_file_uses_xdg_config_home(tmp_path: Path) -> None:
    config = tmp_path / "xdg" / "huxd" / "config.toml"
    config.parent.mkdir(parents=True)
    config.write_text("", encoding="utf-8")

    assert find_settings_file({"XDG_CONFIG_HOME": str(tmp_path / "xdg")}) == config


def test_find_settings_file_falls_back_to_home(tmp_path: Path) -> None:
    assert find_settings_file({}, home=tmp_path) is None

    config = tmp_path / ".config" / "huxd" / "config.toml"
    config.parent.mkdir(parents=True)
    config.write_text("", encoding="utf-8")

    assert find_settings_file({}, home=tmp_path) == config
