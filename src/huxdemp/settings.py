"""Load user defaults for the dump command from a TOML file."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

import tomllib

from .options import ActionMode, MAX_LINE_WIDTH


class SettingsError(ValueError):
    """Raised when a settings file fails validation."""


@dataclass(frozen=True)
class Settings:
    """Values read from the settings file; ``None`` leaves the builtin default."""

    line_width: int | None = None
    columns: str | None = None
    table: str | None = None
    control_glyphs: bool | None = None
    utf8: bool | None = None
    color: ActionMode | None = None
    pager: ActionMode | None = None
    colors: str | None = None
    plugins: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "plugins", MappingProxyType(dict(self.plugins)))


def find_settings_file(
    environ: Mapping[str, str], *, home: Path | None = None
) -> Path | None:
    """Return the settings file to use, or ``None`` when there is none.

    ``$HUXD_CONFIG`` wins and is returned even if missing, so a typo is
    reported rather than ignored. Otherwise ``$XDG_CONFIG_HOME/huxd/config.toml``
    (default ``~/.config``) is used when it exists.
    """

    explicit = environ.get("HUXD_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    config_home = environ.get("XDG_CONFIG_HOME")
    if config_home:
        base = Path(config_home)
    else:
        base = (home if home is not None else Path.home()) / ".config"
    candidate = base / "huxd" / "config.toml"
    return candidate if candidate.is_file() else None


def load_settings(config_path: Path) -> Settings:
    """Parse and validate the settings file at ``config_path``."""

    try:
        with config_path.open("rb") as stream:
            data = tomllib.load(stream)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"{config_path}: {exc}") from exc

    dump = _table(data, "dump")
    colors = _table(data, "colors")
    return Settings(
        line_width=_parse_line_width(dump.get("line_width")),
        columns=_optional_str(dump, "columns"),
        table=_optional_str(dump, "table"),
        control_glyphs=_optional_bool(dump, "control_glyphs"),
        utf8=_optional_bool(dump, "utf8"),
        color=_optional_mode(dump, "color"),
        pager=_optional_mode(dump, "pager"),
        colors=_optional_str(colors, "config"),
        plugins=_parse_plugins(data.get("plugins")),
    )


def _table(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = data.get(name, {})
    if not isinstance(raw, Mapping):
        raise SettingsError(f"[{name}] must be a table")
    return raw


def _optional_str(table: Mapping[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SettingsError(f"{key} must be a string")
    return value


def _optional_bool(table: Mapping[str, Any], key: str) -> bool | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise SettingsError(f"{key} must be a boolean")
    return value


def _optional_mode(table: Mapping[str, Any], key: str) -> ActionMode | None:
    value = _optional_str(table, key)
    if value is None:
        return None
    try:
        return ActionMode.parse(value)
    except ValueError as exc:
        raise SettingsError(f"{key}: {exc}") from exc


def _parse_line_width(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError("line_width must be an integer")
    if not 1 <= value <= MAX_LINE_WIDTH:
        raise SettingsError(f"line_width must be between 1 and {MAX_LINE_WIDTH}")
    return value


def _parse_plugins(raw: Any) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise SettingsError("[plugins] must map plugin names to import paths")

    plugins: Dict[str, str] = {}
    for name, import_path in raw.items():
        if not isinstance(import_path, str) or not import_path.strip():
            raise SettingsError(f"plugin {name!r} must name a module:attribute")
        plugins[str(name)] = import_path.strip()
    return plugins


__all__ = ["Settings", "SettingsError", "find_settings_file", "load_settings"]
