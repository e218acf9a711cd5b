"""Registry of name-addressed plugin columns."""
from __future__ import annotations

import logging
from importlib import import_module
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping

from .utf8 import DecodeError, decode_codepoint

LOGGER = logging.getLogger(__name__)

PluginProvider = Callable[[bytes, int, int], str]
"""Called with ``(chunk, valid_count, offset)``; returns the column text."""


class PluginError(LookupError):
    """Raised when a plugin column cannot be resolved or loaded."""


def plugin_key(column_name: str) -> str:
    """Return the registry key for ``column_name`` (``foo-bar`` -> ``foo``)."""

    return column_name.split("-", 1)[0].strip()


def utf8_column(chunk: bytes, count: int, offset: int) -> str:
    """Show the characters encoded in ``chunk``, one cell per byte.

    Sequences cut by the end of the chunk, and bytes that do not decode,
    are shown as ``.``.
    """

    cells: list[str] = []
    index = 0
    while index < count:
        try:
            codepoint, size = decode_codepoint(chunk[index:count])
        except DecodeError as exc:
            LOGGER.debug("offset %#x: %s", offset + index, exc)
            cells.append(".")
            index += 1
            continue
        char = chr(codepoint)
        cells.append(char if char.isprintable() else ".")
        cells.append(" " * (size - 1))
        index += size
    return "".join(cells)


_BUILTIN_PLUGINS: Mapping[str, PluginProvider] = MappingProxyType(
    {"utf8": utf8_column}
)


class PluginRegistry:
    """Resolve plugin column names to provider callables."""

    def __init__(
        self,
        providers: Mapping[str, PluginProvider] | None = None,
        *,
        include_builtins: bool = True,
    ) -> None:
        self._providers: Dict[str, PluginProvider] = {}
        if include_builtins:
            self._providers.update(_BUILTIN_PLUGINS)
        if providers:
            for name, provider in providers.items():
                self.register(name, provider)

    def register(self, name: str, provider: PluginProvider) -> None:
        """Register ``provider`` under ``name``, replacing any earlier one."""

        key = plugin_key(name)
        if not key:
            raise ValueError("plugin names must not be empty")
        if not callable(provider):
            raise TypeError(f"plugin {key!r} is not callable")
        self._providers[key] = provider

    def load(self, name: str, import_path: str) -> PluginProvider:
        """Import ``import_path`` (``module:attribute``) and register it as ``name``."""

        provider = _import_provider(import_path)
        self.register(name, provider)
        LOGGER.debug("loaded plugin %s from %s", plugin_key(name), import_path)
        return provider

    def load_all(self, import_paths: Mapping[str, str]) -> None:
        for name, import_path in import_paths.items():
            self.load(name, import_path)

    def resolve(self, column_name: str) -> PluginProvider:
        """Return the provider for ``column_name`` or raise :class:`PluginError`."""

        key = plugin_key(column_name)
        try:
            return self._providers[key]
        except KeyError as exc:
            raise PluginError(f"no plugin named {key!r}") from exc

    def require(self, column_names: Iterable[str]) -> None:
        """Resolve every name up front so missing plugins fail before any output."""

        for name in column_names:
            self.resolve(name)

    def names(self) -> list[str]:
        return sorted(self._providers)

    def __contains__(self, column_name: object) -> bool:
        return isinstance(column_name, str) and plugin_key(column_name) in self._providers


def _import_provider(import_path: str) -> PluginProvider:
    module_name, attribute_path = _split_import_path(import_path)
    try:
        provider: object = import_module(module_name)
    except ImportError as exc:
        raise PluginError(f"plugin module {module_name!r} could not be imported: {exc}") from exc
    for attribute in attribute_path.split("."):
        try:
            provider = getattr(provider, attribute)
        except AttributeError as exc:
            raise PluginError(
                f"plugin '{import_path}' missing attribute '{attribute}'"
            ) from exc

    if not callable(provider):
        raise PluginError(
            f"plugin '{import_path}' resolved to non-callable {type(provider)!r}"
        )
    return provider


def _split_import_path(import_path: str) -> tuple[str, str]:
    if ":" in import_path:
        module_name, attribute_path = import_path.split(":", 1)
    elif "." in import_path:
        module_name, attribute_path = import_path.rsplit(".", 1)
    else:
        raise PluginError(f"plugin '{import_path}' must include a module and attribute")

    module_name = module_name.strip()
    attribute_path = attribute_path.strip()
    if not module_name or not attribute_path:
        raise PluginError("plugin import paths must name a module and an attribute")
    return module_name, attribute_path


__all__ = [
    "PluginError",
    "PluginProvider",
    "PluginRegistry",
    "plugin_key",
    "utf8_column",
]
