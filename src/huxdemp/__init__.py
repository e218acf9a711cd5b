"""Render byte streams as colourised hex dumps with UTF-8 boundary highlighting."""
from __future__ import annotations

__version__ = "1.0.0"

from .columns import Column, ColumnKind, parse_columns
from .composer import LineComposer, StreamError, dump_paths
from .glyph_tables import GlyphTable, format_glyph, resolve_glyph_table
from .options import ActionMode, DumpOptions, decide_color
from .plugins import PluginError, PluginRegistry
from .ranges import ConfigSyntaxError, expand_range, parse_number
from .renderer import RenderContext, Utf8BoundaryState, render_column
from .styles import DEFAULT_COLORS, StyleTable, apply_config, load_styles
from .utf8 import DecodeError, EncodeError, decode_codepoint, encode_codepoint

__all__ = [
    "ActionMode",
    "Column",
    "ColumnKind",
    "ConfigSyntaxError",
    "DEFAULT_COLORS",
    "DecodeError",
    "DumpOptions",
    "EncodeError",
    "GlyphTable",
    "LineComposer",
    "PluginError",
    "PluginRegistry",
    "RenderContext",
    "StreamError",
    "StyleTable",
    "Utf8BoundaryState",
    "__version__",
    "apply_config",
    "decide_color",
    "decode_codepoint",
    "dump_paths",
    "encode_codepoint",
    "expand_range",
    "format_glyph",
    "load_styles",
    "parse_columns",
    "parse_number",
    "render_column",
    "resolve_glyph_table",
]
