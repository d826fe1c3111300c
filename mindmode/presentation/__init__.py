"""
Presentation — Display layer for the mindmode CLI

- Symbols: Visual vocabulary (unicode/ascii)
- Safe output: control-char stripping, encoding fallback
- Tree outline rendering
"""

from .symbols import (
    SymbolSet, get_symbols, supports_unicode,
    safe_print, sanitize_control_chars, truncate,
    render_tree, SUMMARY_LENGTH,
)

__all__ = [
    "SymbolSet", "get_symbols", "supports_unicode",
    "safe_print", "sanitize_control_chars", "truncate",
    "render_tree", "SUMMARY_LENGTH",
]
