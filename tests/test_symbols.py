"""
Tests for Symbols — Visual vocabulary and outline rendering

These tests validate:
- Symbol sets are complete in both flavours
- Unicode detection honours the MINDMODE_* overrides
- render_tree() draws the visible forest with markers
"""

import io
import os
from dataclasses import fields
from unittest.mock import patch

from mindmode.core.tree import Node
from mindmode.presentation.symbols import (
    ASCII, UNICODE,
    get_symbols, render_tree, safe_print, sanitize_control_chars, supports_unicode, truncate,
)


class TestSymbolSets:
    """Test symbol set completeness."""

    def test_both_sets_are_complete(self):
        """Every field is non-empty in both sets."""
        for symbols in (UNICODE, ASCII):
            for item in fields(symbols):
                assert getattr(symbols, item.name), item.name

    def test_ascii_is_printable(self):
        """ASCII symbols are plain ASCII."""
        for item in fields(ASCII):
            assert getattr(ASCII, item.name).isascii()


class TestSymbolSelection:
    """Test symbol set selection."""

    def test_explicit_preferences(self):
        """Explicit preferences win over detection."""
        assert get_symbols("unicode") is UNICODE
        assert get_symbols("ascii") is ASCII

    def test_auto_respects_detection(self):
        """Auto mode uses detection result."""
        with patch('mindmode.presentation.symbols.supports_unicode', return_value=True):
            assert get_symbols("auto") is UNICODE
            assert get_symbols(None) is UNICODE

        with patch('mindmode.presentation.symbols.supports_unicode', return_value=False):
            assert get_symbols("auto") is ASCII


class TestUnicodeDetection:
    """Test Unicode support detection."""

    def test_ascii_only_env_disables(self):
        """MINDMODE_ASCII_ONLY disables unicode."""
        with patch.dict(os.environ, {'MINDMODE_ASCII_ONLY': '1', 'LANG': 'en_US.UTF-8'}, clear=False):
            assert supports_unicode() is False

    def test_unicode_env_enables(self):
        """MINDMODE_UNICODE forces unicode."""
        with patch.dict(os.environ, {'MINDMODE_UNICODE': 'true', 'MINDMODE_ASCII_ONLY': ''}, clear=False):
            assert supports_unicode() is True

    def test_vscode_detected(self):
        """VSCode terminal is detected."""
        env = {'TERM_PROGRAM': 'vscode', 'MINDMODE_ASCII_ONLY': '', 'MINDMODE_UNICODE': ''}
        with patch.dict(os.environ, env, clear=False):
            with patch('sys.stdout', io.TextIOWrapper(io.BytesIO(), encoding='utf-8')):
                assert supports_unicode() is True


class TestSafeOutput:
    """Sanitizing and truncation."""

    def test_control_chars_removed(self):
        """Escape sequences are stripped, whitespace kept."""
        assert sanitize_control_chars("a\x1b[31mb\tc\n") == "a[31mb\tc\n"

    def test_truncate(self):
        """Long text gets an ellipsis unless full."""
        assert truncate("abcdefghij", 6) == "abc..."
        assert truncate("abcdefghij", 6, full=True) == "abcdefghij"
        assert truncate("", 6) == ""

    def test_safe_print_falls_back_to_ascii(self):
        """Unencodable characters are replaced."""
        stream = io.TextIOWrapper(io.BytesIO(), encoding='ascii')
        safe_print("a → b", file=stream)
        stream.flush()
        assert stream.buffer.getvalue() == b"a -> b\n"


class TestRenderTree:
    """Outline rendering."""

    def test_ascii_outline(self, map_factory):
        """The sample forest renders with connectors and markers."""
        lines = render_tree(map_factory.sample_roots(), ASCII, selected_id="tasks")
        assert lines == [
            "[-] Project  (root)",
            "+- - Goals  (goals)",
            "+- [-] Tasks  (tasks) *",
            "|  +- - Write draft  (draft)",
            "|  +- - Review  (review)",
            "+- - Risks  (risks)",
            "- Archive  (archive)",
        ]

    def test_collapsed_children_hidden(self):
        """Collapsed nodes hide their subtree."""
        root = Node("a", "A", collapsed=True, children=[Node("b", "B")])
        assert render_tree([root], UNICODE, show_ids=False) == ["▸ A"]

    def test_editing_marker_and_empty_text(self):
        """Empty text shows quotes; the editing node is marked."""
        lines = render_tree([Node("a", "")], ASCII, editing_id="a", show_ids=False)
        assert lines == ['- "" [e]']
