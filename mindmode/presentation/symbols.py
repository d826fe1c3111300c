"""
Symbols — Visual vocabulary for mind-map output

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe output utilities:
- safe_print(): Encoding-safe printing for node text from map files
- sanitize_control_chars(): Strip terminal control sequences
- render_tree(): Outline of a node forest
"""

import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence


# =============================================================================
# Safe Output Utilities (Two-Layer Defense)
# =============================================================================
# Layer 1 (Security): sanitize_control_chars() - strips dangerous control chars
# Layer 2 (Encoding): safe_print() - handles display encoding gracefully

# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '←': '<-',
    '↑': '^',
    '↓': 'v',
    '…': '...',
    '–': '-',
    '—': '--',
    '•': '*',
    '·': '.',
    '▸': '>',
    '▾': 'v',
    '├': '+',
    '└': '+',
    '│': '|',
    '─': '-',
}


def sanitize_control_chars(text: str) -> str:
    """
    Layer 1 (Security): Remove control characters from untrusted text.

    Preserves: newlines (\\n), tabs (\\t), carriage returns (\\r)
    """
    if not text:
        return text
    return ''.join(char for char in text if ord(char) >= 32 or ord(char) in (9, 10, 13))


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Layer 2 (Encoding): Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.

    Args:
        text: Text to print (may contain any Unicode)
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            # Last resort: replace all unencodable chars with ?
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


# =============================================================================
# Display Truncation
# =============================================================================

SUMMARY_LENGTH = 80       # Node text in outlines


def truncate(text: str, length: int = SUMMARY_LENGTH, full: bool = False) -> str:
    """
    Truncate text with ellipsis, respecting full mode.

    Examples:
        truncate("Short", 50)                 -> "Short"
        truncate("Any length", 5, full=True)  -> "Any length"
    """
    if not text:
        return ""
    if full or len(text) <= length:
        return text
    if length <= 3:
        return text[:length]
    return text[:length - 3] + "..."


@dataclass(frozen=True)
class SymbolSet:
    """Complete set of symbols for node states and structure."""
    # Node states
    collapsed: str
    expanded: str
    leaf: str
    selected: str
    editing: str

    # Status markers
    check_pass: str
    check_fail: str
    arrow: str

    # Tree/structure markers
    tree_branch: str
    tree_end: str
    tree_pipe: str
    bullet: str

    # Text truncation
    ellipsis: str


UNICODE = SymbolSet(
    collapsed='▸',
    expanded='▾',
    leaf='·',
    selected='●',
    editing='✎',
    check_pass='✓',
    check_fail='❌',
    arrow='→',
    tree_branch='├─',
    tree_end='└─',
    tree_pipe='│ ',
    bullet='•',
    ellipsis='…',
)

ASCII = SymbolSet(
    collapsed='[+]',
    expanded='[-]',
    leaf='-',
    selected='*',
    editing='[e]',
    check_pass='[OK]',
    check_fail='[ERR]',
    arrow='->',
    tree_branch='+-',
    tree_end='+-',
    tree_pipe='| ',
    bullet='*',
    ellipsis='...',
)


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    # Explicit environment override
    if os.environ.get('MINDMODE_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('MINDMODE_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        # Windows code pages that don't support our Unicode symbols
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang or 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    # Known good terminals
    if os.environ.get('TERM_PROGRAM', '') in ('vscode', 'iTerm.app', 'Apple_Terminal', 'Hyper'):
        return True
    if os.environ.get('WT_SESSION'):
        return True

    if stdout_encoding and 'utf' in stdout_encoding.lower():
        return True

    # Default: ASCII for safety
    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII


# =============================================================================
# Tree Rendering
# =============================================================================

def node_marker(symbols: SymbolSet, node) -> str:
    if not node.children:
        return symbols.leaf
    return symbols.collapsed if node.collapsed else symbols.expanded


def render_tree(
    roots: Sequence,
    symbols: SymbolSet,
    selected_id: Optional[str] = None,
    editing_id: Optional[str] = None,
    full: bool = False,
    show_ids: bool = True,
) -> List[str]:
    """
    Outline a node forest, one line per visible node.

    Children of collapsed nodes are hidden. The selected node is
    suffixed with the selected marker.

    Examples:
        ▾ Project  (root) ●
        ├─ · Goals  (node-1a2b3c)
        └─ ▸ Risks  (node-4d5e6f)
    """
    lines: List[str] = []

    def label(node) -> str:
        text = truncate(sanitize_control_chars(node.text) or '""', SUMMARY_LENGTH, full)
        line = f"{node_marker(symbols, node)} {text}"
        if show_ids:
            line += f"  ({node.id})"
        if node.id == editing_id:
            line += f" {symbols.editing}"
        if node.id == selected_id:
            line += f" {symbols.selected}"
        return line

    def walk(node, prefix: str) -> None:
        if node.collapsed:
            return
        for i, child in enumerate(node.children):
            last = i == len(node.children) - 1
            connector = symbols.tree_end if last else symbols.tree_branch
            lines.append(f"{prefix}{connector} {label(child)}")
            walk(child, prefix + ("   " if last else symbols.tree_pipe + " "))

    for root in roots:
        lines.append(label(root))
        walk(root, "")

    return lines
