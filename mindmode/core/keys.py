"""
Key Sequences — Vim-style multi-key input

parse_vim_sequence() classifies the keys typed so far:

    "3"    partial (count waiting for a command)
    "3j"   complete: command "j", count 3
    "z"    partial (prefix of zz/za/zo/...)
    "zz"   complete
    "2m"   complete: command "m:2" (convert to ordered list item 2)
    "."    complete dot-repeat
    "q"    unknown: the buffer should be cleared

VIM_COMMAND_MAP translates completed sequences to registry command names.
RepeatRegistry remembers the last repeatable change for ".".
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional


COUNT_PATTERN = re.compile(r"^([1-9]\d*)(.*)$")
ORDERED_LIST_PATTERN = re.compile(r"^m:(\d+)$")
DOT_REPEAT = "."

# Sequences the parser recognizes as complete
VIM_SEQUENCES = (
    "zz", "zt", "za", "zo", "zc", "zR", "zM",
    "dd", "yy", "gg", "gt", "gT", "gv", "ciw", ">>", "<<",
    "r", "h", "j", "k", "l", "i", "a", "A", "I", "o", "O", "X",
    "p", "P", "m", "M", "G", "t", "T", "0", "/", "n", "N", "s", "x", "u",
    "S", "B", "~", DOT_REPEAT,
)

# Completed sequence (or named key) -> command name
VIM_COMMAND_MAP: Dict[str, str] = {
    "zz": "center",
    "zt": "center-left",
    "dd": "cut",
    "yy": "copy",
    "za": "toggle",
    "zo": "expand",
    "zc": "collapse",
    "zR": "expand-all",
    "zM": "collapse-all",
    "gg": "select-root",
    "G": "select-bottom",
    "r": "redo",
    "ciw": "edit",
    "i": "append",
    "a": "add-child",
    "A": "append-end",
    "I": "insert",
    "o": "open",
    "O": "open-above",
    "h": "left",
    "j": "down",
    "k": "up",
    "l": "right",
    "p": "paste",
    "tab": "add-child",
    "enter": "add-sibling",
    "m": "convert",
    "0": "select-current-root",
    "delete": "delete",
    "backspace": "delete",
    "u": "undo",
    ">>": "move-as-child-of-sibling",
    "<<": "move-as-next-sibling-of-parent",
    "?": "help",
    "escape": "close-panels",
}


def _partial_sequences() -> frozenset:
    partials = set()
    for sequence in VIM_SEQUENCES:
        for i in range(1, len(sequence)):
            partials.add(sequence[:i])
    return frozenset(partials)


PARTIAL_SEQUENCES = _partial_sequences()


@dataclass
class VimSequenceResult:
    """Classification of a key buffer."""
    is_complete: bool = False
    is_partial: bool = False
    command: Optional[str] = None
    count: Optional[int] = None
    should_clear: bool = False
    is_dot_repeat: bool = False


def parse_vim_sequence(sequence: str) -> VimSequenceResult:
    """
    Classify a key buffer.

    Case is preserved: "M" and "m" are different commands.

    Args:
        sequence: Keys typed so far, optionally led by a count

    Returns:
        VimSequenceResult describing the buffer
    """
    keys = sequence.strip()
    count = None

    match = COUNT_PATTERN.match(keys)
    if match:
        count = int(match.group(1))
        keys = match.group(2)
        if not keys:
            return VimSequenceResult(is_partial=True, count=count)

    if keys == "m" and count is not None:
        return VimSequenceResult(is_complete=True, command=f"m:{count}", count=count)

    if keys == DOT_REPEAT:
        return VimSequenceResult(is_complete=True, command=DOT_REPEAT, is_dot_repeat=True)

    if keys in VIM_SEQUENCES:
        return VimSequenceResult(is_complete=True, command=keys, count=count)

    if keys in PARTIAL_SEQUENCES:
        return VimSequenceResult(is_partial=True, count=count)

    return VimSequenceResult(should_clear=True)


def can_sequence_continue(sequence: str, key: str) -> bool:
    """True if appending key keeps the buffer complete or partial."""
    result = parse_vim_sequence(sequence + key)
    return result.is_complete or result.is_partial


def is_valid_vim_key(key: str) -> bool:
    """True if key appears in any recognized sequence."""
    return len(key) == 1 and any(key in sequence for sequence in VIM_SEQUENCES)


def get_vim_keys() -> List[str]:
    """Every single key that can start or extend a sequence, plus digits."""
    keys = []
    for sequence in VIM_SEQUENCES:
        for key in sequence:
            if key not in keys:
                keys.append(key)
    keys.append("escape")
    for digit in "0123456789":
        if digit not in keys:
            keys.append(digit)
    return keys


def ordered_list_number(command: str) -> Optional[int]:
    """Item number from an "m:<n>" command, None for anything else."""
    match = ORDERED_LIST_PATTERN.match(command or "")
    return int(match.group(1)) if match else None


# =============================================================================
# Dot repeat
# =============================================================================

@dataclass(frozen=True)
class RepeatableChange:
    """A command that "." can replay."""
    command_name: str
    count: int = 1
    selected_node_id: Optional[str] = None


class RepeatRegistry:
    """Remembers the last repeatable change."""

    def __init__(self):
        self._last: Optional[RepeatableChange] = None

    def record(self, change: RepeatableChange) -> None:
        self._last = change

    def last_change(self) -> Optional[RepeatableChange]:
        return self._last

    def clear(self) -> None:
        self._last = None
