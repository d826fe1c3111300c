"""
Tests for vim key sequences — counts, prefixes, ordered-list numbers, dot repeat
"""

import pytest

from mindmode.core.keys import (
    VIM_COMMAND_MAP, VIM_SEQUENCES,
    RepeatRegistry, RepeatableChange,
    can_sequence_continue, get_vim_keys, is_valid_vim_key,
    ordered_list_number, parse_vim_sequence,
)


class TestParseSequence:
    """Classification of key buffers."""

    def test_count_alone_is_partial(self):
        """A bare count waits for a command."""
        result = parse_vim_sequence("3")
        assert result.is_partial
        assert result.count == 3
        assert not result.is_complete

    def test_count_with_command(self):
        """A count followed by a command completes."""
        result = parse_vim_sequence("3j")
        assert result.is_complete
        assert result.command == "j"
        assert result.count == 3

    def test_multi_digit_count(self):
        """Counts can have several digits."""
        result = parse_vim_sequence("12dd")
        assert (result.command, result.count) == ("dd", 12)

    def test_prefix_is_partial(self):
        """A prefix of a longer sequence is partial."""
        assert parse_vim_sequence("z").is_partial
        assert parse_vim_sequence("g").is_partial
        assert parse_vim_sequence("ci").is_partial

    def test_two_key_sequence(self):
        """zz completes without a count."""
        result = parse_vim_sequence("zz")
        assert result.is_complete
        assert result.count is None

    def test_count_then_m_is_ordered_list(self):
        """A count before m means an ordered-list number."""
        result = parse_vim_sequence("2m")
        assert result.is_complete
        assert result.command == "m:2"
        assert result.count == 2

    def test_plain_m_is_convert(self):
        """Without a count, m is the convert command."""
        assert parse_vim_sequence("m").command == "m"

    def test_dot_repeat(self):
        """A dot is a complete dot-repeat."""
        result = parse_vim_sequence(".")
        assert result.is_complete
        assert result.is_dot_repeat

    def test_zero_is_a_command_not_a_count(self):
        """A leading zero is the current-root command."""
        result = parse_vim_sequence("0")
        assert result.is_complete
        assert result.command == "0"

    def test_case_is_preserved(self):
        """Upper and lower case are different commands."""
        assert parse_vim_sequence("G").command == "G"
        assert parse_vim_sequence("zR").command == "zR"

    def test_unknown_clears(self):
        """Unknown buffers should be cleared."""
        result = parse_vim_sequence("q")
        assert result.should_clear
        assert not result.is_partial
        assert not result.is_complete


class TestHelpers:
    """Key helpers."""

    def test_can_sequence_continue(self):
        """Only keys leading to a known sequence continue the buffer."""
        assert can_sequence_continue("z", "z")
        assert can_sequence_continue("", "3")
        assert can_sequence_continue("3", "d")
        assert not can_sequence_continue("z", "q")

    def test_is_valid_vim_key(self):
        """Single keys found in any sequence are valid."""
        assert is_valid_vim_key("z")
        assert not is_valid_vim_key("q")
        assert not is_valid_vim_key("zz")

    def test_get_vim_keys_includes_digits_and_escape(self):
        """Digits and escape are always present."""
        keys = get_vim_keys()
        assert "escape" in keys
        assert all(digit in keys for digit in "0123456789")
        assert len(keys) == len(set(keys))

    @pytest.mark.parametrize("command,expected", [("m:3", 3), ("m:10", 10), ("m", None), ("dd", None)])
    def test_ordered_list_number(self, command, expected):
        """Only m:<n> carries a number."""
        assert ordered_list_number(command) == expected

    def test_mapped_sequences_are_recognized(self):
        """Every mapped multi-character sequence is a complete sequence."""
        named = {"tab", "enter", "delete", "backspace", "escape", "?"}
        for key in VIM_COMMAND_MAP:
            if key not in named:
                assert key in VIM_SEQUENCES, key


class TestRepeatRegistry:
    """Last repeatable change."""

    def test_records_last_change(self):
        """Only the latest change is kept."""
        repeats = RepeatRegistry()
        assert repeats.last_change() is None
        repeats.record(RepeatableChange("cut", 2, "tasks"))
        repeats.record(RepeatableChange("paste"))
        assert repeats.last_change() == RepeatableChange("paste", 1, None)

    def test_clear(self):
        """Clearing forgets the change."""
        repeats = RepeatRegistry()
        repeats.record(RepeatableChange("cut"))
        repeats.clear()
        assert repeats.last_change() is None
