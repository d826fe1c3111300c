"""
Tests for argument validation — Required args, type checks and defaults
"""

import pytest

from mindmode.core.errors import ValidationError
from mindmode.core.parser import apply_arg_specs, parse_command, validate_command
from mindmode.core.types import ArgSpec, ArgType, Args, ParsedCommand


def parsed(text: str) -> ParsedCommand:
    return parse_command(text).command


class TestDefaults:
    """Default filling."""

    def test_default_filled_when_absent(self):
        """An absent argument with a default gets it."""
        result = validate_command(parsed("repeat"), [ArgSpec("count", ArgType.NUMBER, default=1)])
        assert result.success
        assert result.command.args["count"] == 1

    def test_user_value_wins(self):
        """A supplied value is kept over the default."""
        result = validate_command(parsed("repeat --count 4"), [ArgSpec("count", ArgType.NUMBER, default=1)])
        assert result.command.args["count"] == 4

    def test_original_not_mutated(self):
        """Validation returns a new command; the input is unchanged."""
        original = parsed("repeat")
        validate_command(original, [ArgSpec("count", ArgType.NUMBER, default=1)])
        assert "count" not in original.args

    def test_no_specs_passes_through(self):
        """Commands without specs accept anything."""
        original = parsed("anything --x 1 y")
        result = validate_command(original, [])
        assert result.success
        assert result.command is original


class TestRequired:
    """Required arguments."""

    def test_missing_required_fails(self):
        """A missing required argument fails with no command."""
        result = validate_command(parsed("select-node"), [ArgSpec("nodeId", ArgType.NODE_ID, required=True)])
        assert not result.success
        assert result.command is None
        assert result.error == "Required argument 'nodeId' is missing"

    def test_errors_are_aggregated(self):
        """Every violation is reported, comma-joined."""
        specs = [
            ArgSpec("a", ArgType.STRING, required=True),
            ArgSpec("n", ArgType.NUMBER),
        ]
        result = validate_command(parsed("cmd --n abc"), specs)
        assert result.error == "Required argument 'a' is missing, Argument 'n' must be a number"

    def test_apply_raises_validation_error(self):
        """The raising form carries the individual errors."""
        with pytest.raises(ValidationError) as exc_info:
            apply_arg_specs(parsed("cmd"), [ArgSpec("a", required=True), ArgSpec("b", required=True)])
        assert len(exc_info.value.errors) == 2


class TestTypes:
    """Type checks and normalization."""

    def test_number_accepts_numeric_string(self):
        """Numeric strings are normalized to numbers."""
        command = ParsedCommand("cmd", Args(n=" 12 "))
        result = validate_command(command, [ArgSpec("n", ArgType.NUMBER)])
        assert result.command.args["n"] == 12

    def test_number_rejects_boolean(self):
        """Booleans are not numbers."""
        result = validate_command(parsed("cmd --n"), [ArgSpec("n", ArgType.NUMBER)])
        assert not result.success

    def test_number_rejects_nan(self):
        """NaN is not a valid number."""
        command = ParsedCommand("cmd", Args(n="nan"))
        assert not validate_command(command, [ArgSpec("n", ArgType.NUMBER)]).success

    def test_boolean_accepts_strings(self):
        """Boolean strings are accepted case-insensitively."""
        command = ParsedCommand("cmd", Args(flag="TRUE"))
        result = validate_command(command, [ArgSpec("flag", ArgType.BOOLEAN)])
        assert result.command.args["flag"] is True

    def test_boolean_rejects_other_values(self):
        """Anything else fails boolean validation."""
        result = validate_command(parsed("cmd --flag maybe"), [ArgSpec("flag", ArgType.BOOLEAN)])
        assert result.error == "Argument 'flag' must be a boolean"

    def test_string_stringifies(self):
        """Coerced numbers are turned back into strings for string args."""
        result = validate_command(parsed("cmd --text 42"), [ArgSpec("text", ArgType.STRING)])
        assert result.command.args["text"] == "42"

    def test_node_id_rejects_blank(self):
        """Node ids must be non-empty after stripping."""
        command = ParsedCommand("cmd", Args(nodeId="   "))
        result = validate_command(command, [ArgSpec("nodeId", ArgType.NODE_ID)])
        assert result.error == "Argument 'nodeId' must be a valid node ID"


class TestArgsAccessors:
    """Typed accessors on Args."""

    def test_node_id_prefers_flag_then_positional(self):
        """node_id reads the flag, then the first positional."""
        assert Args(nodeId="a", _0="b").node_id() == "a"
        assert Args(_0=" b ").node_id() == "b"
        assert Args(nodeId=True).node_id() is None

    def test_string_ignores_booleans(self):
        """string() treats a bare flag as absent."""
        assert Args(text=True).string("text", "fallback") == "fallback"

    def test_with_values_returns_new_instance(self):
        """with_values leaves the original untouched."""
        original = Args(a=1)
        updated = original.with_values(b=2)
        assert original == {"a": 1}
        assert updated == {"a": 1, "b": 2}
