"""
Tests for CommandInterpreter — text commands and vim keys against a real document
"""

import pytest

from mindmode.core.errors import CommandLookupError
from mindmode.core.registry import CommandRegistry
from mindmode.interpreter import CommandInterpreter


def execute(map_factory, interpreter, document, text, **kwargs):
    return map_factory.run(interpreter.execute(text, document.context(), **kwargs))


def vim(map_factory, interpreter, document, key, count=None):
    return map_factory.run(interpreter.execute_vim(key, document.context(), count))


class TestTextCommands:
    """Parse, resolve, validate, run."""

    def test_empty_input(self, map_factory, interpreter, document):
        """Blank input is a parse failure."""
        result = execute(map_factory, interpreter, document, "   ")
        assert result.error == "Empty command"

    def test_unclosed_quote(self, map_factory, interpreter, document):
        """Tokenizer failures are reported."""
        result = execute(map_factory, interpreter, document, 'add-child --text "oops')
        assert result.error == 'Unclosed quote: "'

    def test_unknown_command_suggests(self, map_factory, interpreter, document):
        """Unknown names carry up to three suggestions."""
        result = execute(map_factory, interpreter, document, "delet")
        assert result.error.startswith("Command 'delet' not found. Did you mean: delete")
        assert result.error.endswith("?")
        assert result.error.count(",") <= 2

    def test_unknown_without_suggestions(self, map_factory, interpreter, document):
        """No near miss means a plain not-found error."""
        result = execute(map_factory, interpreter, document, "xyzzyplugh")
        assert result.error == "Command 'xyzzyplugh' not found"

    def test_validation_failure(self, map_factory, interpreter, document):
        """Type mismatches stop execution."""
        result = execute(map_factory, interpreter, document, "add-child --edit maybe")
        assert not result.success
        assert "edit" in result.error
        assert len(document.tree) == 7

    def test_dry_run_describes(self, map_factory, interpreter, document):
        """Dry runs show the validated arguments and change nothing."""
        result = execute(map_factory, interpreter, document, "delete --confirm", dry_run=True)
        assert result.message == 'Would execute: delete with args: {"confirm":true}'
        assert "tasks" in document.tree

    def test_verbose_reports_on_stderr(self, map_factory, interpreter, document, capsys):
        """Verbose mode echoes successful commands."""
        execute(map_factory, interpreter, document, "zz", verbose=True)
        assert "Command executed: zz -> Centered node tasks" in capsys.readouterr().err

    def test_add_child_changes_document(self, map_factory, interpreter, document):
        """Commands run against the document."""
        result = execute(map_factory, interpreter, document, "add-child --text Deadline --edit false")
        assert result.success
        tasks = document.tree.get("tasks")
        assert [child.text for child in tasks.children] == ["Write draft", "Review", "Deadline"]
        assert document.mode == "normal"

    def test_lookup_raises_with_suggestions(self, interpreter):
        """lookup() raises for unknown names."""
        with pytest.raises(CommandLookupError) as info:
            interpreter.lookup("colapse")
        assert "collapse" in info.value.suggestions

    def test_discovery(self, interpreter):
        """Names, aliases and help are exposed."""
        assert interpreter.is_valid_command("zz")
        assert not interpreter.is_valid_command("nope")
        assert "center" in interpreter.available_commands()
        assert interpreter.help("zz").startswith("Command: center")


class TestVimKeys:
    """Completed key sequences."""

    def test_motion(self, map_factory, interpreter, document):
        """j moves down."""
        result = vim(map_factory, interpreter, document, "j")
        assert result.success
        assert document.selected_node_id == "risks"

    def test_motion_with_count(self, map_factory, interpreter, document):
        """A count is forwarded to the command."""
        document.select_node("goals")
        vim(map_factory, interpreter, document, "j", count=2)
        assert document.selected_node_id == "risks"

    def test_unknown_key(self, map_factory, interpreter, document):
        """Unmapped keys fail."""
        result = vim(map_factory, interpreter, document, "q")
        assert result.error == "Unknown vim command: q"

    def test_mapped_command_missing(self, map_factory, document):
        """A mapped key whose command is not registered fails."""
        interpreter = CommandInterpreter(CommandRegistry())
        result = vim(map_factory, interpreter, document, "zz")
        assert result.error == "Command not found: center"

    def test_dot_without_history(self, map_factory, interpreter, document):
        """Nothing to repeat yet."""
        result = vim(map_factory, interpreter, document, ".")
        assert result.error == "No previous change to repeat"

    def test_dot_repeats_cut(self, map_factory, interpreter, document):
        """dd then . cuts the next selection too."""
        assert vim(map_factory, interpreter, document, "dd").message == "Cut node"
        assert document.selected_node_id == "risks"

        result = vim(map_factory, interpreter, document, ".")
        assert result.message == "Cut node"
        assert "risks" not in document.tree
        assert [child.id for child in document.tree.get("root").children] == ["goals"]

    def test_motion_is_not_repeatable(self, map_factory, interpreter, document):
        """Only changes are recorded for dot repeat."""
        vim(map_factory, interpreter, document, "j")
        assert interpreter.repeats.last_change() is None

    def test_ordered_list_number(self, map_factory, interpreter, document):
        """2m style keys convert the selection to a numbered item."""
        result = vim(map_factory, interpreter, document, "m:3")
        assert result.message == "Converted to 3. ordered list"
        assert document.tree.get("tasks").markdown_meta == {
            "type": "ordered-list",
            "level": 1,
            "original_format": "3.",
            "indent_level": 0,
            "line_number": 0,
        }

    def test_ordered_list_nests_under_list(self, map_factory, interpreter, document):
        """Inside a list parent the level goes one deeper."""
        document.update_node("tasks", {"markdown_meta": {"type": "ordered-list", "level": 1}})
        document.select_node("draft")
        vim(map_factory, interpreter, document, "m:1")
        meta = document.tree.get("draft").markdown_meta
        assert (meta["level"], meta["indent_level"]) == (2, 2)

    def test_ordered_list_needs_selection(self, map_factory, interpreter, document):
        """No selection, no conversion."""
        document.select_node(None)
        assert vim(map_factory, interpreter, document, "m:2").error == "No node selected"
