"""
Command Interpreter — Text and vim-key entry points over one registry

Usage:
    interpreter = CommandInterpreter(build_registry())
    result = await interpreter.execute("navigate up", document.context())
    result = await interpreter.execute_vim("dd", document.context(), count=3)

Every entry point returns a CommandResult; nothing here raises for bad
input, unknown commands, or failing commands.
"""

import sys
from dataclasses import replace
from typing import List, Optional

import orjson

from .commands import build_registry
from .core.context import CommandContext
from .core.errors import CommandLookupError
from .core.keys import (
    DOT_REPEAT, VIM_COMMAND_MAP,
    RepeatRegistry, RepeatableChange, ordered_list_number,
)
from .core.parser import generate_suggestions, parse_command, validate_command
from .core.registry import CommandRegistry
from .core.types import Args, Command, CommandResult, ParseResult


# Suggestions appended to a "not found" error
SUGGESTIONS_IN_ERROR = 3

LIST_TYPES = ("ordered-list", "unordered-list")


class CommandInterpreter:
    """
    Parses, validates and runs commands against a registry.

    State:
        registry: Commands available to this interpreter
        repeats: Last repeatable change, replayed by "."
    """

    def __init__(self, registry: Optional[CommandRegistry] = None, repeats: Optional[RepeatRegistry] = None):
        self.registry = registry if registry is not None else build_registry()
        self.repeats = repeats if repeats is not None else RepeatRegistry()

    # -------------------------------------------------------------------------
    # Text commands
    # -------------------------------------------------------------------------

    def parse(self, text: str) -> ParseResult:
        return parse_command(text)

    def lookup(self, name: str) -> Command:
        """
        Resolve a name or alias.

        Raises:
            CommandLookupError: With near-miss suggestions attached
        """
        command = self.registry.get(name)
        if command is None:
            raise CommandLookupError(name, self.suggestions(name))
        return command

    async def execute(
        self,
        text: str,
        context: CommandContext,
        dry_run: bool = False,
        verbose: bool = False,
    ) -> CommandResult:
        """
        Run one command line.

        Args:
            text: Raw command line
            context: Execution context
            dry_run: Validate and describe without running
            verbose: Report successful commands on stderr

        Returns:
            CommandResult (never raises)
        """
        parsed = parse_command(text)
        if not parsed.success or parsed.command is None:
            return CommandResult.fail(parsed.error or "Failed to parse command")

        try:
            command = self.lookup(parsed.command.name)
        except CommandLookupError as e:
            hint = e.suggestions[:SUGGESTIONS_IN_ERROR]
            return CommandResult.fail(f"{e}. Did you mean: {', '.join(hint)}?" if hint else str(e))

        validated = validate_command(parsed.command, command.args)
        if not validated.success or validated.command is None:
            return CommandResult.fail(validated.error or "Command validation failed")

        args = validated.command.args
        if dry_run:
            payload = orjson.dumps(args.to_dict()).decode()
            return CommandResult.ok(f"Would execute: {command.name} with args: {payload}")

        result = await self.registry.execute(command.name, context, args)
        if verbose and result.success:
            print(f"Command executed: {text} -> {result.message or 'ok'}", file=sys.stderr)
        return result

    # -------------------------------------------------------------------------
    # Vim keys
    # -------------------------------------------------------------------------

    async def execute_vim(self, key: str, context: CommandContext, count: Optional[int] = None) -> CommandResult:
        """
        Run a completed vim sequence.

        Args:
            key: Sequence as classified by parse_vim_sequence ("dd", "m:3", ".")
            context: Execution context
            count: Count prefix, if any

        Returns:
            CommandResult (never raises)
        """
        if key == DOT_REPEAT:
            return await self._repeat_last(context, count)

        number = ordered_list_number(key)
        if number is not None:
            return self._convert_to_ordered_list(context, number)

        name = VIM_COMMAND_MAP.get(key)
        if name is None:
            return CommandResult.fail(f"Unknown vim command: {key}")

        command = self.registry.get(name)
        if command is None:
            return CommandResult.fail(f"Command not found: {name}")

        run_context = _with_count(context, count)
        result = await self.registry.execute(name, run_context, Args())
        if result.success and command.repeatable:
            self.repeats.record(RepeatableChange(name, count or 1, context.selected_node_id))
        return result

    async def _repeat_last(self, context: CommandContext, count: Optional[int]) -> CommandResult:
        change = self.repeats.last_change()
        if change is None:
            return CommandResult.fail("No previous change to repeat")
        if self.registry.get(change.command_name) is None:
            return CommandResult.fail(f"Command not found: {change.command_name}")
        run_context = _with_count(context, count if count is not None else change.count)
        return await self.registry.execute(change.command_name, run_context, Args())

    def _convert_to_ordered_list(self, context: CommandContext, number: int) -> CommandResult:
        if not context.selected_node_id:
            return CommandResult.fail("No node selected")
        node = context.find_node(context.selected_node_id)
        if node is None:
            return CommandResult.fail("Selected node not found")
        update = context.handler("update_node")
        if update is None:
            return CommandResult.fail("Node update is not available")

        level = 1
        find_parent = context.handler("find_parent_node")
        parent = find_parent(node.id) if find_parent else None
        parent_meta = (parent.markdown_meta or {}) if parent is not None else {}
        if parent_meta.get("type") in LIST_TYPES:
            level = max((parent_meta.get("level") or 1) + 1, 1)

        try:
            update(node.id, {"markdown_meta": {
                "type": "ordered-list",
                "level": level,
                "original_format": f"{max(1, number)}.",
                "indent_level": max(level - 1, 0) * 2,
                "line_number": (node.markdown_meta or {}).get("line_number", 0),
            }})
        except Exception as e:
            return CommandResult.fail(str(e) or "Failed to set ordered number")
        return CommandResult.ok(f"Converted to {number}. ordered list")

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def suggestions(self, partial: str) -> List[str]:
        return generate_suggestions(partial, self.registry.get_all())

    def help(self, name: Optional[str] = None) -> str:
        return self.registry.get_help(name)

    def available_commands(self) -> List[str]:
        return self.registry.available_names()

    def is_valid_command(self, name: str) -> bool:
        return name in self.registry


def _with_count(context: CommandContext, count: Optional[int]) -> CommandContext:
    return replace(context, count=count) if count else context
