"""
Command Registry — Names, aliases, search, help and guarded execution

One explicit instance is built at startup and passed to the interpreter
and the command loader; tests build a fresh one per case.

Usage:
    registry = CommandRegistry()
    registry.register(Command("center", "Center node", execute=center, aliases=["zz"]))

    registry.get("zz")          # -> the center command
    registry.search("ce")       # -> [center, ...] ranked by score
    await registry.execute("zz", context, Args())
"""

import inspect
from collections import OrderedDict
from typing import Dict, List, Optional

from .context import CommandContext
from .errors import RegistrationError
from .types import Args, Command, CommandResult, DEFAULT_CATEGORY


# Search weights. Scores are summed across matches.
SCORE_NAME_EXACT = 100
SCORE_NAME_PREFIX = 80
SCORE_NAME_SUBSTRING = 60
SCORE_ALIAS_EXACT = 90
SCORE_ALIAS_PREFIX = 70
SCORE_ALIAS_SUBSTRING = 50
SCORE_DESCRIPTION = 30
SCORE_CATEGORY = 20

HELP_FOOTER = 'Use "help <command>" for detailed information about a specific command.'


def _collation_key(text: str):
    """Case-insensitive order with lowercase before uppercase on ties."""
    return (text.lower(), text.swapcase())


class CommandRegistry:
    """
    Registry of commands.

    State:
        _commands: name -> Command
        _aliases:  alias -> name
    """

    def __init__(self):
        """Initialize empty registry."""
        self._commands: Dict[str, Command] = {}
        self._aliases: Dict[str, str] = {}

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, command: Command) -> None:
        """
        Register a command and all its aliases atomically.

        Args:
            command: Command to register

        Raises:
            RegistrationError: If the name is empty or taken, or any alias
                collides with a registered name, alias, or another alias
                of the same command. Nothing is registered on failure.
        """
        if not command.name:
            raise RegistrationError("Command name is required")
        if command.name in self._commands:
            raise RegistrationError(f"Command '{command.name}' is already registered")
        if command.name in self._aliases:
            raise RegistrationError(
                f"Command '{command.name}' conflicts with an alias of '{self._aliases[command.name]}'"
            )

        seen = set()
        for alias in command.aliases:
            if (
                alias in self._aliases
                or alias in self._commands
                or alias == command.name
                or alias in seen
            ):
                raise RegistrationError(f"Alias '{alias}' conflicts with existing command or alias")
            seen.add(alias)

        self._commands[command.name] = command
        for alias in command.aliases:
            self._aliases[alias] = command.name

    def unregister(self, name: str) -> bool:
        """
        Remove a command and its aliases.

        Returns:
            True if removed, False if no such command
        """
        command = self._commands.pop(name, None)
        if command is None:
            return False
        for alias in command.aliases:
            if self._aliases.get(alias) == name:
                del self._aliases[alias]
        return True

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, name_or_alias: str) -> Optional[Command]:
        """Resolve by name first, then alias. None if neither matches."""
        command = self._commands.get(name_or_alias)
        if command is not None:
            return command
        name = self._aliases.get(name_or_alias)
        return self._commands.get(name) if name else None

    def get_all(self) -> List[Command]:
        """All commands in registration order."""
        return list(self._commands.values())

    def get_by_category(self, category: str) -> List[Command]:
        return [cmd for cmd in self._commands.values() if (cmd.category or DEFAULT_CATEGORY) == category]

    def categories(self) -> List[str]:
        """Category names in first-registered order."""
        return list(self._group_by_category().keys())

    def available_names(self) -> List[str]:
        """Every name and alias, sorted."""
        return sorted([*self._commands.keys(), *self._aliases.keys()], key=_collation_key)

    def __len__(self) -> int:
        """Return number of registered commands."""
        return len(self._commands)

    def __contains__(self, name_or_alias: str) -> bool:
        """Check if a name or alias resolves."""
        return self.get(name_or_alias) is not None

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, query: str) -> List[Command]:
        """
        Rank commands against a query.

        Args:
            query: Free text; empty returns every command

        Returns:
            Commands with a positive score, highest first
        """
        needle = (query or "").strip().lower()
        if not needle:
            return self.get_all()

        scored = []
        for command in self._commands.values():
            score = self.score(command, needle)
            if score > 0:
                scored.append((score, command))

        # sorted() is stable: equal scores keep registration order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        return [command for _, command in scored]

    @staticmethod
    def score(command: Command, needle: str) -> int:
        """Search score of one command for a lower-cased query."""
        name = command.name.lower()
        score = 0

        if name == needle:
            score += SCORE_NAME_EXACT
        elif name.startswith(needle):
            score += SCORE_NAME_PREFIX
        elif needle in name:
            score += SCORE_NAME_SUBSTRING

        for alias in command.aliases:
            lower = alias.lower()
            if lower == needle:
                score += SCORE_ALIAS_EXACT
            elif lower.startswith(needle):
                score += SCORE_ALIAS_PREFIX
            elif needle in lower:
                score += SCORE_ALIAS_SUBSTRING

        if needle in (command.description or "").lower():
            score += SCORE_DESCRIPTION
        if command.category and needle in command.category.lower():
            score += SCORE_CATEGORY

        return score

    # -------------------------------------------------------------------------
    # Help
    # -------------------------------------------------------------------------

    def get_help(self, name_or_alias: Optional[str] = None) -> str:
        """
        Render help text.

        Args:
            name_or_alias: Command to describe; None lists every command

        Returns:
            Deterministic line-oriented text
        """
        if name_or_alias:
            command = self.get(name_or_alias)
            if command is None:
                return f"Command '{name_or_alias}' not found"
            return self.format_command_help(command)

        lines = ["Available Commands:", ""]
        for category, commands in self._group_by_category().items():
            lines.append(f"{category.upper()}:")
            for command in commands:
                entry = f"  {command.name}"
                if command.aliases:
                    entry += f" ({', '.join(command.aliases)})"
                entry += f" - {command.description}"
                lines.append(entry)
            lines.append("")
        lines.append(HELP_FOOTER)
        return "\n".join(lines)

    @staticmethod
    def format_command_help(command: Command) -> str:
        lines = [f"Command: {command.name}"]
        if command.aliases:
            lines.append(f"Aliases: {', '.join(command.aliases)}")
        lines.append(f"Description: {command.description}")
        lines.append(f"Category: {command.category or DEFAULT_CATEGORY}")

        if command.args:
            lines.extend(["", "Arguments:"])
            for spec in command.args:
                entry = f"  --{spec.name} ({getattr(spec.type, 'value', spec.type)})"
                if spec.required:
                    entry += " [required]"
                if spec.has_default:
                    entry += f" [default: {_format_default(spec.default)}]"
                if spec.description:
                    entry += f" - {spec.description}"
                lines.append(entry)

        if command.examples:
            lines.extend(["", "Examples:"])
            lines.extend(f"  {example}" for example in command.examples)

        return "\n".join(lines)

    def _group_by_category(self) -> "OrderedDict[str, List[Command]]":
        groups: "OrderedDict[str, List[Command]]" = OrderedDict()
        for command in self._commands.values():
            groups.setdefault(command.category or DEFAULT_CATEGORY, []).append(command)
        for commands in groups.values():
            commands.sort(key=lambda cmd: _collation_key(cmd.name))
        return groups

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def can_execute(self, name_or_alias: str, context: CommandContext, args: Optional[Args] = None) -> bool:
        """True if the command exists and its guard (if any) passes."""
        command = self.get(name_or_alias)
        if command is None:
            return False
        return command.guard is None or bool(command.guard(context, args if args is not None else Args()))

    async def execute(
        self,
        name_or_alias: str,
        context: CommandContext,
        args: Optional[Args] = None,
    ) -> CommandResult:
        """
        Run a command by name or alias.

        Lookup failures, guard rejections and exceptions raised by the
        command all come back as failed CommandResults.
        """
        command = self.get(name_or_alias)
        if command is None:
            return CommandResult.fail(f"Command '{name_or_alias}' not found")

        args = args if args is not None else Args()
        try:
            if command.guard is not None and not command.guard(context, args):
                return CommandResult.fail("Command guard rejected execution")

            result = command.execute(context, args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            return CommandResult.fail(str(e) or "Unknown command error")

        if result is None:
            return CommandResult.ok()
        return result


def _format_default(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
