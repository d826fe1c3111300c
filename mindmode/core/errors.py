"""
Errors — Exception taxonomy for the command interpreter

Only registration raises to callers. Parsing, lookup and execution
boundaries convert these into ParseResult / CommandResult values.
"""

from typing import List, Optional


class MindModeError(Exception):
    """Base class for all interpreter errors."""


class ParseError(MindModeError):
    """Command line could not be tokenized or parsed."""


class UnclosedQuoteError(ParseError):
    """A quote was opened but never closed."""

    def __init__(self, quote: str):
        self.quote = quote
        super().__init__(f"Unclosed quote: {quote}")


class ValidationError(MindModeError):
    """Arguments do not satisfy a command's argument specs."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class RegistrationError(MindModeError):
    """Command name or alias collides with an existing registration."""


class CommandLookupError(MindModeError, KeyError):
    """No command is registered under a name or alias."""

    def __init__(self, name: str, suggestions: Optional[List[str]] = None):
        self.name = name
        self.suggestions = list(suggestions or [])
        super().__init__(f"Command '{name}' not found")

    def __str__(self) -> str:
        return self.args[0]
