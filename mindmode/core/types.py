"""
Types — Value objects shared by parser, registry and commands

ArgSpec      declared argument of a command
Args         immutable name -> primitive mapping with typed accessors
ParsedCommand  frozen parse output (name, args, raw input)
ParseResult    parse / validation outcome
CommandResult  terminal outcome of running a command (never raised)
Command        a named, aliasable operation with an argument schema
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any, Awaitable, Callable, Dict, Iterator, List, Optional, TYPE_CHECKING, Union
)

if TYPE_CHECKING:
    from .context import CommandContext


ArgValue = Union[str, int, float, bool]

DEFAULT_CATEGORY = "general"
NODE_ID_ARG = "nodeId"


class ArgType(str, Enum):
    """Argument value types understood by the validator."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NODE_ID = "node-id"


class Mode(str, Enum):
    """Modal editing state, owned by the host."""
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    MENU = "menu"


@dataclass(frozen=True)
class ArgSpec:
    """Declared argument of a command."""
    name: str
    type: ArgType = ArgType.STRING
    required: bool = False
    default: Optional[ArgValue] = None
    description: str = ""

    @property
    def has_default(self) -> bool:
        return self.default is not None


class Args(Mapping):
    """
    Immutable argument map produced by the parser.

    Positional tokens live under "_0", "_1", ... (index within the
    argument tokens). Typed accessors return None instead of raising when
    a value is missing or has the wrong shape.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Dict[str, ArgValue]] = None, **kwargs: ArgValue):
        merged = dict(values or {})
        merged.update(kwargs)
        self._values: Dict[str, ArgValue] = merged

    def __getitem__(self, key: str) -> ArgValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Args({self._values!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values.items(), key=lambda item: item[0])))

    def with_values(self, **updates: ArgValue) -> 'Args':
        """Return a copy with updates applied."""
        return Args(self._values, **updates)

    def to_dict(self) -> Dict[str, ArgValue]:
        return dict(self._values)

    # -------------------------------------------------------------------------
    # Typed accessors
    # -------------------------------------------------------------------------

    def positional(self, index: int = 0) -> Optional[ArgValue]:
        return self._values.get(f"_{index}")

    def string(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._values.get(name)
        if value is None or isinstance(value, bool):
            return default
        return str(value)

    def number(self, name: str, default: Optional[float] = None) -> Optional[Union[int, float]]:
        value = self._values.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return value

    def flag(self, name: str, default: bool = False) -> bool:
        value = self._values.get(name)
        if isinstance(value, bool):
            return value
        return default

    def node_id(self, name: str = NODE_ID_ARG) -> Optional[str]:
        """
        Node id given explicitly, by flag or first positional.

        Returns:
            Stripped id string, or None when neither form is present
        """
        value = self._values.get(name)
        if value is None or isinstance(value, bool):
            value = self.positional(0)
        if value is None or isinstance(value, bool):
            return None
        text = str(value).strip()
        return text or None


@dataclass(frozen=True)
class ParsedCommand:
    """Output of the parser. Never mutated; validation returns a new one."""
    name: str
    args: Args = field(default_factory=Args)
    raw_input: str = ""


@dataclass
class ParseResult:
    """Outcome of parsing or validating a command line."""
    success: bool
    command: Optional[ParsedCommand] = None
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


@dataclass
class CommandResult:
    """Outcome of executing a command."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: Optional[str] = None) -> 'CommandResult':
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, error: str) -> 'CommandResult':
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
        return data


ExecuteFn = Callable[['CommandContext', Args], Union[CommandResult, Awaitable[CommandResult]]]
GuardFn = Callable[['CommandContext', Args], bool]


@dataclass
class Command:
    """
    A named, aliasable operation.

    execute may be a plain function or a coroutine function; the registry
    awaits it when needed. guard, when present, must return True for the
    command to run.
    """
    name: str
    description: str
    execute: ExecuteFn
    aliases: List[str] = field(default_factory=list)
    category: str = DEFAULT_CATEGORY
    args: List[ArgSpec] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)
    guard: Optional[GuardFn] = None
    countable: bool = False
    repeatable: bool = False

    def arg(self, name: str) -> Optional[ArgSpec]:
        """Look up a declared argument by name."""
        for spec in self.args:
            if spec.name == name:
                return spec
        return None
