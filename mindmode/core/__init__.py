"""
Core — Interpreter building blocks

- Tree: arena-indexed forest of nodes
- Tokenizer / Parser: command line -> ParsedCommand, validation, suggestions
- Registry: commands, aliases, search, help, guarded execution
- Navigation: directional motion with spatial fallback
- Keys: vim sequences and dot-repeat
- Context: handler surface passed to commands
"""

from .errors import (
    MindModeError, ParseError, UnclosedQuoteError, ValidationError,
    RegistrationError, CommandLookupError,
)
from .tree import Node, TreeModel, collect_nodes
from .tokenizer import tokenize
from .types import (
    ArgSpec, ArgType, Args, Command, CommandResult, Mode,
    ParseResult, ParsedCommand,
)
from .parser import (
    parse_value, parse_arguments, parse_command,
    validate_command, apply_arg_specs, generate_suggestions,
)
from .context import CommandContext
from .registry import CommandRegistry
from .navigation import (
    Direction, SpatialSettings, DEFAULT_SPATIAL,
    navigate, navigate_left, navigate_right, navigate_vertical,
    find_node_by_spatial_direction, normalize_direction,
)
from .keys import (
    VimSequenceResult, parse_vim_sequence, can_sequence_continue,
    VIM_COMMAND_MAP, RepeatRegistry, RepeatableChange,
)

__all__ = [
    # Errors
    "MindModeError", "ParseError", "UnclosedQuoteError", "ValidationError",
    "RegistrationError", "CommandLookupError",
    # Tree
    "Node", "TreeModel", "collect_nodes",
    # Parsing
    "tokenize", "parse_value", "parse_arguments", "parse_command",
    "validate_command", "apply_arg_specs", "generate_suggestions",
    # Types
    "ArgSpec", "ArgType", "Args", "Command", "CommandResult", "Mode",
    "ParseResult", "ParsedCommand", "CommandContext",
    # Registry
    "CommandRegistry",
    # Navigation
    "Direction", "SpatialSettings", "DEFAULT_SPATIAL",
    "navigate", "navigate_left", "navigate_right", "navigate_vertical",
    "find_node_by_spatial_direction", "normalize_direction",
    # Keys
    "VimSequenceResult", "parse_vim_sequence", "can_sequence_continue",
    "VIM_COMMAND_MAP", "RepeatRegistry", "RepeatableChange",
]
