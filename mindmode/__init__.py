"""
mindmode — Modal command interpreter for mind maps

Text commands and vim keys drive a tree of nodes through a small,
optional handler surface. Hosts implement the handlers; the reference
MindMapDocument implements all of them over a JSON file.

Usage:
    mindmode show plan.json
    mindmode run --select root --save plan.json add-child --text "Goals"
    mindmode keys --select root plan.json l zc
    mindmode commands fold
    mindmode help toggle
"""

__version__ = "0.1.0"

# Core layer
from .core.errors import (
    MindModeError, ParseError, UnclosedQuoteError, ValidationError,
    RegistrationError, CommandLookupError,
)
from .core.tree import Node, TreeModel
from .core.types import ArgSpec, ArgType, Args, Command, CommandResult, Mode
from .core.context import CommandContext
from .core.registry import CommandRegistry

# Commands and hosts
from .commands import build_registry, register_all
from .interpreter import CommandInterpreter
from .document import MindMapDocument
from .events import CanvasEvent, dispatch_canvas_event

# Configuration
from .config import Config, ConfigManager, get_config

__all__ = [
    "__version__",
    # Errors
    "MindModeError", "ParseError", "UnclosedQuoteError", "ValidationError",
    "RegistrationError", "CommandLookupError",
    # Core
    "Node", "TreeModel", "ArgSpec", "ArgType", "Args", "Command",
    "CommandResult", "Mode", "CommandContext", "CommandRegistry",
    # Commands and hosts
    "build_registry", "register_all", "CommandInterpreter", "MindMapDocument",
    "CanvasEvent", "dispatch_canvas_event",
    # Configuration
    "Config", "ConfigManager", "get_config",
]
