"""
Commands — Built-in command set with module-level registration

Each command module exports a COMMANDS list. register_all() imports every
module in COMMAND_MODULES and registers its commands into an explicit
registry instance.

Registry pattern enables:
- Locality: argument schema next to implementation
- Open/Closed: add a command module = add it to COMMAND_MODULES
- Testability: each test builds its own registry
"""

import importlib
import sys
from typing import List

from ..core.errors import RegistrationError
from ..core.registry import CommandRegistry


# Command modules that participate in registration
# Order determines help display order within a category
COMMAND_MODULES = [
    'navigation',
    'structure',
    'editing',
    'application',
    'ui',
]


def register_all(registry: CommandRegistry) -> List[str]:
    """
    Register every built-in command into a registry.

    A command that conflicts with one already registered is skipped with a
    warning; a module that fails to import is skipped the same way.

    Args:
        registry: Registry to populate

    Returns:
        Names of the commands that were registered
    """
    registered: List[str] = []

    for module_name in COMMAND_MODULES:
        try:
            module = importlib.import_module(f'.{module_name}', __package__)
        except ImportError as e:
            print(f"Warning: Could not load command module '{module_name}': {e}", file=sys.stderr)
            continue

        for command in getattr(module, 'COMMANDS', []):
            try:
                registry.register(command)
            except RegistrationError as e:
                print(f"Warning: Skipping command '{command.name}': {e}", file=sys.stderr)
                continue
            registered.append(command.name)

    return registered


def build_registry() -> CommandRegistry:
    """Fresh registry holding the built-in command set."""
    registry = CommandRegistry()
    register_all(registry)
    return registry
