"""
Command helpers — Shared building blocks for built-in commands

Every built-in command resolves its target node the same way:
explicit flag, then first positional, then the selected node. Handlers
are optional, so commands check capabilities with require_handler() and
fail with a message instead of raising.

Factories:
    node_command()    commands acting on one resolved node (copy, insert, ...)
    simple_command()  commands gated by a host flag (undo, redo)
"""

import functools
import inspect
import sys
from typing import Any, Callable, List, Optional, Tuple

from ..core.context import CommandContext
from ..core.tree import Node
from ..core.types import ArgSpec, ArgType, Args, Command, CommandResult, NODE_ID_ARG


NO_TARGET = "No node selected and no node ID provided"
NO_SELECTION = "No node selected"

NODE_ID_SPEC = ArgSpec(
    NODE_ID_ARG, ArgType.NODE_ID,
    description="Node ID (uses selected node if not specified)",
)


def warn(message: str) -> None:
    """Non-fatal diagnostic on stderr."""
    print(f"Warning: {message}", file=sys.stderr)


def target_id(context: CommandContext, args: Args, name: str = NODE_ID_ARG) -> Optional[str]:
    """Node id from the flag, the first positional, or the selection."""
    return args.node_id(name) or context.selected_node_id


def require_node(
    context: CommandContext,
    node_id: Optional[str],
    missing: str = NO_TARGET,
    label: str = "Node",
) -> Tuple[Optional[Node], Optional[CommandResult]]:
    """
    Resolve a node through the host.

    Returns:
        (node, None) on success, (None, failed result) otherwise
    """
    if not node_id:
        return None, CommandResult.fail(missing)
    if context.handler("find_node_by_id") is None:
        return None, CommandResult.fail("Node lookup is not available")
    node = context.find_node(node_id)
    if node is None:
        return None, CommandResult.fail(f"{label} {node_id} not found")
    return node, None


def require_handler(context: CommandContext, name: str, label: str) -> Tuple[Optional[Callable], Optional[CommandResult]]:
    """
    Look up a handler the command cannot run without.

    Returns:
        (handler, None), or (None, failed result naming the capability)
    """
    handler = context.handler(name)
    if handler is None:
        return None, CommandResult.fail(f"{label} is not available")
    return handler, None


async def call(handler: Callable, *args: Any, **kwargs: Any) -> Any:
    """Invoke a handler, awaiting it when it is a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def with_error_handling(fallback: str):
    """
    Turn exceptions raised by an execute function into failed results.

    Args:
        fallback: Error used when the exception carries no message
    """
    def decorator(fn):
        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(context, args):
                try:
                    return await fn(context, args)
                except Exception as e:
                    return CommandResult.fail(str(e) or fallback)
            return async_wrapper

        @functools.wraps(fn)
        def wrapper(context, args):
            try:
                return fn(context, args)
            except Exception as e:
                return CommandResult.fail(str(e) or fallback)
        return wrapper
    return decorator


def has_selection_outside_insert(context: CommandContext, args: Args) -> bool:
    """Guard shared by motion commands."""
    return bool(context.selected_node_id) and not context.in_insert_mode


def enter_insert_mode(context: CommandContext) -> None:
    """Switch the host to insert mode when it supports modes."""
    set_mode = context.handler("set_mode")
    if set_mode is not None:
        set_mode("insert")


# =============================================================================
# Factories
# =============================================================================

def node_command(
    name: str,
    description: str,
    action: Callable[[str, Node, CommandContext], Any],
    message: Callable[[Node], str],
    aliases: Optional[List[str]] = None,
    category: str = "editing",
    args: Optional[List[ArgSpec]] = None,
    repeatable: bool = False,
    countable: bool = False,
    requires: Optional[Tuple[str, str]] = None,
) -> Command:
    """
    Build a command that acts on one resolved node.

    Args:
        action: Called with (node_id, node, context); may be async
        message: Success message from the node (read before the action)
        requires: (handler name, capability label) checked before the action
    """
    @with_error_handling(f"Failed to {name}")
    async def execute(context: CommandContext, parsed: Args) -> CommandResult:
        node, error = require_node(context, target_id(context, parsed))
        if error:
            return error
        if requires is not None:
            _, error = require_handler(context, *requires)
            if error:
                return error
        text = message(node)
        await call(action, node.id, node, context)
        return CommandResult.ok(text)

    return Command(
        name=name,
        description=description,
        execute=execute,
        aliases=list(aliases or []),
        category=category,
        args=list(args) if args is not None else [NODE_ID_SPEC],
        examples=[name, *(aliases or [])],
        repeatable=repeatable,
        countable=countable,
    )


def simple_command(
    name: str,
    description: str,
    handler: str,
    available: str,
    nothing: str,
    done: str,
    aliases: Optional[List[str]] = None,
    category: str = "application",
) -> Command:
    """
    Build a command that calls one handler when a host flag allows it.

    Args:
        handler: Handler name to call (e.g. "undo")
        available: Host attribute that must be truthy (e.g. "can_undo")
        nothing: Error when the flag is false
        done: Success message
    """
    @with_error_handling(f"Failed to {name}")
    def execute(context: CommandContext, parsed: Args) -> CommandResult:
        fn, error = require_handler(context, handler, f"{name.capitalize()} function")
        if error:
            return error
        flag = context.value(available, False)
        if callable(flag):
            flag = flag()
        if not flag:
            return CommandResult.fail(nothing)
        fn()
        return CommandResult.ok(done)

    return Command(
        name=name,
        description=description,
        execute=execute,
        aliases=list(aliases or []),
        category=category,
        examples=[name, *(aliases or [])],
    )
