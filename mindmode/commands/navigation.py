"""
Navigation commands — Motion, selection and viewport centering

navigate / up / down / left / right   directional motion (countable)
select-node / find-node              explicit selection and text search
select-root / select-current-root    jump to document roots
select-bottom                        last leaf of the last root
center / center-left                 viewport centering
"""

from typing import List, Optional

from ..core.context import CommandContext
from ..core.navigation import Direction, normalize_direction
from ..core.tree import Node, collect_nodes
from ..core.types import ArgSpec, ArgType, Args, Command, CommandResult
from .base import (
    NO_SELECTION, NO_TARGET, NODE_ID_SPEC,
    has_selection_outside_insert, require_handler, target_id, with_error_handling,
)


CATEGORY = "navigation"


def _roots(context: CommandContext) -> List[Node]:
    get_roots = context.handler("get_root_nodes")
    return list(get_roots() or []) if get_roots else []


def _focus(context: CommandContext, node_id: str) -> None:
    """Select a node, center it when possible, close side lists."""
    context.handler("select_node")(node_id)
    center = context.handler("center_node_in_view")
    if center is not None:
        center(node_id, True)
    close_lists = context.handler("close_attachment_and_link_lists")
    if close_lists is not None:
        close_lists()


def _root_containing(roots: List[Node], node_id: str) -> Optional[Node]:
    for root in roots:
        if any(node.id == node_id for node in collect_nodes(root)):
            return root
    return None


# =============================================================================
# Directional motion
# =============================================================================

@with_error_handling("Failed to navigate")
def navigate(context: CommandContext, args: Args) -> CommandResult:
    raw = args.string("direction") or args.string("_0")
    if not raw:
        return CommandResult.fail("Direction is required (up, down, left, right)")
    if not context.selected_node_id:
        return CommandResult.fail(NO_SELECTION)

    direction = normalize_direction(raw)
    if direction is None:
        return CommandResult.fail(f'Invalid direction "{raw}". Use: up, down, left, right')

    move, error = require_handler(context, "navigate_to_direction", "Navigation")
    if error:
        return error

    count = context.repeat_count
    if direction in (Direction.LEFT, Direction.RIGHT):
        for _ in range(count):
            move(direction.value)
    else:
        move(direction.value, count)

    if count > 1:
        return CommandResult.ok(f"Navigated {direction.value} {count} steps")
    return CommandResult.ok(f"Navigated {direction.value}")


def _motion(name: str, aliases: List[str], description: str) -> Command:
    def execute(context: CommandContext, args: Args) -> CommandResult:
        return navigate(context, Args(direction=name))

    return Command(
        name=name,
        description=description,
        execute=execute,
        aliases=aliases,
        category=CATEGORY,
        examples=[name, *aliases],
        guard=has_selection_outside_insert,
        countable=True,
    )


# =============================================================================
# Selection
# =============================================================================

@with_error_handling("Failed to select node")
def select_node(context: CommandContext, args: Args) -> CommandResult:
    node_id = args.node_id()
    if not node_id:
        return CommandResult.fail("Node ID is required")
    select, error = require_handler(context, "select_node", "Selection")
    if error:
        return error
    node = context.find_node(node_id)
    if node is None:
        return CommandResult.fail(f"Node {node_id} not found")
    select(node.id)
    return CommandResult.ok(f'Selected node "{node.text}"')


@with_error_handling("Failed to search")
def find_node(context: CommandContext, args: Args) -> CommandResult:
    query = args.string("text") or args.string("_0")
    if not query:
        return CommandResult.fail("Search text is required")
    exact = args.flag("exact")

    roots = _roots(context)
    if not roots:
        return CommandResult.fail("No root nodes found in current map")

    needle = query if exact else query.lower()
    matches = [
        node
        for root in roots
        for node in collect_nodes(root)
        if (node.text == needle if exact else needle in node.text.lower())
    ]
    if not matches:
        return CommandResult.fail(f'No node matches "{query}"')

    select, error = require_handler(context, "select_node", "Selection")
    if error:
        return error
    select(matches[0].id)
    mode = "exact" if exact else "partial"
    return CommandResult.ok(f'Found "{matches[0].text}" (1 of {len(matches)} {mode} matches)')


@with_error_handling("Failed to select root node")
def select_root(context: CommandContext, args: Args) -> CommandResult:
    roots = _roots(context)
    if not roots:
        return CommandResult.fail("No root nodes found in current map")
    _, error = require_handler(context, "select_node", "Selection")
    if error:
        return error
    _focus(context, roots[0].id)
    return CommandResult.ok(f'Selected root node: "{roots[0].text}"')


@with_error_handling("Failed to select current root node")
def select_current_root(context: CommandContext, args: Args) -> CommandResult:
    if not context.selected_node_id:
        return CommandResult.fail(NO_SELECTION)
    roots = _roots(context)
    if not roots:
        return CommandResult.fail("No root nodes found in current map")

    root = _root_containing(roots, context.selected_node_id)
    if root is None:
        return CommandResult.fail("Could not find root node for selected node")
    if root.id == context.selected_node_id:
        return CommandResult.ok("Already at root node")

    _, error = require_handler(context, "select_node", "Selection")
    if error:
        return error
    _focus(context, root.id)
    return CommandResult.ok(f'Selected root node: "{root.text}"')


@with_error_handling("Failed to select bottom node")
def select_bottom(context: CommandContext, args: Args) -> CommandResult:
    roots = _roots(context)
    if not roots:
        return CommandResult.fail("No root nodes found in current map")
    bottom = roots[-1]
    while bottom.children:
        bottom = bottom.children[-1]

    _, error = require_handler(context, "select_node", "Selection")
    if error:
        return error
    _focus(context, bottom.id)
    return CommandResult.ok(f'Selected bottom node: "{bottom.text}"')


# =============================================================================
# Viewport
# =============================================================================

def _centering(mode: str, default_animate: bool, suffix: str):
    @with_error_handling(f"Failed to center node{suffix}")
    def execute(context: CommandContext, args: Args) -> CommandResult:
        node_id = target_id(context, args)
        if not node_id:
            return CommandResult.fail(NO_TARGET)
        center, error = require_handler(context, "center_node_in_view", "Center function")
        if error:
            return error
        animate = args.flag("animate", default_animate)
        center(node_id, animate, mode)
        return CommandResult.ok(f"Centered node {node_id}{suffix}")
    return execute


COMMANDS = [
    Command(
        name="navigate",
        description="Navigate to adjacent nodes in the specified direction",
        execute=navigate,
        aliases=["nav", "move", "go"],
        category=CATEGORY,
        args=[ArgSpec("direction", ArgType.STRING,
                      description="Direction to navigate: up, down, left, right (or u, d, l, r)")],
        examples=["navigate up", "nav down", "move left", "go right"],
        guard=has_selection_outside_insert,
        countable=True,
    ),
    _motion("up", ["k"], "Navigate up to the previous sibling node"),
    _motion("down", ["j", "d"], "Navigate down to the next sibling node"),
    _motion("left", ["h", "parent"], "Navigate left to the parent node"),
    _motion("right", ["l"], "Navigate right to the closest child node"),
    Command(
        name="select-node",
        description="Select a specific node by ID",
        execute=select_node,
        aliases=["select", "focus"],
        category=CATEGORY,
        args=[ArgSpec("nodeId", ArgType.NODE_ID, description="Node ID to select")],
        examples=["select-node node-123", "select node-123"],
    ),
    Command(
        name="find-node",
        description="Find a node by text and select it",
        execute=find_node,
        aliases=["find", "search"],
        category=CATEGORY,
        args=[
            ArgSpec("text", ArgType.STRING, description="Text to search for"),
            ArgSpec("exact", ArgType.BOOLEAN, default=False, description="Require an exact text match"),
        ],
        examples=['find-node "Project"', 'find --text "Plan" --exact'],
    ),
    Command(
        name="select-root",
        description="Select the first root node",
        execute=select_root,
        aliases=["root", "go-root", "gg"],
        category=CATEGORY,
        examples=["select-root", "root", "gg"],
    ),
    Command(
        name="select-current-root",
        description="Select the root node of the current selection",
        execute=select_current_root,
        aliases=["0", "current-root"],
        category=CATEGORY,
        examples=["select-current-root", "0"],
    ),
    Command(
        name="select-bottom",
        description="Select the last leaf of the last root",
        execute=select_bottom,
        aliases=["G"],
        category=CATEGORY,
        examples=["select-bottom", "G"],
    ),
    Command(
        name="center",
        description="Center the selected node in view",
        execute=_centering("center", True, ""),
        aliases=["zz", "center-node"],
        category=CATEGORY,
        args=[
            NODE_ID_SPEC,
            ArgSpec("animate", ArgType.BOOLEAN, description="Whether to animate the centering transition"),
        ],
        examples=["center", "zz", "center node-123", "center --animate false"],
    ),
    Command(
        name="center-left",
        description="Scroll the selected node to the left edge of the view",
        execute=_centering("left", False, " at left"),
        aliases=["zt"],
        category=CATEGORY,
        args=[
            NODE_ID_SPEC,
            ArgSpec("animate", ArgType.BOOLEAN, description="Whether to animate the transition"),
        ],
        examples=["center-left", "zt"],
    ),
]
