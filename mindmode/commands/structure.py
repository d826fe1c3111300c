"""
Structure commands — Create, fold, reshape and retype nodes

add-child / add-sibling                        create nodes (async handlers)
toggle / expand / collapse                     fold state of one node
expand-all / collapse-all                      fold state of every node
move-as-child-of-sibling (>>)                  indent
move-as-next-sibling-of-parent (<<)            outdent
convert (m)                                    cycle markdown node type
"""

from typing import Callable, List

from ..core.context import CommandContext
from ..core.tree import Node
from ..core.types import ArgSpec, ArgType, Args, Command, CommandResult
from .base import (
    NODE_ID_SPEC,
    call, require_handler, require_node, target_id, with_error_handling,
)


CATEGORY = "structure"

HEADING = "heading"
UNORDERED_LIST = "unordered-list"
ORDERED_LIST = "ordered-list"
NODE_TYPES = (HEADING, UNORDERED_LIST, ORDERED_LIST)

# Current markdown type -> type after "convert" with no --type
CONVERT_CYCLE = {
    HEADING: UNORDERED_LIST,
    ORDERED_LIST: UNORDERED_LIST,
    UNORDERED_LIST: HEADING,
}

TEXT_SPEC = ArgSpec("text", ArgType.STRING, default="", description="Initial text for the new node")
EDIT_SPEC = ArgSpec("edit", ArgType.BOOLEAN, default=True, description="Start editing the new node immediately")


# =============================================================================
# Creation
# =============================================================================

@with_error_handling("Failed to add child node")
async def add_child(context: CommandContext, args: Args) -> CommandResult:
    parent, error = require_node(
        context, target_id(context, args, "parentId"),
        missing="No node selected and no parent ID provided", label="Parent node",
    )
    if error:
        return error
    add, error = require_handler(context, "add_child_node", "Child creation")
    if error:
        return error

    new_id = await call(add, parent.id, args.string("text", ""), args.flag("edit", True))
    if not new_id:
        return CommandResult.fail("Failed to create new child node")
    return CommandResult.ok(f'Added child node to "{parent.text}"')


@with_error_handling("Failed to add sibling node")
async def add_sibling(context: CommandContext, args: Args) -> CommandResult:
    reference, error = require_node(context, target_id(context, args), label="Reference node")
    if error:
        return error
    add, error = require_handler(context, "add_sibling_node", "Sibling creation")
    if error:
        return error

    new_id = await call(add, reference.id, args.string("text", ""), args.flag("edit", True))
    if not new_id:
        return CommandResult.fail("Failed to create new sibling node")
    return CommandResult.ok(f'Added sibling node after "{reference.text}"')


# =============================================================================
# Folding
# =============================================================================

@with_error_handling("Failed to toggle node state")
def toggle(context: CommandContext, args: Args) -> CommandResult:
    node, error = require_node(context, target_id(context, args))
    if error:
        return error
    if not node.children:
        return CommandResult.fail(f'Node "{node.text}" has no children to toggle')
    update, error = require_handler(context, "update_node", "Node update")
    if error:
        return error

    if "expand" in args:
        collapsed = not args.flag("expand")
    else:
        collapsed = not node.collapsed

    update(node.id, {"collapsed": collapsed})
    action = "collapsed" if collapsed else "expanded"
    return CommandResult.ok(f'{action} node "{node.text}" ({len(node.children)} children)')


def _fold(collapse: bool) -> Callable[[CommandContext, Args], CommandResult]:
    verb = "collapse" if collapse else "expand"
    done = "Collapsed" if collapse else "Expanded"
    state = "collapsed" if collapse else "expanded"

    @with_error_handling(f"Failed to {verb} node")
    def execute(context: CommandContext, args: Args) -> CommandResult:
        node, error = require_node(context, context.selected_node_id, missing="No node selected")
        if error:
            return error
        if not node.children:
            return CommandResult.fail(f'Node "{node.text}" has no children to {verb}')
        if node.collapsed == collapse:
            return CommandResult.ok(f'Node "{node.text}" is already {state}')
        update, error = require_handler(context, "update_node", "Node update")
        if error:
            return error
        update(node.id, {"collapsed": collapse})
        return CommandResult.ok(f'{done} node "{node.text}" ({len(node.children)} children)')

    return execute


def _fold_all(collapse: bool) -> Callable[[CommandContext, Args], CommandResult]:
    verb = "collapse" if collapse else "expand"

    @with_error_handling(f"Failed to {verb} all nodes")
    def execute(context: CommandContext, args: Args) -> CommandResult:
        get_roots = context.handler("get_root_nodes")
        roots: List[Node] = list(get_roots() or []) if get_roots else []
        if not roots:
            return CommandResult.fail("No nodes found in current mindmap")
        update, error = require_handler(context, "update_node", "Node update")
        if error:
            return error

        changed = 0
        stack = list(reversed(roots))
        while stack:
            node = stack.pop()
            if node.children and node.collapsed != collapse:
                update(node.id, {"collapsed": collapse})
                changed += 1
            stack.extend(reversed(node.children))

        if collapse:
            return CommandResult.ok(f"Collapsed all nodes ({changed} nodes were expanded)")
        return CommandResult.ok(f"Expanded all nodes ({changed} nodes were collapsed)")

    return execute


# =============================================================================
# Reshaping
# =============================================================================

@with_error_handling("Failed to move node")
async def move_as_child_of_sibling(context: CommandContext, args: Args) -> CommandResult:
    node, error = require_node(context, target_id(context, args))
    if error:
        return error
    find_parent, error = require_handler(context, "find_parent_node", "Parent node lookup")
    if error:
        return error

    parent = find_parent(node.id)
    if parent is None:
        return CommandResult.fail("Cannot move root node as child of sibling")

    index = next((i for i, child in enumerate(parent.children) if child.id == node.id), -1)
    if index <= 0:
        return CommandResult.fail("No previous sibling to move under")
    previous = parent.children[index - 1]

    move, error = require_handler(context, "move_node", "Move node functionality")
    if error:
        return error
    await call(move, node.id, previous.id)
    return CommandResult.ok(f'Moved "{node.text}" as child of "{previous.text}"')


@with_error_handling("Failed to move node")
async def move_as_next_sibling_of_parent(context: CommandContext, args: Args) -> CommandResult:
    node, error = require_node(context, target_id(context, args))
    if error:
        return error
    find_parent, error = require_handler(context, "find_parent_node", "Parent node lookup")
    if error:
        return error

    parent = find_parent(node.id)
    if parent is None:
        return CommandResult.fail("Cannot move root node - no parent exists")

    move, error = require_handler(context, "move_node_with_position", "Move node with position functionality")
    if error:
        return error
    await call(move, node.id, parent.id, "after")
    return CommandResult.ok(f'Moved "{node.text}" as next sibling of "{parent.text}"')


@with_error_handling("Failed to convert node")
def convert(context: CommandContext, args: Args) -> CommandResult:
    node, error = require_node(context, target_id(context, args))
    if error:
        return error
    change_type, error = require_handler(context, "on_markdown_node_type", "Node type conversion")
    if error:
        return error

    target = args.string("type")
    if target is None:
        current = (node.markdown_meta or {}).get("type")
        target = CONVERT_CYCLE.get(current, UNORDERED_LIST)
    elif target not in NODE_TYPES:
        return CommandResult.fail(f"Unknown node type '{target}'. Valid: {', '.join(NODE_TYPES)}")

    change_type(node.id, target)
    return CommandResult.ok(f'Converted "{node.text}" to {target}')


COMMANDS = [
    Command(
        name="add-child",
        description="Add a new child node to the selected node",
        execute=add_child,
        aliases=["child", "tab"],
        category=CATEGORY,
        args=[
            ArgSpec("parentId", ArgType.NODE_ID, description="Parent node ID (uses selected node if not specified)"),
            TEXT_SPEC,
            EDIT_SPEC,
        ],
        examples=["add-child", "child", 'add-child --text "Child text"', "add-child --edit false"],
    ),
    Command(
        name="add-sibling",
        description="Add a new sibling node after the selected node",
        execute=add_sibling,
        aliases=["sibling", "enter"],
        category=CATEGORY,
        args=[NODE_ID_SPEC, TEXT_SPEC, EDIT_SPEC],
        examples=["add-sibling", "sibling", 'add-sibling --text "Sibling text"'],
    ),
    Command(
        name="toggle",
        description="Toggle the collapse state of node children",
        execute=toggle,
        aliases=["za", "toggle-collapse", "fold"],
        category=CATEGORY,
        args=[
            NODE_ID_SPEC,
            ArgSpec("expand", ArgType.BOOLEAN,
                    description="Force expand (true) or collapse (false) instead of toggling"),
        ],
        examples=["toggle", "za", "toggle node-123", "fold --expand"],
    ),
    Command(
        name="expand",
        description="Expand the selected node to show its children",
        execute=_fold(collapse=False),
        aliases=["zo", "open-fold"],
        category=CATEGORY,
        examples=["expand", "zo"],
    ),
    Command(
        name="collapse",
        description="Collapse the selected node to hide its children",
        execute=_fold(collapse=True),
        aliases=["zc", "close-fold"],
        category=CATEGORY,
        examples=["collapse", "zc"],
    ),
    Command(
        name="expand-all",
        description="Expand all nodes in the mindmap",
        execute=_fold_all(collapse=False),
        aliases=["zR", "open-all-folds"],
        category=CATEGORY,
        examples=["expand-all", "zR"],
    ),
    Command(
        name="collapse-all",
        description="Collapse all nodes in the mindmap",
        execute=_fold_all(collapse=True),
        aliases=["zM", "close-all-folds"],
        category=CATEGORY,
        examples=["collapse-all", "zM"],
    ),
    Command(
        name="move-as-child-of-sibling",
        description="Move the selected node as a child of its previous sibling",
        execute=move_as_child_of_sibling,
        aliases=[">>"],
        category=CATEGORY,
        args=[NODE_ID_SPEC],
        examples=["move-as-child-of-sibling", ">>"],
    ),
    Command(
        name="move-as-next-sibling-of-parent",
        description="Move the selected node as the next sibling of its parent",
        execute=move_as_next_sibling_of_parent,
        aliases=["<<"],
        category=CATEGORY,
        args=[NODE_ID_SPEC],
        examples=["move-as-next-sibling-of-parent", "<<"],
    ),
    Command(
        name="convert",
        description="Convert node type (e.g., heading to list)",
        execute=convert,
        aliases=["m", "convert-type"],
        category=CATEGORY,
        args=[
            NODE_ID_SPEC,
            ArgSpec("type", ArgType.STRING, description="Target type: heading, unordered-list, ordered-list"),
        ],
        examples=["convert", "m", "convert --type unordered-list", "convert node-123 --type heading"],
    ),
]
