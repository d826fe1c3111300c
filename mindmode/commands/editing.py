"""
Editing commands — Delete, cut and the editing lifecycle

delete / cut                         remove nodes (cut copies first)
edit (ciw)                           replace or clear text, then edit
insert / append-end / insert-beginning   start editing with a cursor position
append (a)                           new child, editing
open / open-above (o / O)            new sibling after / before, editing
"""

from ..core.context import CommandContext
from ..core.types import ArgSpec, ArgType, Args, Command, CommandResult
from .base import (
    NO_SELECTION, NODE_ID_SPEC,
    call, enter_insert_mode, require_handler, require_node, target_id,
    warn, with_error_handling,
)


CATEGORY = "editing"

# Nodes with this id are the document's fixed root and are never removed
PROTECTED_ROOT_ID = "root"

CURSOR_START = "start"
CURSOR_END = "end"


# =============================================================================
# Removal
# =============================================================================

@with_error_handling("Failed to delete node")
def delete(context: CommandContext, args: Args) -> CommandResult:
    node, error = require_node(context, target_id(context, args))
    if error:
        return error
    if node.id == PROTECTED_ROOT_ID:
        return CommandResult.fail("Cannot delete the root node")
    remove, error = require_handler(context, "delete_node", "Delete function")
    if error:
        return error

    if not args.flag("confirm") and node.children:
        warn(f'Deleting node "{node.text}" with {len(node.children)} children')

    remove(node.id)
    return CommandResult.ok(f'Deleted node "{node.text}"')


@with_error_handling("Failed to cut node")
def cut(context: CommandContext, args: Args) -> CommandResult:
    node_id = target_id(context, args)
    if not node_id:
        return CommandResult.fail("No node selected and no node ID provided")
    copy, error = require_handler(context, "copy_node", "Copy function")
    if error:
        return error
    remove, error = require_handler(context, "delete_node", "Delete function")
    if error:
        return error

    cut_count = 0
    for _ in range(context.repeat_count):
        current = context.find_node(node_id)
        if current is None or current.id == PROTECTED_ROOT_ID:
            break
        copy(node_id)
        remove(node_id)
        cut_count += 1

    if cut_count == 0:
        return CommandResult.fail("No nodes to cut")
    return CommandResult.ok(f"Cut {cut_count} nodes" if cut_count > 1 else "Cut node")


# =============================================================================
# Editing lifecycle
# =============================================================================

@with_error_handling("Failed to edit node")
def edit(context: CommandContext, args: Args) -> CommandResult:
    node, error = require_node(context, target_id(context, args))
    if error:
        return error
    new_text = args.string("text")
    keep_text = args.flag("keep-text")
    cursor = args.string("cursor", CURSOR_START)

    start_name = "start_edit_with_cursor_at_end" if cursor == CURSOR_END else "start_edit_with_cursor_at_start"
    start, error = require_handler(context, start_name, "Editing")
    if error:
        return error

    original_text = node.text
    enter_insert_mode(context)

    if new_text is not None or not keep_text:
        update, error = require_handler(context, "update_node", "Node update")
        if error:
            return error
        update(node.id, {"text": new_text if new_text is not None else ""})

    start(node.id)

    if new_text is not None:
        action = "set text and started editing"
    elif keep_text:
        action = "started editing"
    else:
        action = "cleared text and started editing"
    return CommandResult.ok(f'{action} node "{original_text}"')


def _start_editing(handler: str, suffix: str, fallback: str):
    @with_error_handling(fallback)
    def execute(context: CommandContext, args: Args) -> CommandResult:
        node, error = require_node(context, context.selected_node_id, missing=NO_SELECTION)
        if error:
            return error
        start, error = require_handler(context, handler, "Editing")
        if error:
            return error
        enter_insert_mode(context)
        start(node.id)
        return CommandResult.ok(f'Started editing node "{node.text}"{suffix}')
    return execute


@with_error_handling("Failed to create child node")
async def append(context: CommandContext, args: Args) -> CommandResult:
    if not context.selected_node_id:
        return CommandResult.fail(NO_SELECTION)
    add, error = require_handler(context, "add_child_node", "Child creation")
    if error:
        return error
    enter_insert_mode(context)
    await call(add, context.selected_node_id, "", True)
    return CommandResult.ok("Created child node and started editing")


def _open(insert_after: bool):
    where = "after" if insert_after else "before"
    kind = "sibling" if insert_after else "elder sibling"

    @with_error_handling(f"Failed to open new sibling node {'below' if insert_after else 'above'}")
    async def execute(context: CommandContext, args: Args) -> CommandResult:
        reference, error = require_node(context, target_id(context, args), label="Reference node")
        if error:
            return error
        add, error = require_handler(context, "add_sibling_node", "Sibling creation")
        if error:
            return error

        new_id = await call(add, reference.id, args.string("text", ""), True, insert_after)
        if not new_id:
            return CommandResult.fail(f"Failed to create new {kind} node")
        return CommandResult.ok(f'Created new {kind} node {where} "{reference.text}" and started editing')
    return execute


OPEN_ARGS = [
    NODE_ID_SPEC,
    ArgSpec("text", ArgType.STRING, default="", description="Initial text for the new node"),
]


COMMANDS = [
    Command(
        name="delete",
        description="Delete the selected node",
        execute=delete,
        aliases=["dd", "delete-node", "remove"],
        category=CATEGORY,
        args=[
            ArgSpec("nodeId", ArgType.NODE_ID, description="Node ID to delete (uses selected node if not specified)"),
            ArgSpec("confirm", ArgType.BOOLEAN, default=False, description="Skip confirmation prompt"),
        ],
        examples=["delete", "dd", "delete node-123", "delete --confirm"],
    ),
    Command(
        name="cut",
        description="Cut the selected node (copy then delete)",
        execute=cut,
        aliases=["cut-node"],
        category=CATEGORY,
        args=[ArgSpec("nodeId", ArgType.NODE_ID, description="Node ID to cut (uses selected node if not specified)")],
        examples=["cut", "cut-node", "cut node-123"],
        countable=True,
        repeatable=True,
    ),
    Command(
        name="edit",
        description="Clear node text and start editing",
        execute=edit,
        aliases=["ciw", "change", "clear-edit"],
        category=CATEGORY,
        args=[
            ArgSpec("nodeId", ArgType.NODE_ID, description="Node ID to edit (uses selected node if not specified)"),
            ArgSpec("text", ArgType.STRING, description="New text content (if not provided, text will be cleared)"),
            ArgSpec("keep-text", ArgType.BOOLEAN, default=False, description="Keep existing text instead of clearing it"),
            ArgSpec("cursor", ArgType.STRING, default=CURSOR_START, description='Cursor position: "start" or "end"'),
        ],
        examples=["edit", "ciw", "edit node-123", 'edit --text "New text"', "change --keep-text"],
    ),
    Command(
        name="insert",
        description="Start editing the selected node",
        execute=_start_editing("start_edit", "", "Failed to start editing"),
        aliases=["i"],
        category=CATEGORY,
        examples=["insert", "i"],
    ),
    Command(
        name="append",
        description="Create a child node and start editing",
        execute=append,
        aliases=["a"],
        category=CATEGORY,
        examples=["append", "a"],
    ),
    Command(
        name="append-end",
        description="Start editing at the end of the node text",
        execute=_start_editing("start_edit_with_cursor_at_end", " with cursor at end",
                               "Failed to start editing at end"),
        aliases=["A"],
        category=CATEGORY,
        examples=["append-end", "A"],
    ),
    Command(
        name="insert-beginning",
        description="Start editing at the beginning of the node text",
        execute=_start_editing("start_edit_with_cursor_at_start", " with cursor at beginning",
                               "Failed to start editing at beginning"),
        aliases=["I"],
        category=CATEGORY,
        examples=["insert-beginning", "I"],
    ),
    Command(
        name="open",
        description="Create a new sibling node below and start editing",
        execute=_open(insert_after=True),
        aliases=["o", "add-younger-sibling"],
        category=CATEGORY,
        args=OPEN_ARGS,
        examples=["open", "o", 'open --text "Next"'],
    ),
    Command(
        name="open-above",
        description="Create a new sibling node above and start editing",
        execute=_open(insert_after=False),
        aliases=["O", "add-elder-sibling"],
        category=CATEGORY,
        args=OPEN_ARGS,
        examples=["open-above", "O"],
    ),
]
