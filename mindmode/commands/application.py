"""
Application commands — History, clipboard and persistence

undo (u) / redo (r)      history, gated by can_undo / can_redo
copy (c) / paste (v)     clipboard, both repeatable with "."
save (s)                 persist through the host when it supports it
"""

from ..core.context import CommandContext
from ..core.types import ArgSpec, ArgType, Args, Command, CommandResult
from .base import call, node_command, require_handler, require_node, simple_command, target_id, with_error_handling


CATEGORY = "application"


@with_error_handling("Failed to paste")
async def paste(context: CommandContext, args: Args) -> CommandResult:
    target, error = require_node(
        context, target_id(context, args, "targetId"),
        missing="No node selected and no target ID provided", label="Target node",
    )
    if error:
        return error
    paste_node, error = require_handler(context, "paste_node", "Paste function")
    if error:
        return error

    await call(paste_node, target.id)
    return CommandResult.ok(f'Pasted as child of "{target.text}"')


@with_error_handling("Failed to save")
def save(context: CommandContext, args: Args) -> CommandResult:
    save_document = context.handler("save")
    if save_document is None:
        return CommandResult.ok("Auto-save is enabled - mindmap is already saved")
    path = save_document()
    return CommandResult.ok(f"Saved mindmap to {path}" if path else "Saved mindmap")


COMMANDS = [
    simple_command(
        name="undo",
        description="Undo the last operation",
        handler="undo",
        available="can_undo",
        nothing="Nothing to undo",
        done="Undid last operation",
        aliases=["u"],
        category=CATEGORY,
    ),
    simple_command(
        name="redo",
        description="Redo the last undone operation",
        handler="redo",
        available="can_redo",
        nothing="Nothing to redo",
        done="Redid last operation",
        aliases=["r"],
        category=CATEGORY,
    ),
    node_command(
        name="copy",
        description="Copy the selected node",
        action=lambda node_id, node, context: context.handler("copy_node")(node_id),
        message=lambda node: f'Copied node "{node.text}"',
        aliases=["c", "yy"],
        repeatable=True,
        requires=("copy_node", "Copy function"),
    ),
    Command(
        name="paste",
        description="Paste copied node as child",
        execute=paste,
        aliases=["v"],
        category="editing",
        args=[ArgSpec("targetId", ArgType.NODE_ID,
                      description="Target node ID to paste into (uses selected node if not specified)")],
        examples=["paste", "v", "paste node-123"],
        repeatable=True,
    ),
    Command(
        name="save",
        description="Save the mindmap",
        execute=save,
        aliases=["s"],
        category=CATEGORY,
        examples=["save", "s"],
    ),
]
