"""
UI commands — Panels and overlays
"""

from ..core.context import CommandContext
from ..core.types import Args, Command, CommandResult
from .base import require_handler, with_error_handling


CATEGORY = "utility"


@with_error_handling("Failed to toggle help panel")
def toggle_help(context: CommandContext, args: Args) -> CommandResult:
    set_helper, error = require_handler(context, "set_show_keyboard_helper", "Keyboard help")
    if error:
        return error
    showing = bool(context.value("show_keyboard_helper", False))
    set_helper(not showing)
    return CommandResult.ok(f"{'Closed' if showing else 'Opened'} keyboard shortcuts help")


@with_error_handling("Failed to close panels")
def close_panels(context: CommandContext, args: Args) -> CommandResult:
    set_helper = context.handler("set_show_keyboard_helper")
    if set_helper is not None and context.value("show_keyboard_helper", False):
        set_helper(False)
    close_lists = context.handler("close_attachment_and_link_lists")
    if close_lists is not None:
        close_lists()
    return CommandResult.ok("Closed all panels")


COMMANDS = [
    Command(
        name="help",
        description="Toggle keyboard shortcuts help panel",
        execute=toggle_help,
        aliases=["?", "keyboard-help"],
        category=CATEGORY,
        examples=["help", "?", "keyboard-help"],
    ),
    Command(
        name="close-panels",
        description="Close all open panels and overlays",
        execute=close_panels,
        aliases=["close", "escape"],
        category=CATEGORY,
        examples=["close-panels", "close", "escape"],
    ),
]
