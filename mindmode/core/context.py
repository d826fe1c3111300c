"""
Command Context — What a command sees when it runs

The host supplies a handlers object (any object with attributes, or a
mapping of name -> callable). Every handler is optional: commands ask
for a capability with context.handler(name) and report a failed
CommandResult when it is missing.

Core handler surface:
    update_node(id, updates)            delete_node(id)
    find_node_by_id(id) -> Node|None    navigate_to_direction(direction, count=1)
    add_child_node(parent_id, text, start_editing)       (async) -> id|None
    add_sibling_node(node_id, text, start_editing, insert_after=True) (async)
    copy_node(id)                       paste_node(parent_id)  (async)
    undo() / redo()                     can_undo / can_redo
    start_edit(id)                      start_edit_with_cursor_at_start(id)
    start_edit_with_cursor_at_end(id)   select_node(id|None)
    close_attachment_and_link_lists()

Extended surface (used when present):
    find_parent_node(id)  move_node(id, parent_id)  move_node_with_position(id, target, position)
    toggle_node_collapse(id)  get_root_nodes()  center_node_in_view(id, animate)
    on_markdown_node_type(id, type)  show_keyboard_helper  set_show_keyboard_helper(bool)
    set_mode(mode)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .tree import Node
from .types import Mode


CORE_HANDLERS = (
    "update_node",
    "delete_node",
    "find_node_by_id",
    "navigate_to_direction",
    "add_child_node",
    "add_sibling_node",
    "copy_node",
    "paste_node",
    "undo",
    "redo",
    "start_edit",
    "start_edit_with_cursor_at_start",
    "start_edit_with_cursor_at_end",
    "select_node",
    "close_attachment_and_link_lists",
)

EXTENDED_HANDLERS = (
    "find_parent_node",
    "move_node",
    "move_node_with_position",
    "toggle_node_collapse",
    "get_root_nodes",
    "center_node_in_view",
    "on_markdown_node_type",
    "set_show_keyboard_helper",
    "set_mode",
)


@dataclass
class CommandContext:
    """Per-invocation state passed to Command.execute."""
    handlers: Any = None
    selected_node_id: Optional[str] = None
    editing_node_id: Optional[str] = None
    mode: str = Mode.NORMAL.value
    count: Optional[int] = None
    open_panels: List[str] = field(default_factory=list)

    def handler(self, name: str) -> Optional[Callable[..., Any]]:
        """
        Look up an optional handler.

        Returns:
            The callable, or None if the host does not provide it
        """
        if self.handlers is None:
            return None
        if isinstance(self.handlers, Mapping):
            candidate = self.handlers.get(name)
        else:
            candidate = getattr(self.handlers, name, None)
        return candidate if callable(candidate) else None

    def value(self, name: str, default: Any = None) -> Any:
        """Read a non-callable attribute of the handlers (e.g. can_undo)."""
        if self.handlers is None:
            return default
        if isinstance(self.handlers, Mapping):
            return self.handlers.get(name, default)
        return getattr(self.handlers, name, default)

    def find_node(self, node_id: Optional[str]) -> Optional[Node]:
        """Resolve a node through find_node_by_id, None when unavailable."""
        find = self.handler("find_node_by_id")
        if not node_id or find is None:
            return None
        return find(node_id)

    @property
    def repeat_count(self) -> int:
        """Vim count, at least 1."""
        return self.count if self.count and self.count > 0 else 1

    @property
    def in_insert_mode(self) -> bool:
        return self.mode == Mode.INSERT.value
