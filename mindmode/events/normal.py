"""
Normal mode — Selection, context menus, editing and drag-to-move
"""

from typing import Any

from .base import (
    BGCLICK, CONTEXTMENU, CONTEXT_MENU_PANEL, LINK_LIST_PANEL,
    DROP_POSITIONS, NODE_CLICK, NODE_CONTEXT_MENU, NODE_DOUBLE_CLICK, NODE_DRAG_END,
    CanvasEvent, EventStrategy, invoke, store_value,
)
from ..core.tree import NODE_KIND_TABLE, NODE_KIND_TEXT
from .panels import can_open


def open_context_menu(event: CanvasEvent, store: Any, select_target: bool = False) -> bool:
    """Open the context menu at the event position unless a link list blocks it."""
    if not can_open(store_value(store, "open_panels"), CONTEXT_MENU_PANEL, exclusive_with=[LINK_LIST_PANEL]):
        return False
    if select_target:
        invoke(store, "select_node", event.target_node_id)
    invoke(store, "set_context_menu_position", {"x": event.x, "y": event.y})
    invoke(store, "open_panel", CONTEXT_MENU_PANEL)
    return True


class NormalModeStrategy(EventStrategy):
    mode = "normal"

    def handle(self, event: CanvasEvent, store: Any) -> None:
        if event.type == BGCLICK:
            invoke(store, "select_node", None)
            invoke(store, "set_show_context_menu", False)
        elif event.type == CONTEXTMENU:
            open_context_menu(event, store)
        elif event.type == NODE_CONTEXT_MENU and event.target_node_id:
            open_context_menu(event, store, select_target=True)
        elif event.type == NODE_CLICK and event.target_node_id:
            invoke(store, "select_node", event.target_node_id)
        elif event.type == NODE_DOUBLE_CLICK and event.target_node_id:
            node = invoke(store, "find_node_by_id", event.target_node_id)
            if node is not None and (getattr(node, "kind", None) or NODE_KIND_TEXT) != NODE_KIND_TABLE:
                invoke(store, "start_editing", event.target_node_id)
        elif (event.type == NODE_DRAG_END and event.target_node_id
              and event.dragged_node_id and event.drop_position in DROP_POSITIONS):
            invoke(store, "move_node_with_position",
                   event.dragged_node_id, event.target_node_id, event.drop_position)
