"""
Insert mode — Clicks only; context menus stay closed while editing
"""

from typing import Any

from .base import BGCLICK, NODE_CLICK, CanvasEvent, EventStrategy, invoke


class InsertModeStrategy(EventStrategy):
    mode = "insert"

    def handle(self, event: CanvasEvent, store: Any) -> None:
        if event.type == BGCLICK:
            # Selection survives; the editor commits on blur
            invoke(store, "set_show_context_menu", False)
            invoke(store, "close_attachment_and_link_lists")
        elif event.type == NODE_CLICK and event.target_node_id:
            invoke(store, "select_node", event.target_node_id)
