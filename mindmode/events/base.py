"""
Canvas events — Event value object and the strategy interface

A strategy turns one CanvasEvent into calls on the canvas store. Store
members are optional: invoke() skips anything the store does not provide.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional


BGCLICK = "bgclick"
CONTEXTMENU = "contextmenu"
NODE_CLICK = "nodeClick"
NODE_DOUBLE_CLICK = "nodeDoubleClick"
NODE_CONTEXT_MENU = "nodeContextMenu"
NODE_DRAG_END = "nodeDragEnd"
MOUSEDOWN = "mousedown"
MOUSEUP = "mouseup"
WHEEL = "wheel"

EVENT_TYPES = (
    BGCLICK, CONTEXTMENU, NODE_CLICK, NODE_DOUBLE_CLICK, NODE_CONTEXT_MENU,
    NODE_DRAG_END, MOUSEDOWN, MOUSEUP, WHEEL,
)

DROP_POSITIONS = ("before", "after", "child")

CONTEXT_MENU_PANEL = "contextMenu"
LINK_LIST_PANEL = "linkList"


@dataclass
class CanvasEvent:
    """A pointer event on the canvas."""
    type: str
    x: float = 0.0
    y: float = 0.0
    target_node_id: Optional[str] = None
    dragged_node_id: Optional[str] = None
    drop_position: Optional[str] = None


def store_value(store: Any, name: str, default: Any = None) -> Any:
    """Read a store member by attribute or key."""
    if isinstance(store, Mapping):
        return store.get(name, default)
    return getattr(store, name, default)


def invoke(store: Any, name: str, *args: Any) -> Any:
    """Call a store member if it exists and is callable."""
    member = store_value(store, name)
    if callable(member):
        return member(*args)
    return None


class EventStrategy:
    """Mode-specific canvas event handling. Stateless; read the store per call."""

    mode = ""

    def handle(self, event: CanvasEvent, store: Any) -> None:
        raise NotImplementedError
