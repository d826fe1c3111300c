"""
MindMap Document — In-memory host for the interpreter

Implements the full handler surface commands call through
CommandContext.handlers, and the store surface the canvas event
dispatcher reads. Structural changes go through the TreeModel so its
indexes stay consistent; every user-visible change takes an undo
snapshot first.

Usage:
    document = MindMapDocument.load("plan.json")
    document.select_node("root")
    result = await interpreter.execute("add-child --text Goals", document.context())
    document.save()

File format (orjson):
    {"title": "...", "rootNodes": [{"id", "text", "x", "y", "children", ...}]}
A bare list of root nodes is also accepted on load.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import orjson
import xxhash

from .core.context import CommandContext
from .core.navigation import DEFAULT_SPATIAL, SpatialSettings, navigate
from .core.tree import Node, TreeModel
from .core.types import Mode


NODE_ID_PREFIX = "node-"
NODE_ID_HASH_LENGTH = 12

# Layout offsets for newly created nodes
CHILD_OFFSET_X = 200.0
SIBLING_OFFSET_Y = 60.0

MAX_HISTORY = 100

DROP_BEFORE = "before"
DROP_AFTER = "after"
DROP_CHILD = "child"

ATTACHMENT_PANELS = ("attachmentList", "linkList")
CONTEXT_MENU_PANEL = "contextMenu"

CURSOR_START = "start"
CURSOR_END = "end"


class MindMapDocument:
    """
    A mind map plus the UI state commands manipulate.

    State:
        tree: Node forest (TreeModel)
        selected_node_id / editing_node_id: Selection and edit target
        mode: Modal editing state (normal, insert, visual, menu)
        open_panels: Names of open overlays
        clipboard: Serialized subtree from the last copy
        viewport_focus: (node_id, placement) of the last centering request
    """

    def __init__(
        self,
        roots: Optional[List[Node]] = None,
        title: str = "",
        path: Optional[Union[str, Path]] = None,
        settings: SpatialSettings = DEFAULT_SPATIAL,
        mode: str = Mode.NORMAL.value,
    ):
        self.tree = TreeModel(roots)
        self.title = title
        self.path: Optional[Path] = Path(path) if path else None
        self.settings = settings

        self.selected_node_id: Optional[str] = None
        self.editing_node_id: Optional[str] = None
        self.cursor_position: Optional[str] = None
        self.mode = mode
        self.open_panels: List[str] = []

        self.show_keyboard_helper = False
        self.show_context_menu = False
        self.context_menu_position: Optional[Dict[str, float]] = None
        self.viewport_focus: Optional[tuple] = None

        self.clipboard: Optional[Dict[str, Any]] = None
        self._undo_stack: List[List[Dict[str, Any]]] = []
        self._redo_stack: List[List[Dict[str, Any]]] = []
        self._id_counter = 0

    # =========================================================================
    # Persistence
    # =========================================================================

    @classmethod
    def load(cls, path: Union[str, Path], settings: SpatialSettings = DEFAULT_SPATIAL) -> 'MindMapDocument':
        """
        Read a document from JSON.

        Raises:
            FileNotFoundError: If path does not exist
            orjson.JSONDecodeError: If the file is not valid JSON
            ValueError: If node ids are duplicated
        """
        path = Path(path)
        data = orjson.loads(path.read_bytes())
        if isinstance(data, list):
            title, items = "", data
        else:
            title, items = data.get("title", ""), data.get("rootNodes") or []
        roots = [Node.from_dict(item) for item in items]
        document = cls(roots, title=title, path=path, settings=settings)
        if document.tree.roots:
            document.selected_node_id = document.tree.roots[0].id
        return document

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "rootNodes": self.tree.to_list()}

    def save(self, path: Optional[Union[str, Path]] = None) -> str:
        """
        Write the document as indented JSON.

        Returns:
            Path written to

        Raises:
            ValueError: If no path was given and the document has none
        """
        target = Path(path) if path else self.path
        if target is None:
            raise ValueError("No file path set for this document")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2))
        self.path = target
        return str(target)

    # =========================================================================
    # Execution context
    # =========================================================================

    def context(self, count: Optional[int] = None) -> CommandContext:
        """Fresh CommandContext over this document's current state."""
        return CommandContext(
            handlers=self,
            selected_node_id=self.selected_node_id,
            editing_node_id=self.editing_node_id,
            mode=self.mode,
            count=count,
            open_panels=list(self.open_panels),
        )

    def new_node_id(self) -> str:
        """Unique "node-<hex>" id derived from the clock and a counter."""
        while True:
            self._id_counter += 1
            seed = f"{time.time_ns()}:{self._id_counter}"
            node_id = NODE_ID_PREFIX + xxhash.xxh64(seed.encode()).hexdigest()[:NODE_ID_HASH_LENGTH]
            if node_id not in self.tree:
                return node_id

    # =========================================================================
    # History
    # =========================================================================

    def _snapshot(self) -> None:
        self._undo_stack.append(self.tree.to_list())
        if len(self._undo_stack) > MAX_HISTORY:
            self._undo_stack.pop(0)
        self._redo_stack.clear()

    def _restore(self, data: List[Dict[str, Any]]) -> None:
        self.tree = TreeModel.from_list(data)
        if self.selected_node_id not in self.tree:
            self.selected_node_id = self.tree.roots[0].id if self.tree.roots else None
        if self.editing_node_id not in self.tree:
            self.editing_node_id = None

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self) -> None:
        if not self._undo_stack:
            return
        self._redo_stack.append(self.tree.to_list())
        self._restore(self._undo_stack.pop())

    def redo(self) -> None:
        if not self._redo_stack:
            return
        self._undo_stack.append(self.tree.to_list())
        self._restore(self._redo_stack.pop())

    # =========================================================================
    # Lookup
    # =========================================================================

    def find_node_by_id(self, node_id: Optional[str]) -> Optional[Node]:
        return self.tree.get(node_id)

    def find_parent_node(self, node_id: str) -> Optional[Node]:
        return self.tree.parent(node_id)

    def get_root_nodes(self) -> List[Node]:
        return list(self.tree.roots)

    # =========================================================================
    # Node mutation
    # =========================================================================

    def update_node(self, node_id: str, updates: Dict[str, Any]) -> None:
        if node_id not in self.tree:
            raise KeyError(f"Node {node_id} not found")
        self._snapshot()
        self.tree.update(node_id, updates)

    def delete_node(self, node_id: str) -> None:
        if node_id not in self.tree:
            raise KeyError(f"Node {node_id} not found")
        next_selection = self._selection_after_removal(node_id)
        self._snapshot()
        self.tree.detach(node_id)
        if self.selected_node_id not in self.tree:
            self.selected_node_id = next_selection
        if self.editing_node_id not in self.tree:
            self.editing_node_id = None

    def _selection_after_removal(self, node_id: str) -> Optional[str]:
        parent = self.tree.parent(node_id)
        container = parent.children if parent is not None else self.tree.roots
        index = next(i for i, n in enumerate(container) if n.id == node_id)
        if index + 1 < len(container):
            return container[index + 1].id
        if index > 0:
            return container[index - 1].id
        return parent.id if parent is not None else None

    def toggle_node_collapse(self, node_id: str) -> None:
        node = self.tree.get(node_id)
        if node is None:
            raise KeyError(f"Node {node_id} not found")
        self.update_node(node_id, {"collapsed": not node.collapsed})

    def on_markdown_node_type(self, node_id: str, node_type: str) -> None:
        node = self.tree.get(node_id)
        if node is None:
            raise KeyError(f"Node {node_id} not found")
        meta = dict(node.markdown_meta or {})
        meta["type"] = node_type
        meta.setdefault("level", 1)
        self.update_node(node_id, {"markdown_meta": meta})

    async def add_child_node(self, parent_id: str, text: str = "", start_editing: bool = False) -> Optional[str]:
        parent = self.tree.get(parent_id)
        if parent is None:
            return None
        self._snapshot()
        if parent.collapsed:
            parent.collapsed = False
        y = parent.children[-1].y + SIBLING_OFFSET_Y if parent.children else parent.y
        node = Node(self.new_node_id(), text, x=parent.x + CHILD_OFFSET_X, y=y)
        self.tree.add_child(parent_id, node)
        self._focus_new(node.id, start_editing)
        return node.id

    async def add_sibling_node(
        self,
        node_id: str,
        text: str = "",
        start_editing: bool = False,
        insert_after: bool = True,
    ) -> Optional[str]:
        reference = self.tree.get(node_id)
        if reference is None:
            return None
        self._snapshot()
        offset = SIBLING_OFFSET_Y if insert_after else -SIBLING_OFFSET_Y
        node = Node(self.new_node_id(), text, x=reference.x, y=reference.y + offset)
        self.tree.add_sibling(node_id, node, after=insert_after)
        self._focus_new(node.id, start_editing)
        return node.id

    def _focus_new(self, node_id: str, start_editing: bool) -> None:
        self.selected_node_id = node_id
        if start_editing:
            self.start_edit(node_id)

    def move_node(self, node_id: str, new_parent_id: str) -> None:
        """Move a subtree to the end of new_parent_id's children."""
        if node_id not in self.tree or new_parent_id not in self.tree:
            raise KeyError(f"Node {node_id if node_id not in self.tree else new_parent_id} not found")
        if new_parent_id == node_id or self.tree.is_descendant(new_parent_id, node_id):
            raise ValueError(f"Cannot move node {node_id} into its own subtree")
        self._snapshot()
        self.tree.move(node_id, new_parent_id)

    def move_node_with_position(self, node_id: str, target_id: str, position: str) -> None:
        """
        Move a subtree relative to target_id.

        Args:
            position: "before" / "after" (sibling of target) or "child"
        """
        if node_id == target_id:
            return
        if node_id not in self.tree or target_id not in self.tree:
            raise KeyError(f"Node {node_id if node_id not in self.tree else target_id} not found")
        if position not in (DROP_BEFORE, DROP_AFTER, DROP_CHILD):
            raise ValueError(f"Invalid drop position: {position}")
        if self.tree.is_descendant(target_id, node_id):
            raise ValueError(f"Cannot move node {node_id} into its own subtree")

        self._snapshot()
        if position == DROP_CHILD:
            self.tree.move(node_id, target_id)
            return

        node = self.tree.detach(node_id)
        self.tree.add_sibling(target_id, node, after=position == DROP_AFTER)

    # =========================================================================
    # Clipboard
    # =========================================================================

    def copy_node(self, node_id: str) -> None:
        node = self.tree.get(node_id)
        if node is None:
            raise KeyError(f"Node {node_id} not found")
        self.clipboard = node.to_dict()

    async def paste_node(self, parent_id: str) -> None:
        if self.clipboard is None:
            raise ValueError("Clipboard is empty")
        parent = self.tree.get(parent_id)
        if parent is None:
            raise KeyError(f"Node {parent_id} not found")

        clone = self._clone(self.clipboard)
        clone.x = parent.x + CHILD_OFFSET_X
        clone.y = parent.children[-1].y + SIBLING_OFFSET_Y if parent.children else parent.y
        self._snapshot()
        parent.collapsed = False
        self.tree.add_child(parent_id, clone)
        self.selected_node_id = clone.id

    def _clone(self, data: Dict[str, Any]) -> Node:
        """Node tree from clipboard data with fresh ids."""
        node = Node.from_dict({**data, "children": []})
        node.id = self.new_node_id()
        node.children = [self._clone(child) for child in data.get("children") or []]
        return node

    # =========================================================================
    # Selection, editing and modes
    # =========================================================================

    def select_node(self, node_id: Optional[str]) -> None:
        self.selected_node_id = node_id if node_id in self.tree else None

    def set_mode(self, mode: str) -> None:
        self.mode = mode.value if isinstance(mode, Mode) else mode

    def start_edit(self, node_id: str, cursor: Optional[str] = None) -> None:
        if node_id not in self.tree:
            raise KeyError(f"Node {node_id} not found")
        self.selected_node_id = node_id
        self.editing_node_id = node_id
        self.cursor_position = cursor
        self.mode = Mode.INSERT.value

    def start_edit_with_cursor_at_start(self, node_id: str) -> None:
        self.start_edit(node_id, CURSOR_START)

    def start_edit_with_cursor_at_end(self, node_id: str) -> None:
        self.start_edit(node_id, CURSOR_END)

    def start_editing(self, node_id: str) -> None:
        self.start_edit(node_id)

    def finish_edit(self) -> None:
        """Leave insert mode, keeping the selection."""
        self.editing_node_id = None
        self.cursor_position = None
        self.mode = Mode.NORMAL.value

    def navigate_to_direction(self, direction: str, count: int = 1) -> None:
        if not self.selected_node_id:
            return
        target = navigate(
            self.tree,
            self.selected_node_id,
            direction,
            count,
            update_node=self.update_node,
            settings=self.settings,
        )
        if target is not None:
            self.selected_node_id = target

    def center_node_in_view(self, node_id: str, animate: bool = True, placement: str = "center") -> None:
        if node_id not in self.tree:
            raise KeyError(f"Node {node_id} not found")
        self.viewport_focus = (node_id, placement)

    # =========================================================================
    # Panels
    # =========================================================================

    def set_show_keyboard_helper(self, show: bool) -> None:
        self.show_keyboard_helper = bool(show)

    def open_panel(self, panel: str) -> None:
        if panel not in self.open_panels:
            self.open_panels.append(panel)
        if panel == CONTEXT_MENU_PANEL:
            self.show_context_menu = True

    def close_panel(self, panel: str) -> None:
        self.open_panels = [p for p in self.open_panels if p != panel]
        if panel == CONTEXT_MENU_PANEL:
            self.show_context_menu = False

    def set_show_context_menu(self, show: bool) -> None:
        if show:
            self.open_panel(CONTEXT_MENU_PANEL)
        else:
            self.close_panel(CONTEXT_MENU_PANEL)

    def set_context_menu_position(self, position: Dict[str, float]) -> None:
        self.context_menu_position = dict(position)

    def close_attachment_and_link_lists(self) -> None:
        self.open_panels = [p for p in self.open_panels if p not in ATTACHMENT_PANELS]
