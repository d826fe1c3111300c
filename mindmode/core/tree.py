"""
Tree Model — Ordered forest of mind-map nodes

Nodes own their children (ordered). The model keeps two indexes on top of
the forest so identity lookups and parent queries are O(1):

- _index:  node id -> Node
- _parent: node id -> parent id (None for roots)

Every structural mutation goes through this class so the indexes never
drift from the forest. A move is detach-then-attach; an id is never
present twice.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple


NODE_KIND_TEXT = "text"
NODE_KIND_TABLE = "table"


@dataclass
class Node:
    """A single mind-map node."""
    id: str
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    children: List['Node'] = field(default_factory=list)
    collapsed: bool = False
    markdown_meta: Optional[Dict[str, Any]] = None
    note: Optional[str] = None
    kind: str = NODE_KIND_TEXT

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (recursive)."""
        data: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "children": [child.to_dict() for child in self.children],
        }
        if self.collapsed:
            data["collapsed"] = True
        if self.markdown_meta is not None:
            data["markdownMeta"] = dict(self.markdown_meta)
        if self.note is not None:
            data["note"] = self.note
        if self.kind != NODE_KIND_TEXT:
            data["kind"] = self.kind
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Node':
        """Create from dictionary (recursive)."""
        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            children=[cls.from_dict(child) for child in data.get("children") or []],
            collapsed=bool(data.get("collapsed", False)),
            markdown_meta=data.get("markdownMeta"),
            note=data.get("note"),
            kind=data.get("kind", NODE_KIND_TEXT),
        )


def collect_nodes(node: Node, respect_collapsed: bool = False) -> List[Node]:
    """
    Collect a subtree in pre-order.

    Args:
        node: Subtree root
        respect_collapsed: If True, children of collapsed nodes are skipped

    Returns:
        Nodes in document order, starting with node itself
    """
    nodes = [node]
    if node.children and (not respect_collapsed or not node.collapsed):
        for child in node.children:
            nodes.extend(collect_nodes(child, respect_collapsed))
    return nodes


class TreeModel:
    """
    Forest of root nodes with id and parent indexes.

    Usage:
        tree = TreeModel([Node("root", "Main")])
        tree.add_child("root", Node("a", "First"))
        tree.parent_id("a")   # "root"
    """

    def __init__(self, roots: Optional[List[Node]] = None):
        self.roots: List[Node] = list(roots or [])
        self._index: Dict[str, Node] = {}
        self._parent: Dict[str, Optional[str]] = {}
        self.reindex()

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    def reindex(self) -> None:
        """Rebuild both indexes from the forest."""
        self._index.clear()
        self._parent.clear()
        for root in self.roots:
            self._index_subtree(root, None)

    def _index_subtree(self, node: Node, parent_id: Optional[str]) -> None:
        if node.id in self._index:
            raise ValueError(f"Duplicate node id: {node.id}")
        self._index[node.id] = node
        self._parent[node.id] = parent_id
        for child in node.children:
            self._index_subtree(child, node.id)

    def _unindex_subtree(self, node: Node) -> None:
        for item in collect_nodes(node):
            self._index.pop(item.id, None)
            self._parent.pop(item.id, None)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        """Find a node by id, or None."""
        if node_id is None:
            return None
        return self._index.get(node_id)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Node]:
        for root in self.roots:
            yield from collect_nodes(root)

    def parent_id(self, node_id: str) -> Optional[str]:
        """Parent id of a node, or None for roots and unknown ids."""
        return self._parent.get(node_id)

    def parent(self, node_id: str) -> Optional[Node]:
        return self.get(self.parent_id(node_id))

    def is_root(self, node_id: str) -> bool:
        return node_id in self._parent and self._parent[node_id] is None

    def root_of(self, node_id: str) -> Optional[Node]:
        """Walk parent links up to the root containing node_id."""
        if node_id not in self._index:
            return None
        current = node_id
        while self._parent.get(current) is not None:
            current = self._parent[current]
        return self._index[current]

    def root_index(self, node_id: str) -> int:
        """Index of the root containing node_id in the roots list, or -1."""
        root = self.root_of(node_id)
        if root is None:
            return -1
        for i, candidate in enumerate(self.roots):
            if candidate.id == root.id:
                return i
        return -1

    def siblings(self, node_id: str) -> Tuple[List[Node], int]:
        """
        Get a node's sibling list (including itself) and its position.

        Roots have no siblings here: root-to-root motion is handled
        separately by navigation.

        Returns:
            (siblings, index); ([], -1) for roots and unknown ids
        """
        parent = self.parent(node_id)
        if parent is None:
            return [], -1
        for i, child in enumerate(parent.children):
            if child.id == node_id:
                return parent.children, i
        return [], -1

    def depth(self, node_id: str) -> int:
        depth = 0
        current = self._parent.get(node_id)
        while current is not None:
            depth += 1
            current = self._parent.get(current)
        return depth

    def is_descendant(self, node_id: str, ancestor_id: str) -> bool:
        """True if node_id lies strictly below ancestor_id."""
        current = self._parent.get(node_id)
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._parent.get(current)
        return False

    def visible_nodes(self, root_id: str) -> List[Node]:
        """Nodes of a subtree that are not hidden under a collapsed ancestor."""
        root = self.get(root_id)
        if root is None:
            return []
        return collect_nodes(root, respect_collapsed=True)

    def find(self, predicate: Callable[[Node], bool]) -> Optional[Node]:
        """First node in document order matching predicate."""
        for node in self:
            if predicate(node):
                return node
        return None

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_root(self, node: Node, index: Optional[int] = None) -> Node:
        self._index_subtree(node, None)
        if index is None:
            self.roots.append(node)
        else:
            self.roots.insert(index, node)
        return node

    def add_child(self, parent_id: str, node: Node, index: Optional[int] = None) -> Node:
        """
        Attach a node (and its subtree) under parent_id.

        Raises:
            KeyError: If parent_id is unknown
        """
        parent = self._index[parent_id]
        self._index_subtree(node, parent_id)
        if index is None:
            parent.children.append(node)
        else:
            parent.children.insert(index, node)
        return node

    def add_sibling(self, node_id: str, new_node: Node, after: bool = True) -> Node:
        """Insert new_node next to node_id, at root level when node_id is a root."""
        if node_id not in self._index:
            raise KeyError(node_id)
        parent_id = self.parent_id(node_id)
        container = self._index[parent_id].children if parent_id else self.roots
        position = next(i for i, n in enumerate(container) if n.id == node_id)
        position = position + 1 if after else position
        if parent_id is None:
            return self.add_root(new_node, position)
        return self.add_child(parent_id, new_node, position)

    def detach(self, node_id: str) -> Node:
        """
        Remove a subtree from the forest and return it.

        Raises:
            KeyError: If node_id is unknown
        """
        node = self._index[node_id]
        parent_id = self._parent[node_id]
        container = self._index[parent_id].children if parent_id else self.roots
        container[:] = [n for n in container if n.id != node_id]
        self._unindex_subtree(node)
        return node

    def move(self, node_id: str, new_parent_id: Optional[str], index: Optional[int] = None) -> Node:
        """
        Move a subtree under a new parent (None = root level).

        Raises:
            ValueError: If the move would place a node inside itself
        """
        if new_parent_id is not None and (
            new_parent_id == node_id or self.is_descendant(new_parent_id, node_id)
        ):
            raise ValueError(f"Cannot move node {node_id} into its own subtree")
        node = self.detach(node_id)
        if new_parent_id is None:
            return self.add_root(node, index)
        return self.add_child(new_parent_id, node, index)

    def update(self, node_id: str, updates: Dict[str, Any]) -> Optional[Node]:
        """Apply attribute updates to a node. Ids and children are not updatable."""
        node = self.get(node_id)
        if node is None:
            return None
        for key, value in updates.items():
            if key in ("id", "children"):
                continue
            if hasattr(node, key):
                setattr(node, key, value)
        return node

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_list(self) -> List[Dict[str, Any]]:
        return [root.to_dict() for root in self.roots]

    @classmethod
    def from_list(cls, data: List[Dict[str, Any]]) -> 'TreeModel':
        return cls([Node.from_dict(item) for item in data])
