"""
Navigation Engine — Next node for a direction and repeat count

Structural rules first, spatial search as fallback:

    left   parent of the current node (None at a root)
    right  child closest in Y; a collapsed node is expanded first
    up     previous sibling, clamped; at the boundary, the previous root
    down   next sibling, clamped; at the boundary, the next root

When no structural candidate exists, the nearest visible node of the
current root in the requested direction wins (see SpatialSettings).

Every function here returns a node id or None and never raises. The only
side effect is expand_for_motion(), triggered by "right" on a collapsed
node, which goes through the host's toggle/update callbacks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .tree import Node, TreeModel


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Vim keys and synonyms accepted wherever a direction is typed
DIRECTION_ALIASES = {
    "u": Direction.UP, "k": Direction.UP, "up": Direction.UP,
    "d": Direction.DOWN, "j": Direction.DOWN, "down": Direction.DOWN,
    "l": Direction.LEFT, "h": Direction.LEFT, "left": Direction.LEFT, "parent": Direction.LEFT,
    "r": Direction.RIGHT, "right": Direction.RIGHT, "child": Direction.RIGHT,
}


@dataclass(frozen=True)
class SpatialSettings:
    """
    Spatial fallback tuning.

    min_distance: offset along the requested axis a candidate must exceed
    cross_axis_weight: multiplier for the perpendicular offset in the score
    """
    min_distance: float = 20.0
    cross_axis_weight: float = 0.5


DEFAULT_SPATIAL = SpatialSettings()

UpdateFn = Callable[[str, Dict[str, Any]], Any]
ToggleFn = Callable[[str], Any]


def normalize_direction(value: Any) -> Optional[Direction]:
    """Map a typed direction (or vim key) to a Direction, None if unknown."""
    if isinstance(value, Direction):
        return value
    if not isinstance(value, str):
        return None
    return DIRECTION_ALIASES.get(value.strip().lower())


def closest_child(node: Node) -> Optional[Node]:
    """Child with the smallest |child.y - node.y|; the first one on ties."""
    best = None
    best_distance = None
    for child in node.children:
        distance = abs(child.y - node.y)
        if best is None or distance < best_distance:
            best, best_distance = child, distance
    return best


def expand_for_motion(
    node_id: str,
    update_node: Optional[UpdateFn] = None,
    toggle_collapse: Optional[ToggleFn] = None,
) -> bool:
    """
    Expand a collapsed node so motion can enter it.

    Prefers the toggle callback, falls back to a direct update.

    Returns:
        True if a callback was invoked
    """
    if toggle_collapse is not None:
        toggle_collapse(node_id)
        return True
    if update_node is not None:
        update_node(node_id, {"collapsed": False})
        return True
    return False


# =============================================================================
# Structural strategies
# =============================================================================

def navigate_left(tree: TreeModel, current_id: str) -> Optional[str]:
    """Parent of current_id within its root, None for roots."""
    return tree.parent_id(current_id)


def navigate_right(
    tree: TreeModel,
    current_id: str,
    update_node: Optional[UpdateFn] = None,
    toggle_collapse: Optional[ToggleFn] = None,
) -> Optional[str]:
    """Closest visible child; expands a collapsed parent first."""
    node = tree.get(current_id)
    if node is None or not node.children:
        return None

    if node.collapsed:
        expand_for_motion(current_id, update_node, toggle_collapse)

    child = closest_child(node)
    return child.id if child else None


def navigate_vertical(tree: TreeModel, current_id: str, steps: int) -> Optional[str]:
    """
    Move among siblings by steps (negative = up), clamped to the list.

    When clamping leaves the node in place, move to the neighbouring
    document root in that direction instead.
    """
    if current_id not in tree or steps == 0:
        return None

    moving_down = steps > 0
    siblings, index = tree.siblings(current_id)
    if len(siblings) > 1 and index != -1:
        if moving_down:
            target = min(len(siblings) - 1, index + steps)
        else:
            target = max(0, index + steps)
        if target != index:
            return siblings[target].id

    root_index = tree.root_index(current_id)
    if root_index == -1:
        return None
    if moving_down and root_index < len(tree.roots) - 1:
        return tree.roots[root_index + 1].id
    if not moving_down and root_index > 0:
        return tree.roots[root_index - 1].id
    return None


# =============================================================================
# Spatial fallback
# =============================================================================

def _spatial_score(direction: Direction, dx: float, dy: float, settings: SpatialSettings) -> Optional[float]:
    """Weighted distance, or None if the offset fails the direction gate."""
    gate = settings.min_distance
    weight = settings.cross_axis_weight
    if direction == Direction.RIGHT and dx > gate:
        return dx + abs(dy) * weight
    if direction == Direction.LEFT and dx < -gate:
        return -dx + abs(dy) * weight
    if direction == Direction.DOWN and dy > gate:
        return dy + abs(dx) * weight
    if direction == Direction.UP and dy < -gate:
        return -dy + abs(dx) * weight
    return None


def find_node_by_spatial_direction(
    tree: TreeModel,
    current_id: str,
    direction: Direction,
    settings: SpatialSettings = DEFAULT_SPATIAL,
) -> Optional[str]:
    """
    Nearest visible node of the current root in a direction.

    Returns:
        Id of the lowest-scoring candidate, None when nothing passes the gate
    """
    root = tree.root_of(current_id)
    if root is None:
        return None

    candidates = tree.visible_nodes(root.id)
    current = next((n for n in candidates if n.id == current_id), None)
    if current is None:
        return None

    best_id = None
    best_score = float("inf")
    for node in candidates:
        if node.id == current_id:
            continue
        score = _spatial_score(direction, node.x - current.x, node.y - current.y, settings)
        if score is not None and score < best_score:
            best_id, best_score = node.id, score

    return best_id


# =============================================================================
# Dispatcher
# =============================================================================

def navigate(
    tree: TreeModel,
    current_id: str,
    direction: Any,
    count: int = 1,
    update_node: Optional[UpdateFn] = None,
    toggle_collapse: Optional[ToggleFn] = None,
    settings: SpatialSettings = DEFAULT_SPATIAL,
) -> Optional[str]:
    """
    Compute the node reached from current_id.

    Args:
        tree: Document forest
        current_id: Starting node
        direction: Direction or a synonym ("j", "parent", ...)
        count: Repeat count; left/right repeat the step, up/down jump
        update_node: Host callback used to expand on "right"
        toggle_collapse: Preferred host callback to expand on "right"
        settings: Spatial fallback tuning

    Returns:
        Target node id, or None for "no motion"
    """
    resolved = normalize_direction(direction)
    if resolved is None or current_id not in tree:
        return None

    try:
        count = max(1, int(count or 1))
    except (TypeError, ValueError):
        return None

    if resolved in (Direction.UP, Direction.DOWN):
        steps = count if resolved == Direction.DOWN else -count
        target = navigate_vertical(tree, current_id, steps)
    else:
        target = None
        position = current_id
        for _ in range(count):
            if resolved == Direction.LEFT:
                step = navigate_left(tree, position)
            else:
                step = navigate_right(tree, position, update_node, toggle_collapse)
            if step is None:
                break
            target = position = step

    if target is not None:
        return target
    return find_node_by_spatial_direction(tree, current_id, resolved, settings)
