"""
Event dispatcher — Route canvas events to the strategy for the current mode

Usage:
    dispatch_canvas_event(CanvasEvent("nodeClick", target_node_id="n1"), store)

The mode is read from the store on every call, so a mode switch takes
effect on the next event. Unknown or missing modes fall back to normal.
"""

import sys
from typing import Any, Dict

from ..core.types import Mode
from .base import CanvasEvent, EventStrategy, store_value
from .insert import InsertModeStrategy
from .normal import NormalModeStrategy
from .visual import VisualModeStrategy


_NORMAL = NormalModeStrategy()

STRATEGIES: Dict[str, EventStrategy] = {
    Mode.NORMAL.value: _NORMAL,
    Mode.INSERT.value: InsertModeStrategy(),
    Mode.VISUAL.value: VisualModeStrategy(),
}


def get_strategy(mode: Any) -> EventStrategy:
    """Strategy for a mode name (or Mode), normal when unknown."""
    key = mode.value if isinstance(mode, Mode) else mode
    return STRATEGIES.get(key, _NORMAL)


def dispatch_canvas_event(event: CanvasEvent, store: Any) -> None:
    """
    Handle one canvas event.

    Handler failures are reported on stderr and never propagate.
    """
    mode = store_value(store, "mode", Mode.NORMAL.value)
    strategy = get_strategy(mode)
    try:
        strategy.handle(event, store)
    except Exception as e:
        print(f"Warning: {strategy.mode} mode: {event.type} handler error: {e}", file=sys.stderr)
