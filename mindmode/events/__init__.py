"""
Events — Mode-specific canvas event handling
"""

from .base import CanvasEvent, EventStrategy, EVENT_TYPES
from .dispatcher import STRATEGIES, dispatch_canvas_event, get_strategy
from .insert import InsertModeStrategy
from .normal import NormalModeStrategy
from .panels import can_open
from .visual import VisualModeStrategy

__all__ = [
    "CanvasEvent", "EventStrategy", "EVENT_TYPES",
    "STRATEGIES", "dispatch_canvas_event", "get_strategy",
    "NormalModeStrategy", "InsertModeStrategy", "VisualModeStrategy",
    "can_open",
]
