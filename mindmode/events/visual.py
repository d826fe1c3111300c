"""
Visual mode — Background and node clicks behave as in normal mode
"""

from typing import Any

from .base import BGCLICK, NODE_CLICK, CanvasEvent, EventStrategy
from .normal import NormalModeStrategy


class VisualModeStrategy(EventStrategy):
    mode = "visual"

    def __init__(self):
        self._normal = NormalModeStrategy()

    def handle(self, event: CanvasEvent, store: Any) -> None:
        if event.type in (BGCLICK, NODE_CLICK):
            self._normal.handle(event, store)
