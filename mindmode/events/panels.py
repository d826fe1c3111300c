"""
Panel manager — Which overlays may open alongside which
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional


def is_open(open_panels: Any, panel: str) -> bool:
    """True if panel is open; open_panels is a mapping of flags or a collection of names."""
    if not open_panels:
        return False
    if isinstance(open_panels, Mapping):
        return bool(open_panels.get(panel))
    return panel in open_panels


def can_open(open_panels: Any, panel: str, exclusive_with: Optional[Iterable[str]] = None) -> bool:
    """
    Decide whether a panel may open.

    Args:
        open_panels: Currently open panels
        panel: Panel that wants to open
        exclusive_with: Panels that block it while open

    Returns:
        False if any exclusive panel is open
    """
    return not any(is_open(open_panels, other) for other in (exclusive_with or ()) if other != panel)
