"""
Module: guidelines

Purpose:
    Interactive measurement guidelines over a logo canvas: grid/edge
    snapping, collision-free naming, and a shape-keyed store shared with
    preview and export consumers.

Key Functions:
    - snap_to_grid(): Snap a raw position along one axis
    - next_name(): Lowest free X<n>/Y<n> name

Key Classes:
    - GuidelineEngine: Drag/move/delete/reset for one shape key
    - GuidelineStore: Shared per-shape-key lists
    - GuidelineConfig: Grid, threshold and limit settings
"""

from .config import GuidelineConfig
from .engine import GuidelineEngine
from .naming import next_name
from .snapping import snap_to_grid
from .store import LOGO_SHAPES, GuidelineStore, shape_key

__all__ = [
    "GuidelineConfig",
    "GuidelineEngine",
    "GuidelineStore",
    "LOGO_SHAPES",
    "next_name",
    "shape_key",
    "snap_to_grid",
]
