"""
Module: guidelines.snapping

Purpose:
    Snap a raw pointer position to the container edges or the grid.

Key Functions:
    - snap_to_grid(): Edge snap, then grid rounding, clamped to extent
"""

from __future__ import annotations

import math

from .config import DEFAULT_GRID_SIZE, DEFAULT_SNAP_THRESHOLD


def snap_to_grid(
    raw: float,
    extent: float,
    *,
    grid_size: float = DEFAULT_GRID_SIZE,
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD,
) -> float:
    """
    Snap a position along one axis.

    Rules, in order:
    1. Within ``snap_threshold`` of 0 -> 0
    2. Within ``snap_threshold`` of ``extent`` -> ``extent``
    3. Otherwise the nearest grid multiple, clamped to ``[0, extent]``

    Args:
        raw: Pointer position in container-local pixels (may be outside)
        extent: Container extent along the axis
        grid_size: Grid pitch
        snap_threshold: Edge snap distance

    Returns:
        Snapped position in ``[0, extent]``

    Example:
        >>> snap_to_grid(198, 400, grid_size=4, snap_threshold=3)
        200
        >>> snap_to_grid(399, 400, grid_size=4, snap_threshold=3)
        400
    """
    if abs(raw) < snap_threshold:
        return 0
    if abs(raw - extent) < snap_threshold:
        return extent

    # Halves round up, towards the next grid line
    snapped = math.floor(raw / grid_size + 0.5) * grid_size
    return max(0, min(snapped, extent))
