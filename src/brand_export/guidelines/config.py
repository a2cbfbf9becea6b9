"""
Module: guidelines.config

Purpose:
    Tunables for the guideline engine: grid pitch, edge snap distance,
    per-axis cap and the click/drag distinction.

Key Classes:
    - GuidelineConfig: Immutable engine configuration
"""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_GRID_SIZE = 8
DEFAULT_SNAP_THRESHOLD = 5
DEFAULT_MAX_PER_AXIS = 20
DEFAULT_DRAG_THRESHOLD = 3


@dataclass(frozen=True)
class GuidelineConfig:
    """
    Configuration for guideline placement (immutable).

    Attributes:
        grid_size: Grid pitch in pixels that free positions round to
        snap_threshold: Distance from an edge below which a position
            collapses onto that edge
        max_per_axis: Maximum committed guidelines per axis
        drag_threshold: Minimum pointer travel (px) for a ruler drag to
            create a guideline; shorter gestures count as clicks
        raise_on_limit: Raise GuidelineLimitReached instead of ignoring
            a creation attempt on a full axis

    Example:
        >>> GuidelineConfig(grid_size=4, snap_threshold=3).grid_size
        4
    """

    grid_size: float = DEFAULT_GRID_SIZE
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    max_per_axis: int = DEFAULT_MAX_PER_AXIS
    drag_threshold: float = DEFAULT_DRAG_THRESHOLD
    raise_on_limit: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive: {self.grid_size}")
        if self.snap_threshold < 0:
            raise ValueError(f"snap_threshold must be non-negative: {self.snap_threshold}")
        if self.max_per_axis <= 0:
            raise ValueError(f"max_per_axis must be positive: {self.max_per_axis}")
        if self.drag_threshold < 0:
            raise ValueError(f"drag_threshold must be non-negative: {self.drag_threshold}")
