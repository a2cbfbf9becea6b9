"""
Module: guidelines.engine

Purpose:
    Interactive creation, movement and deletion of snapped measurement
    guidelines over one logo shape variant's canvas.

Key Classes:
    - GuidelineEngine: Pointer-driven guideline editing for one shape key

Lifecycle:
    Ruler drag:     idle -> dragging(temp) -> committed | discarded
    Existing line:  stable -> dragging -> stable, or stable -> deleted

    Only one drag (ruler or move) may be active across all engines that
    share a GuidelineStore; the store owns that slot.

Dependencies:
    - brand_export.guidelines.snapping: snap_to_grid
    - brand_export.guidelines.naming: next_name
    - brand_export.guidelines.store: GuidelineStore

Used By:
    - Canvas widgets (pointer events), tests
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from brand_export.core.models import Axis, ContainerSize, Guideline
from brand_export.errors import (
    DragInProgressError,
    GuidelineError,
    GuidelineLimitReached,
    GuidelineNotFoundError,
)

from .config import GuidelineConfig
from .naming import next_name
from .snapping import snap_to_grid
from .store import GuidelineStore

logger = logging.getLogger(__name__)


@dataclass
class _RulerDrag:
    axis: Axis
    origin: Optional[float]
    travel: float = 0.0


@dataclass
class _MoveDrag:
    guideline_id: str


class GuidelineEngine:
    """
    Guideline editor bound to one shape key of a shared store.

    Every mutation is published to the store immediately, so preview and
    export consumers always read the engine's current list.

    Attributes:
        store: Shared per-shape-key store
        key: Shape key this engine owns (e.g. "square-logo")
        config: Snapping and limit configuration

    Example:
        >>> engine = GuidelineEngine(GuidelineStore(), "square-logo", ContainerSize(400, 400))
        >>> temp = engine.begin_axis_drag(Axis.VERTICAL, origin=0)
        >>> temp = engine.update_drag(118)
        >>> engine.commit_drag().name
        'X1'
    """

    def __init__(
        self,
        store: GuidelineStore,
        key: str,
        container: ContainerSize,
        config: Optional[GuidelineConfig] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.key = key
        self.config = config or GuidelineConfig()
        self._container = container
        self._clock = clock
        self._drag: Union[_RulerDrag, _MoveDrag, None] = None

    # ── State ────────────────────────────────────────────────────────────

    @property
    def guidelines(self) -> Tuple[Guideline, ...]:
        """Current list including any in-flight temp guideline."""
        return self.store.get(self.key)

    @property
    def container(self) -> ContainerSize:
        return self._container

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    def limit_reached(self, axis: Axis) -> bool:
        """True when ``axis`` already holds ``max_per_axis`` guidelines."""
        return len(self._committed(axis)) >= self.config.max_per_axis

    def resize(self, container: ContainerSize) -> None:
        """
        Refresh the measured container.

        Existing guidelines beyond the new extent are clamped onto it.
        """
        self._container = container
        clamped = tuple(
            g.moved_to(min(g.position, container.extent(g.axis)))
            for g in self.guidelines
        )
        if clamped != self.guidelines:
            self._publish(clamped)

    # ── Ruler drag ───────────────────────────────────────────────────────

    def begin_axis_drag(self, axis: Axis, origin: Optional[float] = None) -> Optional[Guideline]:
        """
        Start dragging a new guideline out of the ruler for ``axis``.

        Args:
            axis: Axis of the new guideline
            origin: Pointer position at press time; defaults to the first
                position passed to update_drag()

        Returns:
            The temp guideline, or None when the axis is full

        Raises:
            DragInProgressError: If another drag is active
            GuidelineLimitReached: If the axis is full and
                ``config.raise_on_limit`` is set
        """
        if self.limit_reached(axis):
            logger.warning(
                f"Guideline limit reached on {axis.value} axis of {self.key} "
                f"({self.config.max_per_axis}), ignoring new guideline"
            )
            if self.config.raise_on_limit:
                raise GuidelineLimitReached(axis.value, self.config.max_per_axis)
            return None

        self.store.claim_drag(self.key)
        self._drag = _RulerDrag(axis=axis, origin=origin)

        start = self._snap(origin, axis) if origin is not None else 0
        temp = Guideline(
            id=Guideline.temp_id(axis),
            axis=axis,
            position=start,
            name=next_name(self._committed(axis), axis),
        )
        try:
            self._publish(self._without_temp(axis) + (temp,))
        except GuidelineError:
            self._end_drag()
            raise
        return temp

    def update_drag(self, raw_position: float) -> Guideline:
        """Move the in-flight guideline to the snapped ``raw_position``."""
        drag = self._ruler_drag()
        if drag.origin is None:
            drag.origin = raw_position
        drag.travel = max(drag.travel, abs(raw_position - drag.origin))

        temp_id = Guideline.temp_id(drag.axis)
        temp = self._find(temp_id).moved_to(self._snap(raw_position, drag.axis))
        self._publish(tuple(temp if g.id == temp_id else g for g in self.guidelines))
        return temp

    def commit_drag(self) -> Optional[Guideline]:
        """
        Release the ruler drag.

        Returns:
            The committed guideline, or None if the pointer never travelled
            further than ``config.drag_threshold`` (a click, not a drag)
        """
        drag = self._ruler_drag()
        temp = self._find(Guideline.temp_id(drag.axis))
        remaining = self._without_temp(drag.axis)
        self._end_drag()

        if drag.travel <= self.config.drag_threshold:
            logger.debug(f"Ruler press on {drag.axis.value} axis moved {drag.travel}px, discarded")
            self._publish(remaining)
            return None

        committed = Guideline(
            id=self._new_id(drag.axis),
            axis=drag.axis,
            position=temp.position,
            name=temp.name,
        )
        self._publish(remaining + (committed,))
        logger.debug(f"Committed {committed.name} at {committed.position} on {self.key}")
        return committed

    def cancel_drag(self) -> None:
        """Abandon the active ruler drag, removing its temp guideline."""
        drag = self._ruler_drag()
        self._end_drag()
        self._publish(self._without_temp(drag.axis))

    # ── Existing guidelines ──────────────────────────────────────────────

    def move_guideline(self, guideline_id: str, raw_position: float) -> Guideline:
        """
        Drag an existing guideline to the snapped ``raw_position``.

        The first call claims the drag slot for ``guideline_id``; it is held
        until end_move().

        Raises:
            GuidelineNotFoundError: If no committed guideline has that id
            DragInProgressError: If a different drag is active
        """
        claimed = False
        if isinstance(self._drag, _MoveDrag) and self._drag.guideline_id == guideline_id:
            pass
        elif self._drag is not None:
            raise DragInProgressError(f"Cannot move {guideline_id!r} during another drag")
        else:
            current = self._find(guideline_id)
            if current.is_temp:
                raise GuidelineNotFoundError(f"Temp guideline {guideline_id!r} cannot be moved")
            self.store.claim_drag(self.key)
            self._drag = _MoveDrag(guideline_id)
            claimed = True

        moved = self._find(guideline_id)
        moved = moved.moved_to(self._snap(raw_position, moved.axis))
        try:
            self._publish(tuple(moved if g.id == guideline_id else g for g in self.guidelines))
        except GuidelineError:
            if claimed:
                self._end_drag()
            raise
        return moved

    def end_move(self) -> None:
        """Release the pointer after move_guideline()."""
        if isinstance(self._drag, _MoveDrag):
            self._end_drag()

    def delete_guideline(self, guideline_id: str) -> bool:
        """
        Remove a committed guideline (double-click).

        Returns:
            True if removed; False for temp or unknown ids
        """
        target = next((g for g in self.guidelines if g.id == guideline_id), None)
        if target is None or target.is_temp:
            return False

        if isinstance(self._drag, _MoveDrag) and self._drag.guideline_id == guideline_id:
            self._end_drag()
        self._publish(tuple(g for g in self.guidelines if g.id != guideline_id))
        return True

    def reset_all(self) -> None:
        """Clear every guideline for this shape key."""
        if self._drag is not None:
            self._end_drag()
        self.store.clear(self.key)

    # ── Internals ────────────────────────────────────────────────────────

    def _snap(self, raw: float, axis: Axis) -> float:
        return snap_to_grid(
            raw,
            self._container.extent(axis),
            grid_size=self.config.grid_size,
            snap_threshold=self.config.snap_threshold,
        )

    def _committed(self, axis: Axis) -> Tuple[Guideline, ...]:
        return tuple(g for g in self.guidelines if g.axis is axis and not g.is_temp)

    def _without_temp(self, axis: Axis) -> Tuple[Guideline, ...]:
        temp_id = Guideline.temp_id(axis)
        return tuple(g for g in self.guidelines if g.id != temp_id)

    def _find(self, guideline_id: str) -> Guideline:
        for guideline in self.guidelines:
            if guideline.id == guideline_id:
                return guideline
        raise GuidelineNotFoundError(f"No guideline {guideline_id!r} on {self.key}")

    def _ruler_drag(self) -> _RulerDrag:
        if not isinstance(self._drag, _RulerDrag):
            raise GuidelineError("No ruler drag in progress")
        return self._drag

    def _end_drag(self) -> None:
        self._drag = None
        self.store.release_drag(self.key)

    def _new_id(self, axis: Axis) -> str:
        existing = {g.id for g in self.guidelines}
        base = f"{axis.value}-{int(self._clock() * 1000)}"
        candidate, n = base, 1
        while candidate in existing:
            candidate = f"{base}-{n}"
            n += 1
        return candidate

    def _publish(self, guidelines: Tuple[Guideline, ...]) -> None:
        self.store.publish(self.key, guidelines)
