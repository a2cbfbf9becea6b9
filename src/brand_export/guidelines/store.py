"""
Module: guidelines.store

Purpose:
    Shape-keyed guideline lists shared between engine instances and their
    consumers (live canvas preview, export bundling). The store is the
    ownership boundary: each engine writes only its own shape key.

Key Classes:
    - GuidelineStore: Per-shape-key lists, change subscription, export lock

Key Functions:
    - shape_key(): "square" -> "square-logo"

Dependencies:
    - brand_export.core.models: Guideline
    - brand_export.errors: GuidelineLockedError

Used By:
    - brand_export.guidelines.engine: publishes every mutation
    - brand_export.export.controller: snapshots under export_lock()
"""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from brand_export.core.models import Guideline
from brand_export.errors import DragInProgressError, GuidelineLockedError

logger = logging.getLogger(__name__)

LOGO_SHAPES = ("square", "rounded", "circle")

Listener = Callable[[str, Tuple[Guideline, ...]], None]


def shape_key(shape: str) -> str:
    """Store key for a logo shape variant."""
    return f"{shape}-logo"


class GuidelineStore:
    """
    Holds one guideline list per logo shape key.

    Lists are stored as tuples and replaced wholesale on publish, so a
    snapshot handed to a consumer never changes underneath it.

    Example:
        >>> store = GuidelineStore()
        >>> unsubscribe = store.subscribe(lambda key, lines: print(key, len(lines)))
        >>> store.publish("square-logo", ())
        square-logo 0
    """

    def __init__(self) -> None:
        self._lists: Dict[str, Tuple[Guideline, ...]] = {}
        self._listeners: List[Listener] = []
        self._export_holds: Counter[str] = Counter()
        self._drag_owner: Optional[str] = None

    def get(self, key: str, *, include_temp: bool = True) -> Tuple[Guideline, ...]:
        """
        Current guidelines for ``key``.

        Args:
            key: Shape key
            include_temp: Include the in-flight guideline of an active
                ruler drag (live preview wants it, export does not)
        """
        guidelines = self._lists.get(key, ())
        if include_temp:
            return guidelines
        return tuple(g for g in guidelines if not g.is_temp)

    def publish(self, key: str, guidelines: Tuple[Guideline, ...]) -> None:
        """
        Replace the list for ``key`` and notify listeners.

        Raises:
            GuidelineLockedError: If an export currently holds ``key``
        """
        if self.is_locked(key):
            raise GuidelineLockedError(f"Guidelines for {key!r} are locked by an export")

        self._lists[key] = tuple(guidelines)
        for listener in list(self._listeners):
            listener(key, self._lists[key])

    def clear(self, key: str) -> None:
        self.publish(key, ())

    @property
    def shape_keys(self) -> List[str]:
        return list(self._lists.keys())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Active drag ──────────────────────────────────────────────────────

    @property
    def drag_owner(self) -> Optional[str]:
        """Shape key whose engine currently owns the single active drag."""
        return self._drag_owner

    def claim_drag(self, key: str) -> None:
        """
        Take the system-wide drag slot for ``key``.

        Raises:
            DragInProgressError: If any engine already holds the slot
        """
        if self._drag_owner is not None:
            raise DragInProgressError(
                f"A guideline drag is already active on {self._drag_owner!r}"
            )
        self._drag_owner = key

    def release_drag(self, key: str) -> None:
        if self._drag_owner == key:
            self._drag_owner = None

    # ── Export read lock ─────────────────────────────────────────────────

    def is_locked(self, key: str) -> bool:
        return self._export_holds[key] > 0

    @contextmanager
    def export_lock(self, *keys: str) -> Iterator[Dict[str, Tuple[Guideline, ...]]]:
        """
        Hold ``keys`` for the duration of an export.

        Publishing to a held key raises until the block exits. Yields the
        committed guidelines for each key.
        """
        for key in keys:
            self._export_holds[key] += 1
        logger.debug(f"Export lock acquired for {list(keys)}")
        try:
            yield {key: self.get(key, include_temp=False) for key in keys}
        finally:
            for key in keys:
                self._export_holds[key] -= 1
                if self._export_holds[key] <= 0:
                    del self._export_holds[key]
            logger.debug(f"Export lock released for {list(keys)}")

    # ── Serialization ────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Committed guidelines per shape key, JSON-ready."""
        return {
            key: [g.to_dict() for g in self.get(key, include_temp=False)]
            for key in self._lists
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GuidelineStore":
        store = cls()
        for key, items in data.items():
            store._lists[key] = tuple(Guideline.from_dict(item) for item in items)
        return store
