"""
Module: preload.cache

Purpose:
    Memo of work the preloader has already done: remote images converted
    to embeddable data URIs and font families already applied. Owned by
    whoever constructs it and injected into the preloader, so its lifetime
    is explicit (one per session, cleared on demand).
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Set

logger = logging.getLogger(__name__)


class AssetCache:
    """
    Embedded-image and applied-font memo.

    Example:
        >>> cache = AssetCache()
        >>> cache.store_embedded("https://cdn/logo.png", "data:image/png;base64,...")
        >>> cache.get_embedded("https://cdn/logo.png") is not None
        True
    """

    def __init__(self) -> None:
        self._embedded: Dict[str, str] = {}
        self._fonts: Set[str] = set()

    def get_embedded(self, url: str) -> Optional[str]:
        return self._embedded.get(url)

    def store_embedded(self, url: str, data_uri: str) -> None:
        self._embedded[url] = data_uri

    def is_font_applied(self, family: str) -> bool:
        return family in self._fonts

    def mark_font_applied(self, family: str) -> None:
        self._fonts.add(family)

    @property
    def applied_fonts(self) -> frozenset[str]:
        return frozenset(self._fonts)

    def clear(self) -> None:
        """Forget every cached image and font."""
        logger.debug(
            f"Clearing asset cache ({len(self._embedded)} images, {len(self._fonts)} fonts)"
        )
        self._embedded.clear()
        self._fonts.clear()

    def __len__(self) -> int:
        return len(self._embedded) + len(self._fonts)
