"""
Module: preload.preloader

Purpose:
    Asynchronous barrier run before any rasterization: every image in the
    export subtree decoded (remote ones embedded), every referenced type
    family applied. Both joins wait on independently timed-out per-asset
    waits, never a single global deadline, and neither rejects on asset
    failure.

Key Classes:
    - AssetPreloader: resolve_images() / resolve_fonts() / preload()
    - PreloadReport: Combined outcome

Dependencies:
    - httpx: Remote image fetches (client injected or created per call)
    - brand_export.preload.images / fonts / cache / cancellation

Used By:
    - brand_export.export.controller: export_brand_guide()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import httpx

from .cache import AssetCache
from .cancellation import CancellationToken
from .config import PreloadConfig
from .fonts import FontLoadingResult, FontProbe, FontResolver, ReportLabFontProbe
from .images import ImageNode, ImageResolution, ImageResolver, Sleep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreloadReport:
    """Images and fonts resolved by one preload() call."""

    images: tuple[ImageResolution, ...] = ()
    fonts: FontLoadingResult = field(default_factory=FontLoadingResult)

    @property
    def degraded_images(self) -> tuple[ImageResolution, ...]:
        return tuple(r for r in self.images if not r.ok)


class AssetPreloader:
    """
    Guarantees assets are resolved before rasterization.

    Attributes:
        config: Timeouts and retry policy
        cache: Injected memo of embedded images and applied fonts
        font_probe: Capability applying font family/weights

    Example:
        >>> preloader = AssetPreloader(cache=AssetCache())
        >>> report = await preloader.preload(nodes, ["Inter", "Playfair Display"])
        >>> report.fonts.failed
        []
    """

    def __init__(
        self,
        config: Optional[PreloadConfig] = None,
        cache: Optional[AssetCache] = None,
        *,
        font_probe: Optional[FontProbe] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config or PreloadConfig()
        self.cache = cache if cache is not None else AssetCache()
        self.font_probe = font_probe or ReportLabFontProbe()
        self._client = http_client
        self._images = ImageResolver(self.config, self.cache, sleep=sleep)
        self._fonts = FontResolver(self.config, self.cache, self.font_probe)

    async def resolve_images(
        self,
        nodes: Sequence[ImageNode],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[ImageResolution]:
        """
        Decode every image, embedding remote sources as data URIs.

        Nodes are updated in place. Returns once every node has settled;
        failures are reported per node, never raised.

        Raises:
            ExportCancelledError: If ``cancel_token`` fires first
        """
        if not nodes:
            return []

        if self._client is not None:
            results = await self._images.resolve(nodes, self._client, cancel_token)
        else:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                results = await self._images.resolve(nodes, client, cancel_token)

        degraded = [r for r in results if not r.ok]
        logger.info(f"Images resolved: {len(results) - len(degraded)}/{len(results)} ok")
        return results

    async def resolve_fonts(
        self,
        font_families: Iterable[str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> FontLoadingResult:
        """
        Apply each non-system family at the configured weights.

        Never raises for font failures; failed families are listed in the
        result and render with the default font.

        Raises:
            ExportCancelledError: If ``cancel_token`` fires first
        """
        return await self._fonts.resolve(font_families, cancel_token)

    async def preload(
        self,
        nodes: Sequence[ImageNode],
        font_families: Iterable[str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> PreloadReport:
        """Run both joins and wait for both."""
        images, fonts = await asyncio.gather(
            self.resolve_images(nodes, cancel_token),
            self.resolve_fonts(font_families, cancel_token),
        )
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return PreloadReport(images=tuple(images), fonts=fonts)
