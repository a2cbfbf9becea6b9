"""
Module: preload.fonts

Purpose:
    Apply every non-system type family referenced by the export before
    rasterization. Each family/weight request is raced against a timeout;
    failures fall back to default rendering and never abort the export.

Key Functions:
    - normalize_family(): '"Open Sans", sans-serif' -> 'Open Sans'

Key Classes:
    - FontProbe: Capability that applies one family/weight
    - ReportLabFontProbe: Native probe registering TrueType files
    - FontLoadingResult: Loaded / failed / skipped families
    - FontResolver: The per-family join used by AssetPreloader

Dependencies:
    - reportlab: TrueType registration (ReportLabFontProbe)

Used By:
    - brand_export.preload.preloader: resolve_fonts()
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from .cache import AssetCache
from .cancellation import CancellationToken, gather_or_cancel
from .config import PreloadConfig

logger = logging.getLogger(__name__)

WEIGHT_NAMES = {
    100: "Thin",
    200: "ExtraLight",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "SemiBold",
    700: "Bold",
    800: "ExtraBold",
    900: "Black",
}

FONT_SUFFIXES = (".ttf", ".otf")


def normalize_family(font: str) -> str:
    """First family of a CSS font stack, unquoted."""
    return font.split(",")[0].replace('"', "").replace("'", "").strip()


class FontProbe(ABC):
    """
    Capability that makes a font family/weight available to the renderer.

    Browser targets implement this with the platform font loader; native
    targets with a text-shaping or registration check.
    """

    @abstractmethod
    async def load(self, family: str, weight: int) -> bool:
        """
        Apply ``family`` at ``weight``.

        Returns:
            True if the weight is now available
        """

    async def settled(self) -> None:
        """Wait until all font work started by load() has finished."""


class ReportLabFontProbe(FontProbe):
    """
    Registers TrueType files with reportlab so PDF text can use them.

    Files are looked up in ``font_dirs`` by stem, e.g. ``OpenSans-Bold.ttf``
    for ("Open Sans", 700). Weight 400 also matches the bare family stem.

    Example:
        >>> probe = ReportLabFontProbe([Path("assets/fonts")])
        >>> await probe.load("Inter", 700)
        True
        >>> probe.font_name("Inter", 700)
        'Inter-Bold'
    """

    def __init__(self, font_dirs: Iterable[Path] = ()) -> None:
        self.font_dirs = [Path(d) for d in font_dirs]
        self.registered: Set[str] = set()
        self._index: Optional[Dict[str, Path]] = None

    @staticmethod
    def font_name(family: str, weight: int) -> str:
        return f"{family.replace(' ', '')}-{WEIGHT_NAMES.get(weight, str(weight))}"

    async def load(self, family: str, weight: int) -> bool:
        name = self.font_name(family, weight)
        if name in self.registered:
            return True

        path = self._find(family, weight)
        if path is None:
            logger.debug(f"No font file for {family} {weight}")
            return False

        try:
            font = await asyncio.to_thread(TTFont, name, str(path))
        except (TTFError, OSError) as exc:
            logger.warning(f"Could not read font file {path.name}: {exc}")
            return False

        pdfmetrics.registerFont(font)
        self.registered.add(name)
        return True

    def _find(self, family: str, weight: int) -> Optional[Path]:
        index = self._build_index()
        compact = family.replace(" ", "").lower()
        stems = [f"{compact}-{WEIGHT_NAMES.get(weight, str(weight))}".lower()]
        if weight == 400:
            stems.append(compact)
        for stem in stems:
            if stem in index:
                return index[stem]
        return None

    def _build_index(self) -> Dict[str, Path]:
        if self._index is None:
            self._index = {}
            for font_dir in self.font_dirs:
                if not font_dir.is_dir():
                    continue
                for path in sorted(font_dir.iterdir()):
                    if path.suffix.lower() in FONT_SUFFIXES:
                        self._index.setdefault(path.stem.lower(), path)
        return self._index


@dataclass
class FontLoadingResult:
    """Outcome of one resolve_fonts() call."""

    loaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class FontResolver:
    """Apply families concurrently through a FontProbe."""

    def __init__(self, config: PreloadConfig, cache: AssetCache, probe: FontProbe) -> None:
        self.config = config
        self.cache = cache
        self.probe = probe

    async def resolve(
        self,
        font_families: Iterable[str],
        token: Optional[CancellationToken] = None,
    ) -> FontLoadingResult:
        result = FontLoadingResult()
        pending: List[str] = []
        system = {name.casefold() for name in self.config.system_fonts}

        for font in font_families:
            family = normalize_family(font)
            if not family or family in pending:
                continue
            if family.casefold() in system or self.cache.is_font_applied(family):
                result.skipped.append(family)
                continue
            pending.append(family)

        outcomes = await gather_or_cancel(
            (self._load_family(family) for family in pending),
            token,
        )
        for family, applied in zip(pending, outcomes):
            if applied:
                self.cache.mark_font_applied(family)
                result.loaded.append(family)
            else:
                result.failed.append(family)

        await self._wait_settled()

        if result.failed:
            logger.warning(f"Fonts falling back to default rendering: {', '.join(result.failed)}")
        logger.info(
            f"Fonts resolved: {len(result.loaded)} loaded, {len(result.failed)} failed, "
            f"{len(result.skipped)} skipped"
        )
        return result

    async def _load_family(self, family: str) -> bool:
        applied = await asyncio.gather(
            *(self._load_weight(family, weight) for weight in self.config.font_weights)
        )
        return any(applied)

    async def _load_weight(self, family: str, weight: int) -> bool:
        try:
            return await asyncio.wait_for(
                self.probe.load(family, weight), timeout=self.config.font_timeout
            )
        except asyncio.TimeoutError:
            logger.debug(f"Font {family} {weight} timed out")
            return False
        except Exception as exc:
            # Probes are external collaborators; any failure means fallback
            logger.debug(f"Font {family} {weight} failed: {exc}")
            return False

    async def _wait_settled(self) -> None:
        try:
            await asyncio.wait_for(self.probe.settled(), timeout=self.config.settle_timeout)
        except asyncio.TimeoutError:
            logger.warning("Fonts did not settle in time, continuing")
        except Exception as exc:
            logger.warning(f"Font settle signal failed: {exc}")

