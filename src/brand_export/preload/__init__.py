"""
Module: preload

Purpose:
    Asset preloading barrier for exports: remote images embedded as data
    URIs, local images decoded, font families applied, each under its own
    timeout.

Key Classes:
    - AssetPreloader: Entry point
    - AssetCache: Injected memo with explicit clear()
    - CancellationToken: Abandon an export without leaking waits
    - FontProbe / ReportLabFontProbe: Font application capability
    - ImageNode: Image reference in the export subtree
"""

from .cache import AssetCache
from .cancellation import CancellationToken, gather_or_cancel
from .config import PreloadConfig
from .fonts import FontLoadingResult, FontProbe, ReportLabFontProbe, normalize_family
from .images import ImageNode, ImageResolution, ImageStatus
from .preloader import AssetPreloader, PreloadReport

__all__ = [
    "AssetCache",
    "AssetPreloader",
    "CancellationToken",
    "FontLoadingResult",
    "FontProbe",
    "ImageNode",
    "ImageResolution",
    "ImageStatus",
    "PreloadConfig",
    "PreloadReport",
    "ReportLabFontProbe",
    "gather_or_cancel",
    "normalize_family",
]
