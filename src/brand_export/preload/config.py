"""
Module: preload.config

Purpose:
    Time budgets and retry policy for asset preloading. Each asset is
    bounded individually; there is no aggregate deadline.

Key Classes:
    - PreloadConfig: Immutable preloader configuration
"""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_FONT_WEIGHTS = (100, 200, 300, 400, 500, 600, 700, 800, 900)

# Families the renderer always has; never requested from a probe
DEFAULT_SYSTEM_FONTS = frozenset({
    "Arial",
    "Helvetica",
    "Times",
    "Times New Roman",
    "Courier",
    "serif",
    "sans-serif",
    "monospace",
    "inherit",
})


@dataclass(frozen=True)
class PreloadConfig:
    """
    Configuration for the asset preloader (immutable).

    Attributes:
        image_timeout: Seconds to wait for one image to decode
        decode_workers: Threads decoding images for one preload
        fetch_timeout: Seconds per HTTP attempt for a remote image
        fetch_retries: Attempts per remote image before degrading
        backoff_base: First retry delay; doubles on each further attempt
        font_timeout: Seconds to wait for one family/weight to apply
        settle_timeout: Seconds to wait for the probe's settled signal
        font_weights: Representative weights requested per family
        system_fonts: Families that never need loading
        remote_schemes: URL schemes treated as remote references

    Example:
        >>> PreloadConfig(fetch_retries=1).fetch_retries
        1
    """

    image_timeout: float = 8.0
    decode_workers: int = 4
    fetch_timeout: float = 10.0
    fetch_retries: int = 3
    backoff_base: float = 1.0
    font_timeout: float = 3.0
    settle_timeout: float = 5.0
    font_weights: tuple[int, ...] = DEFAULT_FONT_WEIGHTS
    system_fonts: frozenset[str] = DEFAULT_SYSTEM_FONTS
    remote_schemes: tuple[str, ...] = ("http", "https")

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("image_timeout", "fetch_timeout", "font_timeout", "settle_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive: {value}")
        if self.decode_workers < 1:
            raise ValueError(f"decode_workers must be at least 1: {self.decode_workers}")
        if self.fetch_retries < 1:
            raise ValueError(f"fetch_retries must be at least 1: {self.fetch_retries}")
        if self.backoff_base < 0:
            raise ValueError(f"backoff_base must be non-negative: {self.backoff_base}")
        if not self.font_weights:
            raise ValueError("font_weights must not be empty")
