"""
Module: brand_export.errors

Purpose:
    Exception taxonomy shared by the guideline engine, the asset
    preloader and the export compositor.

    Recoverable failures (AssetLoadError, RasterizationError) are raised
    inside a single asset or section and caught at that unit's boundary.
    Only ExportFatalError and ExportCancelledError reach the caller of an
    export run.

Used By:
    - brand_export.guidelines: engine and store misuse
    - brand_export.preload: per-asset failures, cancellation
    - brand_export.export: rasterization fallback, fatal results
"""

from __future__ import annotations


class BrandExportError(Exception):
    """Base class for all errors raised by this package."""


# ─────────────────────────────────────────────────────────────────────────────
# Guidelines
# ─────────────────────────────────────────────────────────────────────────────

class GuidelineError(BrandExportError):
    """Invalid use of the guideline engine."""


class GuidelineLimitReached(GuidelineError):
    """An axis already holds the configured maximum number of guidelines."""

    def __init__(self, axis: str, limit: int) -> None:
        super().__init__(f"Axis {axis!r} already holds {limit} guidelines")
        self.axis = axis
        self.limit = limit


class GuidelineNotFoundError(GuidelineError):
    """No guideline with the requested id exists for the shape key."""


class DragInProgressError(GuidelineError):
    """Another guideline drag is already active."""


class GuidelineLockedError(GuidelineError):
    """The shape key is held by an in-progress export."""


# ─────────────────────────────────────────────────────────────────────────────
# Assets
# ─────────────────────────────────────────────────────────────────────────────

class AssetLoadError(BrandExportError):
    """An image or font could not be resolved within its time budget."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────

class RasterizationError(BrandExportError):
    """A section's renderable could not be rasterized."""


class ExportFatalError(BrandExportError):
    """The export cannot produce a usable artifact."""


class PageSpecError(ExportFatalError, ValueError):
    """Caller-supplied page dimensions leave no usable content area."""


class ExportCancelledError(BrandExportError):
    """The export was abandoned through its cancellation token."""
