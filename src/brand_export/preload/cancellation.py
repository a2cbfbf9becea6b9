"""
Module: preload.cancellation

Purpose:
    Cooperative cancellation for an export run. A caller that navigates
    away calls cancel(); pending asset waits are cancelled (no timers left
    running) and the pipeline raises ExportCancelledError at its next
    checkpoint.

Key Classes:
    - CancellationToken: One-shot cancel flag with an awaitable signal

Key Functions:
    - gather_or_cancel(): asyncio.gather that aborts when a token fires
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Iterable, List, Optional

from brand_export.errors import ExportCancelledError


class CancellationToken:
    """
    One-shot cancellation signal.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel()
        >>> token.is_cancelled
        True
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event: Optional[asyncio.Event] = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ExportCancelledError if cancel() has been called."""
        if self._cancelled:
            raise ExportCancelledError("Export cancelled")

    async def wait(self) -> None:
        """Block until cancel() is called."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()


async def gather_or_cancel(
    aws: Iterable[Awaitable[Any]],
    token: Optional[CancellationToken] = None,
) -> List[Any]:
    """
    Await every awaitable concurrently, aborting early on cancellation.

    Args:
        aws: Awaitables to join
        token: Optional cancellation token

    Returns:
        Results in input order

    Raises:
        ExportCancelledError: If ``token`` fires before all complete; the
            remaining awaitables are cancelled first
    """
    if token is None:
        return list(await asyncio.gather(*aws))

    token.raise_if_cancelled()
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    joined = asyncio.gather(*tasks)
    cancel_signal = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({joined, cancel_signal}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancel_signal.cancel()

    if not joined.done():
        joined.cancel()
        # Drain so cancelled children do not log "exception never retrieved"
        await asyncio.gather(joined, return_exceptions=True)
        raise ExportCancelledError("Export cancelled while loading assets")

    return list(joined.result())
