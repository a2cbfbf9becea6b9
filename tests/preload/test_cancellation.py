"""
Unit tests for cooperative export cancellation.
"""

import asyncio

import pytest

from brand_export.errors import ExportCancelledError
from brand_export.preload import AssetPreloader, CancellationToken, FontProbe, PreloadConfig
from brand_export.preload.cancellation import gather_or_cancel


def test_token_state():
    token = CancellationToken()
    assert not token.is_cancelled
    token.raise_if_cancelled()

    token.cancel()

    assert token.is_cancelled
    with pytest.raises(ExportCancelledError):
        token.raise_if_cancelled()


def test_gather_without_token_returns_in_order():
    async def value(v, delay):
        await asyncio.sleep(delay)
        return v

    result = asyncio.run(gather_or_cancel([value("a", 0.02), value("b", 0)]))

    assert result == ["a", "b"]


def test_cancel_aborts_pending_waits():
    cancelled = []

    async def slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    async def run():
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.02, token.cancel)
        await gather_or_cancel([slow(), slow()], token)

    with pytest.raises(ExportCancelledError):
        asyncio.run(run())

    assert cancelled == [True, True]


def test_already_cancelled_token_starts_nothing():
    started = []

    async def work():
        started.append(True)

    async def run():
        token = CancellationToken()
        token.cancel()
        await gather_or_cancel((work() for _ in range(3)), token)

    with pytest.raises(ExportCancelledError):
        asyncio.run(run())

    assert started == []


class HangingProbe(FontProbe):
    async def load(self, family, weight):
        await asyncio.sleep(10)
        return True


def test_preload_cancelled_mid_flight():
    async def run():
        token = CancellationToken()
        preloader = AssetPreloader(
            PreloadConfig(font_timeout=5, font_weights=(400,)),
            font_probe=HangingProbe(),
        )
        asyncio.get_running_loop().call_later(0.02, token.cancel)
        await preloader.preload([], ["Inter"], token)

    with pytest.raises(ExportCancelledError):
        asyncio.run(run())
