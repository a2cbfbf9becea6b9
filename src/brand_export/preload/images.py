"""
Module: preload.images

Purpose:
    Make every image in an export subtree decoded and locally embeddable
    before rasterization. Remote (object-storage) references are fetched
    and re-encoded as PNG data URIs so capture never trips over
    cross-origin sources; local and embedded sources are decoded under a
    per-image timeout.

Key Functions:
    - is_remote(): Whether a source needs fetching
    - to_data_uri(): Re-encode image bytes as a PNG data URI
    - decode_source(): Open a data URI or local path with PIL
    - fetch_as_data_uri(): Fetch with bounded retries and backoff

Key Classes:
    - ImageNode: Mutable image reference in the export subtree
    - ImageStatus / ImageResolution: Per-image outcome
    - ImageResolver: The per-image join used by AssetPreloader

Dependencies:
    - httpx: Async HTTP client for remote sources
    - PIL: Decode and PNG re-encode

Used By:
    - brand_export.preload.preloader: resolve_images()
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence
from urllib.parse import urlparse

import httpx
from PIL import Image

from brand_export.errors import AssetLoadError

from .cache import AssetCache
from .cancellation import CancellationToken, gather_or_cancel
from .config import PreloadConfig

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = "data:"
PNG_DATA_URI_PREFIX = "data:image/png;base64,"
PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA")

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class ImageNode:
    """
    An image reference inside the export subtree.

    The preloader rewrites ``src`` in place when it embeds a remote
    source and stores the decoded bitmap in ``image``.

    Attributes:
        src: URL, data URI or local file path
        image: Decoded bitmap once resolved
        alt: Description used in log messages
    """

    src: str
    image: Optional[Image.Image] = None
    alt: str = ""


class ImageStatus(str, Enum):
    EMBEDDED = "embedded"                  # remote source converted to data URI
    ALREADY_EMBEDDED = "already_embedded"  # data URI decoded as-is
    LOADED = "loaded"                      # local file decoded
    TIMED_OUT = "timed_out"                # decode exceeded image_timeout
    FAILED = "failed"                      # decode error, continue without it
    DEGRADED = "degraded"                  # fetch exhausted, original URL kept


@dataclass(frozen=True)
class ImageResolution:
    """Outcome for one ImageNode."""

    source: str
    status: ImageStatus
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (ImageStatus.EMBEDDED, ImageStatus.ALREADY_EMBEDDED, ImageStatus.LOADED)


def is_embedded(src: str) -> bool:
    return src.startswith(DATA_URI_PREFIX)


def is_remote(src: str, schemes: Sequence[str] = ("http", "https")) -> bool:
    """True for URLs with a remote scheme (object storage, CDN...)."""
    return urlparse(src).scheme.lower() in schemes


def to_data_uri(content: bytes) -> str:
    """
    Re-encode raw image bytes as a PNG data URI.

    Raises:
        OSError: If the bytes are not a decodable image
    """
    with Image.open(io.BytesIO(content)) as img:
        if img.mode == "CMYK":
            img = img.convert("RGB")
        elif img.mode not in PNG_MODES:
            img = img.convert("RGBA")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    return PNG_DATA_URI_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")


def decode_source(src: str) -> Image.Image:
    """
    Fully decode a data URI or local path.

    Raises:
        OSError: If the file is missing or not an image
        ValueError: If a data URI is malformed
    """
    if is_embedded(src):
        header, sep, payload = src.partition(",")
        if not sep or ";base64" not in header:
            raise ValueError(f"Unsupported data URI header: {header[:40]}")
        try:
            raw = base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"Malformed base64 payload: {exc}") from exc
        img = Image.open(io.BytesIO(raw))
    else:
        img = Image.open(Path(src))
    img.load()
    return img


async def fetch_as_data_uri(
    client: httpx.AsyncClient,
    url: str,
    config: PreloadConfig,
    *,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """
    Fetch a remote image and return it as a PNG data URI.

    Retries up to ``config.fetch_retries`` times, waiting
    ``backoff_base * 2**attempt`` seconds between attempts.

    Raises:
        AssetLoadError: When every attempt failed
    """
    last_error = ""
    for attempt in range(config.fetch_retries):
        try:
            response = await client.get(url, timeout=config.fetch_timeout)
            response.raise_for_status()
            return to_data_uri(response.content)
        except (httpx.HTTPError, OSError) as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            logger.warning(
                f"Image fetch attempt {attempt + 1}/{config.fetch_retries} failed for {url}: {last_error}"
            )

        if attempt < config.fetch_retries - 1:
            await sleep(config.backoff_base * (2 ** attempt))

    raise AssetLoadError(url, f"gave up after {config.fetch_retries} attempts ({last_error})")


class ImageResolver:
    """
    Resolve a batch of ImageNodes concurrently.

    Each node settles independently (success, timeout or failure); the
    batch returns once all have settled. Decodes run on a pool of
    ``config.decode_workers`` threads owned by one resolve() call. A
    thread cannot be interrupted, so a timed-out decode keeps its worker
    until it finishes; queued decodes are cancelled when the batch ends.
    """

    def __init__(
        self,
        config: PreloadConfig,
        cache: AssetCache,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self.cache = cache
        self._sleep = sleep

    async def resolve(
        self,
        nodes: Sequence[ImageNode],
        client: httpx.AsyncClient,
        token: Optional[CancellationToken] = None,
    ) -> List[ImageResolution]:
        executor = ThreadPoolExecutor(
            max_workers=self.config.decode_workers,
            thread_name_prefix="image-decode",
        )
        try:
            return await gather_or_cancel(
                (self._resolve_one(node, client, executor) for node in nodes),
                token,
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    async def _resolve_one(
        self,
        node: ImageNode,
        client: httpx.AsyncClient,
        executor: ThreadPoolExecutor,
    ) -> ImageResolution:
        original = node.src
        try:
            return await self._load(node, client, executor)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Contained to this image; the rest of the batch carries on
            logger.warning(f"Image {node.alt or original[:60]} failed to load: {exc}")
            return ImageResolution(original, ImageStatus.FAILED, f"{type(exc).__name__}: {exc}")

    async def _load(
        self,
        node: ImageNode,
        client: httpx.AsyncClient,
        executor: ThreadPoolExecutor,
    ) -> ImageResolution:
        original = node.src
        status = ImageStatus.ALREADY_EMBEDDED if is_embedded(original) else ImageStatus.LOADED

        if is_remote(original, self.config.remote_schemes):
            embedded = self.cache.get_embedded(original)
            if embedded is None:
                try:
                    embedded = await fetch_as_data_uri(
                        client, original, self.config, sleep=self._sleep
                    )
                except AssetLoadError as exc:
                    logger.warning(f"Keeping original reference for {original}: {exc.reason}")
                    return ImageResolution(original, ImageStatus.DEGRADED, exc.reason)
                self.cache.store_embedded(original, embedded)
            node.src = embedded
            status = ImageStatus.EMBEDDED

        loop = asyncio.get_running_loop()
        try:
            node.image = await asyncio.wait_for(
                loop.run_in_executor(executor, decode_source, node.src),
                timeout=self.config.image_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Image {node.alt or original[:60]} timed out, continuing")
            return ImageResolution(original, ImageStatus.TIMED_OUT)
        except (OSError, ValueError) as exc:
            logger.warning(f"Image {node.alt or original[:60]} failed to load: {exc}")
            return ImageResolution(original, ImageStatus.FAILED, str(exc))

        logger.debug(f"Image {node.alt or original[:60]} resolved ({status.value})")
        return ImageResolution(original, status)
