"""
RU: Оркестратор конвейера рендеринга: кэш -> выбор пути -> движок -> кэш.
EN: Render pipeline orchestrator.

Every public operation follows the same steps:

    1. Snapshot the request and resolve its logo (a missing logo file turns
       into a warning notice, never an error).
    2. With caching enabled, fingerprint (snapshot, path tag) and return the
       stored result verbatim on a hit.
    3. On a miss, or with caching disabled, run the render path selector.
    4. With caching enabled, store the result before returning it.

Raster paths obtain their SVG through the same cached vector step.

Concurrency: all operations are coroutines. Engine work, file writes and the
logo existence check run in the default executor. Two concurrent misses on
one fingerprint both render and both write; the last write wins. There is no
single-flight deduplication.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import os
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Tuple, TypeVar, Union

from .cache import CacheStore, MemoryCacheStore, resolve_store
from .config import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_QUALITY
from .enums import RasterFormat
from .fingerprint import fingerprint
from .logo import resolve
from .models import Notice, RenderBundle, RenderOutcome, RenderResult
from .request import RenderRequest, RequestSnapshot
from .selector import RenderPathSelector

logger = logging.getLogger(__name__)

__all__ = [
    "Notifier",
    "QrPipeline",
    "write_file",
]

Notifier = Callable[[Notice], None]
PathArg = Union[str, "os.PathLike[str]"]

T = TypeVar("T")


def write_file(path: PathArg, data: bytes) -> Path:
    """
    Write bytes to `path`, creating parent directories first.

    Data goes to a sibling temporary file that is then moved into place, so
    readers see either the old file or the complete new one.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
    try:
        tmp.write_bytes(data)
        os.replace(tmp, target)
    except OSError:
        logger.error("Failed to write %s", target)
        if tmp.exists():
            tmp.unlink()
        raise
    logger.debug("Wrote %d bytes to %s", len(data), target)
    return target


class QrPipeline:
    """
    Public asynchronous surface of the render pipeline.

    Args:
        selector: Render path selector; a default one wraps a fresh engine.
        cache: Store used for requests whose cache policy is ``True``. When
            omitted a fresh private `MemoryCacheStore` is created; ``False``
            means no default store, so only request-supplied stores cache.
        notifier: Optional callback receiving every non-fatal notice.
        cache_max_entries: Capacity of the private store when `cache` is omitted.

    Example:
        >>> pipeline = QrPipeline()
        >>> outcome = await pipeline.render_png(RenderRequest("hello"))
        >>> outcome.result.width
        240
    """

    def __init__(
        self,
        selector: Optional[RenderPathSelector] = None,
        cache: Union[CacheStore, bool, None] = None,
        notifier: Optional[Notifier] = None,
        *,
        cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
    ) -> None:
        self.selector = selector if selector is not None else RenderPathSelector()
        if cache is None or cache is True:
            cache = MemoryCacheStore(cache_max_entries)
        elif cache is False:
            cache = None
        self.cache: Optional[CacheStore] = cache
        self.notifier = notifier

    # ------------------------------------------------------------------
    # preparation
    # ------------------------------------------------------------------

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args))

    async def _prepare(
        self, request: RenderRequest
    ) -> Tuple[RequestSnapshot, Tuple[Notice, ...]]:
        snapshot = request.snapshot()
        effective, notice = await self._run(resolve, snapshot.logo)
        if notice is None:
            return snapshot, ()
        return replace(snapshot, logo=effective), (notice,)

    def _emit(self, notices: Tuple[Notice, ...]) -> None:
        for notice in notices:
            logger.log(notice.levelno, notice.message)
            if self.notifier is not None:
                self.notifier(notice)

    def _store_for(
        self, request: RenderRequest, cache: Optional[bool]
    ) -> Optional[CacheStore]:
        if cache is False or not request.cache_enabled:
            return None
        return resolve_store(request.cache, self.cache)

    def fingerprint_for(self, request: RenderRequest, path_tag: str) -> str:
        """Cache key the pipeline would use for `request` along `path_tag`."""
        snapshot = request.snapshot()
        effective, _ = resolve(snapshot.logo)
        return fingerprint(replace(snapshot, logo=effective), path_tag)

    # ------------------------------------------------------------------
    # cached steps
    # ------------------------------------------------------------------

    async def _cached(
        self,
        store: Optional[CacheStore],
        snapshot: RequestSnapshot,
        path_tag: str,
        produce: Callable[[], Awaitable[RenderResult]],
    ) -> Tuple[RenderResult, bool]:
        if store is None:
            return await produce(), False
        key = fingerprint(snapshot, path_tag)
        cached = await store.get(key)
        if cached is not None:
            logger.debug("Cache hit %s (%s)", key[:12], path_tag)
            return cached, True
        logger.debug("Cache miss %s (%s)", key[:12], path_tag)
        result = await produce()
        await store.set(key, result)
        return result, False

    async def _vector(
        self, store: Optional[CacheStore], snapshot: RequestSnapshot
    ) -> Tuple[RenderResult, bool]:
        return await self._cached(
            store,
            snapshot,
            self.selector.svg_tag(snapshot),
            lambda: self._run(self.selector.render_vector, snapshot),
        )

    async def _raster(
        self,
        store: Optional[CacheStore],
        snapshot: RequestSnapshot,
        fmt: RasterFormat,
        quality: int,
    ) -> Tuple[RenderResult, bool]:
        tag = self.selector.raster_tag(fmt, quality)

        async def produce() -> RenderResult:
            vector, _ = await self._vector(store, snapshot)
            return await self._run(
                self.selector.render_raster, snapshot, vector, fmt, quality
            )

        return await self._cached(store, snapshot, tag, produce)

    # ------------------------------------------------------------------
    # public operations
    # ------------------------------------------------------------------

    async def render_svg(
        self, request: RenderRequest, *, cache: Optional[bool] = None
    ) -> RenderOutcome:
        """Render SVG markup (`RenderOutcome.payload` is `str`)."""
        snapshot, notices = await self._prepare(request)
        self._emit(notices)
        result, hit = await self._vector(self._store_for(request, cache), snapshot)
        return RenderOutcome(result=result, notices=notices, cache_hit=hit)

    async def render_raster(
        self,
        request: RenderRequest,
        fmt: RasterFormat,
        quality: int = DEFAULT_QUALITY,
        *,
        cache: Optional[bool] = None,
    ) -> RenderOutcome:
        """Render a raster format (`RenderOutcome.payload` is `bytes`)."""
        fmt = RasterFormat(fmt)
        self.selector.raster_tag(fmt, quality)
        snapshot, notices = await self._prepare(request)
        self._emit(notices)
        result, hit = await self._raster(
            self._store_for(request, cache), snapshot, fmt, quality
        )
        return RenderOutcome(result=result, notices=notices, cache_hit=hit)

    async def render_png(
        self, request: RenderRequest, *, cache: Optional[bool] = None
    ) -> RenderOutcome:
        return await self.render_raster(request, RasterFormat.PNG, cache=cache)

    async def render_jpeg(
        self,
        request: RenderRequest,
        quality: int = DEFAULT_QUALITY,
        *,
        cache: Optional[bool] = None,
    ) -> RenderOutcome:
        return await self.render_raster(request, RasterFormat.JPEG, quality, cache=cache)

    async def render_webp(
        self,
        request: RenderRequest,
        quality: int = DEFAULT_QUALITY,
        *,
        cache: Optional[bool] = None,
    ) -> RenderOutcome:
        return await self.render_raster(request, RasterFormat.WEBP, quality, cache=cache)

    async def render_all(
        self,
        request: RenderRequest,
        quality: int = DEFAULT_QUALITY,
        *,
        cache: Optional[bool] = None,
    ) -> RenderBundle:
        """Render every representation from one snapshot, emitting notices once."""
        self.selector.raster_tag(RasterFormat.JPEG, quality)
        snapshot, notices = await self._prepare(request)
        self._emit(notices)
        store = self._store_for(request, cache)

        svg, svg_hit = await self._vector(store, snapshot)
        outcomes = {}
        for fmt in RasterFormat:
            result, hit = await self._raster(store, snapshot, fmt, quality)
            outcomes[fmt] = RenderOutcome(result=result, notices=notices, cache_hit=hit)
        return RenderBundle(
            svg=RenderOutcome(result=svg, notices=notices, cache_hit=svg_hit),
            png=outcomes[RasterFormat.PNG],
            jpeg=outcomes[RasterFormat.JPEG],
            webp=outcomes[RasterFormat.WEBP],
            width=snapshot.width,
            height=snapshot.height,
            notices=notices,
        )

    # ------------------------------------------------------------------
    # file variants
    # ------------------------------------------------------------------

    async def _write(self, outcome: RenderOutcome, path: PathArg) -> RenderOutcome:
        await self._run(write_file, path, outcome.result.to_bytes())
        return outcome

    async def write_svg(
        self, request: RenderRequest, path: PathArg, *, cache: Optional[bool] = None
    ) -> RenderOutcome:
        return await self._write(await self.render_svg(request, cache=cache), path)

    async def write_png(
        self, request: RenderRequest, path: PathArg, *, cache: Optional[bool] = None
    ) -> RenderOutcome:
        return await self._write(await self.render_png(request, cache=cache), path)

    async def write_jpeg(
        self,
        request: RenderRequest,
        path: PathArg,
        quality: int = DEFAULT_QUALITY,
        *,
        cache: Optional[bool] = None,
    ) -> RenderOutcome:
        return await self._write(
            await self.render_jpeg(request, quality, cache=cache), path
        )

    async def write_webp(
        self,
        request: RenderRequest,
        path: PathArg,
        quality: int = DEFAULT_QUALITY,
        *,
        cache: Optional[bool] = None,
    ) -> RenderOutcome:
        return await self._write(
            await self.render_webp(request, quality, cache=cache), path
        )
