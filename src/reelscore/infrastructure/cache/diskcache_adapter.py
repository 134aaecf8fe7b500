"""Diskcache adapter - persistent enrichment cache without daemon process."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog
from diskcache import Index

from reelscore.domain.entities.enrichment import ContentType, EnrichmentResult
from reelscore.infrastructure.cache.memory_cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
)
from reelscore.infrastructure.common.normalize import cache_key

log = structlog.get_logger(__name__)


class DiskEnrichmentCache:
    """Async wrapper around ``diskcache.Index`` (sync-only library).

    Same semantics as the in-memory cache (lazy TTL expiry, insertion-order
    eviction, capacity bound) but entries survive restarts. ``Index`` keeps
    insertion order in SQLite, so the oldest entry is ``popitem(last=False)``.

    - Uses `asyncio.to_thread` for I/O (no blocking of the event loop).
    - Semaphore prevents too many parallel disk writes (SQLite lock contention).
    - Implements context manager (`async with`).

    Args:
        directory: SQLite DB path.
        ttl_seconds: Entry lifetime (default 6h).
        max_entries: Capacity bound (default 5000).
        max_concurrent: Max parallel disk ops.
        clock: Wall-clock time source (stored timestamps outlive the process).
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/reelscore",
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        max_concurrent: int = 10,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.directory = Path(directory)
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._index: Index | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.info(
            "diskcache_adapter_init",
            directory=str(self.directory),
            ttl_seconds=ttl_seconds,
            max_entries=max_entries,
        )

    # --- Context Manager ---
    async def __aenter__(self) -> DiskEnrichmentCache:
        """Open the SQLite index (lazy, on first access)."""
        await self._ensure_open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._index is not None:
            await asyncio.to_thread(self._index.cache.close)
            self._index = None
            log.info("diskcache_closed", directory=str(self.directory))

    async def _ensure_open(self) -> Index:
        if self._index is None:
            self._index = await asyncio.to_thread(Index, str(self.directory))
            log.info("diskcache_opened", path=str(self.directory))
        return self._index

    # --- sync helpers (run in worker thread) ---
    def _get_sync(self, index: Index, key: str) -> EnrichmentResult | None:
        hit = index.get(key)
        if hit is None:
            return None
        stored_at, value = hit
        if self._clock() - stored_at > self.ttl_seconds:
            index.pop(key, None)
            log.debug("enrichment_cache_expired", key=key)
            return None
        return value

    def _put_sync(self, index: Index, key: str, result: EnrichmentResult) -> None:
        index.pop(key, None)
        while len(index) >= self.max_entries:
            try:
                evicted, _ = index.popitem(last=False)
            except KeyError:
                break
            log.debug("enrichment_cache_evicted", key=evicted)
        index[key] = (self._clock(), result)

    # --- EnrichmentCachePort implementation ---
    async def get(
        self, content_type: ContentType, title: str, year: Any
    ) -> EnrichmentResult | None:
        index = await self._ensure_open()
        key = cache_key(content_type, title, year)
        async with self._semaphore:
            return await asyncio.to_thread(self._get_sync, index, key)

    async def put(
        self,
        content_type: ContentType,
        title: str,
        year: Any,
        result: EnrichmentResult,
    ) -> None:
        index = await self._ensure_open()
        key = cache_key(content_type, title, year)
        async with self._semaphore:
            await asyncio.to_thread(self._put_sync, index, key, result)

    async def size(self) -> int:
        index = await self._ensure_open()
        return await asyncio.to_thread(len, index)

    async def clear(self) -> None:
        index = await self._ensure_open()
        async with self._semaphore:
            await asyncio.to_thread(index.clear)
            log.warning("enrichment_cache_cleared", directory=str(self.directory))
