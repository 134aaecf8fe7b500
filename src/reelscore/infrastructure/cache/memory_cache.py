"""In-memory enrichment cache - bounded OrderedDict with lazy TTL expiry."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

import structlog

from reelscore.domain.entities.enrichment import ContentType, EnrichmentResult
from reelscore.infrastructure.common.normalize import cache_key

log = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 6 * 60 * 60
DEFAULT_MAX_ENTRIES = 5000


class MemoryEnrichmentCache:
    """Process-local cache of fully computed enrichment results.

    - Expiry is checked lazily in ``get()``; there is no background sweep.
    - Eviction is insertion-ordered (not LRU): a full cache drops the
      oldest stored entry before inserting a new one.
    - Writes are last-writer-wins; safe within one asyncio event loop.

    Args:
        ttl_seconds: Entry lifetime (default 6h).
        max_entries: Capacity bound (default 5000).
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, EnrichmentResult]] = (
            OrderedDict()
        )

    # --- Context Manager ---
    async def __aenter__(self) -> MemoryEnrichmentCache:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._entries.clear()

    # --- EnrichmentCachePort implementation ---
    async def get(
        self, content_type: ContentType, title: str, year: Any
    ) -> EnrichmentResult | None:
        key = cache_key(content_type, title, year)
        hit = self._entries.get(key)
        if hit is None:
            return None

        stored_at, value = hit
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            log.debug("enrichment_cache_expired", key=key)
            return None
        return value

    async def put(
        self,
        content_type: ContentType,
        title: str,
        year: Any,
        result: EnrichmentResult,
    ) -> None:
        key = cache_key(content_type, title, year)
        # Re-inserting moves the key to the newest position.
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("enrichment_cache_evicted", key=evicted)
        self._entries[key] = (self._clock(), result)

    async def size(self) -> int:
        return len(self._entries)

    async def clear(self) -> None:
        self._entries.clear()
        log.info("enrichment_cache_cleared", backend="memory")
