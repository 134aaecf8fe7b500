"""Cache Port - Interface for enrichment result caching."""

from __future__ import annotations

from typing import Any, Protocol

from reelscore.domain.entities.enrichment import ContentType, EnrichmentResult


class EnrichmentCachePort(Protocol):
    """Port for a bounded, time-expiring cache of enrichment results.

    Implementations:
      - MemoryEnrichmentCache (in-process OrderedDict)
      - DiskEnrichmentCache (diskcache.Index, survives restarts)

    Entries are keyed by (content type, normalized title, year). Expired
    entries are dropped lazily on read; when full, the oldest-inserted
    entry is evicted on write. Only fully computed results are stored.
    """

    async def get(
        self, content_type: ContentType, title: str, year: Any
    ) -> EnrichmentResult | None:
        """Retrieve value. None = not found / expired."""
        ...

    async def put(
        self,
        content_type: ContentType,
        title: str,
        year: Any,
        result: EnrichmentResult,
    ) -> None:
        """Store a result, evicting the oldest entry when at capacity."""
        ...

    async def size(self) -> int:
        """Number of stored entries (expired ones included until read)."""
        ...

    async def clear(self) -> None:
        """Delete ALL entries."""
        ...

    async def aclose(self) -> None:
        """Cleanup hook (e.g. close the disk index)."""
        ...
