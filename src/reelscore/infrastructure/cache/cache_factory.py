"""Cache factory - builds the enrichment cache adapter from config."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from reelscore.domain.ports.cache import EnrichmentCachePort
from reelscore.infrastructure.cache.diskcache_adapter import DiskEnrichmentCache
from reelscore.infrastructure.cache.memory_cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    MemoryEnrichmentCache,
)

log = structlog.get_logger(__name__)

CacheBackend = Literal["memory", "disk"]


def create_enrichment_cache(
    backend: CacheBackend = "memory",
    *,
    directory: str | Path = "./.cache/reelscore",
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
    max_entries: int = DEFAULT_MAX_ENTRIES,
) -> EnrichmentCachePort:
    """Create the enrichment cache for *backend*.

    Args:
        backend: "memory" (process-local) or "disk" (diskcache.Index).
        directory: Index path, only used by the disk backend.
        ttl_seconds: Entry lifetime for both backends.
        max_entries: Capacity bound for both backends.

    Raises:
        ValueError: If `backend` is unknown.
    """
    log.info(
        "cache_factory_create",
        backend=backend,
        ttl_seconds=ttl_seconds,
        max_entries=max_entries,
    )
    if backend == "memory":
        return MemoryEnrichmentCache(ttl_seconds=ttl_seconds, max_entries=max_entries)
    if backend == "disk":
        return DiskEnrichmentCache(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_entries=max_entries,
        )
    raise ValueError(f"Unknown cache backend: {backend!r}. Must be 'memory' or 'disk'.")
