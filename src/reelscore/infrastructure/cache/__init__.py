"""Cache Infrastructure - Backend-Implementations."""

from .cache_factory import CacheBackend, create_enrichment_cache
from .diskcache_adapter import DiskEnrichmentCache
from .memory_cache import MemoryEnrichmentCache

__all__ = [
    "CacheBackend",
    "DiskEnrichmentCache",
    "MemoryEnrichmentCache",
    "create_enrichment_cache",
]
