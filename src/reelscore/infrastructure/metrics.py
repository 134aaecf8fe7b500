"""Zero-impact in-memory enrichment metrics.

All counters are plain Python integers manipulated inside the single-threaded
async event loop, without locks or I/O.

``time.perf_counter_ns()`` is used for timing (monotonic, nanosecond
resolution, near-zero overhead).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class ProviderStats:
    """Accumulated lookup statistics for a single provider."""

    lookups: int = 0
    found: int = 0
    not_found: int = 0
    failed: int = 0
    disabled: int = 0
    total_duration_ns: int = 0
    failure_reasons: dict[str, int] = field(default_factory=dict)

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable summary."""
        avg_ms = (
            round(self.total_duration_ns / self.lookups / 1_000_000, 1)
            if self.lookups
            else 0.0
        )
        return {
            "lookups": self.lookups,
            "found": self.found,
            "not_found": self.not_found,
            "failed": self.failed,
            "disabled": self.disabled,
            "avg_duration_ms": avg_ms,
            "failure_reasons": dict(sorted(self.failure_reasons.items())),
        }


@dataclass
class CacheStats:
    """Hit/miss counters for the enrichment cache."""

    hits: int = 0
    misses: int = 0

    def snapshot(self) -> dict[str, object]:
        lookups = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_ratio": round(self.hits / lookups, 3) if lookups else 0.0,
        }


@dataclass
class MetricsCollector:
    """Central in-memory metrics collector.

    Not thread-safe; only touched from the event loop.
    """

    _providers: dict[str, ProviderStats] = field(default_factory=dict)
    _cache: CacheStats = field(default_factory=CacheStats)
    _batches: int = 0
    _items: int = 0
    _start_ns: int = field(default_factory=time.perf_counter_ns)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_provider_lookup(
        self,
        provider: str,
        status: str,
        duration_ns: int,
        *,
        reason: str = "",
    ) -> None:
        """Record one provider lookup outcome."""
        stats = self._providers.get(provider)
        if stats is None:
            stats = ProviderStats()
            self._providers[provider] = stats

        stats.lookups += 1
        stats.total_duration_ns += duration_ns

        if status == "found":
            stats.found += 1
        elif status == "not_found":
            stats.not_found += 1
        elif status == "disabled":
            stats.disabled += 1
        else:
            stats.failed += 1
            key = reason or "unknown"
            stats.failure_reasons[key] = stats.failure_reasons.get(key, 0) + 1

    def record_cache(self, *, hit: bool) -> None:
        if hit:
            self._cache.hits += 1
        else:
            self._cache.misses += 1

    def record_batch(self, item_count: int) -> None:
        """Record one enrich_batch call and how many items it returned."""
        self._batches += 1
        self._items += item_count

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable snapshot of all metrics."""
        uptime_ns = time.perf_counter_ns() - self._start_ns
        uptime_s = round(uptime_ns / 1_000_000_000, 1)

        return {
            "uptime_seconds": uptime_s,
            "batches": self._batches,
            "items": self._items,
            "providers": {
                name: stats.snapshot()
                for name, stats in sorted(self._providers.items())
            },
            "cache": self._cache.snapshot(),
        }
