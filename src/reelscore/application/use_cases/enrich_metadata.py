"""Metadata enrichment use case.

batch -> truncate -> per item: cache lookup -> parallel TMDB + OMDb
-> smart score -> cache write -> response keyed by item id.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from typing import Any, Protocol

import structlog

from reelscore.domain.entities.enrichment import (
    CONTENT_TYPES,
    ContentType,
    EmptyBatchError,
    EnrichmentItem,
    EnrichmentResponse,
    EnrichmentResult,
    InvalidContentTypeError,
    MergedMetadata,
    ProviderOutcome,
    ProviderRecord,
    ProviderStatus,
    SmartScore,
)
from reelscore.domain.ports.cache import EnrichmentCachePort
from reelscore.domain.ports.rating_provider import RatingProviderPort

DEFAULT_MAX_BATCH_SIZE = 120

log = structlog.get_logger(__name__)


class _MetricsRecorder(Protocol):
    """Records provider, cache and batch metrics."""

    def record_provider_lookup(
        self,
        provider: str,
        status: str,
        duration_ns: int,
        *,
        reason: str = "",
    ) -> None: ...

    def record_cache(self, *, hit: bool) -> None: ...

    def record_batch(self, item_count: int) -> None: ...


# Type aliases for injected pure functions.
_ScoreFn = Callable[
    [ContentType, EnrichmentItem, ProviderRecord | None, ProviderRecord | None],
    SmartScore,
]
_MergeFn = Callable[[ProviderRecord | None, ProviderRecord | None], MergedMetadata]


class EnrichMetadataUseCase:
    """Enriches a batch of titles with TMDB/OMDb data and a smart score.

    Every item is processed concurrently, and each cache miss queries both
    providers concurrently, so one slow title never holds up another.
    Providers report failures as outcomes; an unexpected error for one
    item degrades that item to a local-only score instead of failing the
    batch. If even the local-only score fails, the item is left out.
    """

    def __init__(
        self,
        *,
        tmdb: RatingProviderPort,
        omdb: RatingProviderPort,
        cache: EnrichmentCachePort,
        score_fn: _ScoreFn,
        merge_fn: _MergeFn,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        metrics: _MetricsRecorder | None = None,
    ) -> None:
        self._tmdb = tmdb
        self._omdb = omdb
        self._cache = cache
        self._score_fn = score_fn
        self._merge_fn = merge_fn
        self._max_batch_size = max_batch_size
        self._metrics = metrics

    @property
    def provider_status(self) -> ProviderStatus:
        return ProviderStatus(
            tmdb_enabled=self._tmdb.enabled,
            omdb_enabled=self._omdb.enabled,
        )

    async def enrich_batch(
        self,
        content_type: Any,
        items: Sequence[EnrichmentItem],
    ) -> EnrichmentResponse:
        """Enrich up to ``max_batch_size`` items.

        Args:
            content_type: ``"movie"`` or ``"series"``.
            items: Items to enrich; entries without an id are skipped.

        Returns:
            Provider configuration flags plus one result per item id. When
            ids repeat, the last item in input order wins. Items that could
            not be scored at all are omitted.

        Raises:
            InvalidContentTypeError: Unknown content type.
            EmptyBatchError: No items were given.
        """
        if content_type not in CONTENT_TYPES:
            raise InvalidContentTypeError(content_type)
        if not items:
            raise EmptyBatchError()

        batch = list(items[: self._max_batch_size])
        if len(items) > len(batch):
            log.info(
                "enrich_batch_truncated",
                requested=len(items),
                limit=self._max_batch_size,
            )

        keyed = [
            (item_id, item)
            for item in batch
            if (item_id := str(item.id or "").strip())
        ]

        start = time.perf_counter()
        results = await asyncio.gather(
            *(self._enrich_item_safe(content_type, item) for _, item in keyed)
        )

        out: dict[str, EnrichmentResult] = {}
        for (item_id, _), result in zip(keyed, results):
            if result is not None:
                out[item_id] = result

        if self._metrics is not None:
            self._metrics.record_batch(len(out))
        log.info(
            "enrich_batch_complete",
            content_type=content_type,
            items=len(out),
            skipped=len(batch) - len(keyed),
            duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
        )
        return EnrichmentResponse(provider_status=self.provider_status, items=out)

    async def _enrich_item_safe(
        self, content_type: ContentType, item: EnrichmentItem
    ) -> EnrichmentResult | None:
        try:
            return await self._enrich_item(content_type, item)
        except Exception:
            log.warning(
                "enrich_item_failed",
                content_type=content_type,
                item_id=item.id,
                title=item.title,
                exc_info=True,
            )
        try:
            return self._local_only(content_type, item)
        except Exception:
            log.error(
                "enrich_item_dropped",
                content_type=content_type,
                item_id=item.id,
                exc_info=True,
            )
            return None

    def _local_only(
        self, content_type: ContentType, item: EnrichmentItem
    ) -> EnrichmentResult:
        return EnrichmentResult(
            smart=self._score_fn(content_type, item, None, None),
            tmdb=None,
            omdb=None,
            merged=self._merge_fn(None, None),
        )

    async def _enrich_item(
        self, content_type: ContentType, item: EnrichmentItem
    ) -> EnrichmentResult:
        title = str(item.title or "").strip()
        if not title:
            # No stable cache key without a title.
            return self._local_only(content_type, item)

        cached = await self._cache.get(content_type, title, item.year)
        if self._metrics is not None:
            self._metrics.record_cache(hit=cached is not None)
        if cached is not None:
            return cached

        tmdb_outcome, omdb_outcome = await asyncio.gather(
            self._lookup(self._tmdb, content_type, title, item.year),
            self._lookup(self._omdb, content_type, title, item.year),
        )
        tmdb = tmdb_outcome.record if tmdb_outcome.available else None
        omdb = omdb_outcome.record if omdb_outcome.available else None

        result = EnrichmentResult(
            smart=self._score_fn(content_type, item, tmdb, omdb),
            tmdb=tmdb,
            omdb=omdb,
            merged=self._merge_fn(tmdb, omdb),
        )
        await self._cache.put(content_type, title, item.year, result)
        return result

    async def _lookup(
        self,
        provider: RatingProviderPort,
        content_type: ContentType,
        title: str,
        year: Any,
    ) -> ProviderOutcome:
        start_ns = time.perf_counter_ns()
        outcome = await provider.lookup(content_type, title, year)
        if self._metrics is not None:
            self._metrics.record_provider_lookup(
                outcome.provider,
                outcome.status,
                time.perf_counter_ns() - start_ns,
                reason=outcome.reason,
            )
        return outcome
