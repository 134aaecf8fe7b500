"""Tests for EnrichMetadataUseCase."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from reelscore.application.use_cases.enrich_metadata import EnrichMetadataUseCase
from reelscore.domain.entities.enrichment import (
    EmptyBatchError,
    EnrichmentItem,
    InvalidContentTypeError,
    ProviderOutcome,
)
from reelscore.infrastructure.cache.memory_cache import MemoryEnrichmentCache
from reelscore.infrastructure.metrics import MetricsCollector
from reelscore.infrastructure.scoring.smart_score import (
    build_merged_metadata,
    build_smart_score,
)


def _make_uc(
    tmdb: MagicMock,
    omdb: MagicMock,
    cache: AsyncMock | MemoryEnrichmentCache,
    *,
    max_batch_size: int = 120,
    metrics: MetricsCollector | None = None,
    score_fn=build_smart_score,
) -> EnrichMetadataUseCase:
    return EnrichMetadataUseCase(
        tmdb=tmdb,
        omdb=omdb,
        cache=cache,
        score_fn=score_fn,
        merge_fn=build_merged_metadata,
        max_batch_size=max_batch_size,
        metrics=metrics,
    )


def _items(n: int) -> list[EnrichmentItem]:
    return [EnrichmentItem(id=f"id{i}", title=f"Title {i}") for i in range(n)]


class TestValidation:
    async def test_invalid_content_type(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        with pytest.raises(InvalidContentTypeError):
            await uc.enrich_batch("tv", _items(1))
        mock_tmdb.lookup.assert_not_awaited()

    async def test_empty_batch(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        with pytest.raises(EmptyBatchError):
            await uc.enrich_batch("movie", [])


class TestBatch:
    async def test_full_enrichment(
        self,
        mock_tmdb: MagicMock,
        mock_omdb: MagicMock,
        mock_cache: AsyncMock,
        inception_item: EnrichmentItem,
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        response = await uc.enrich_batch("movie", [inception_item])

        assert response.provider_status.tmdb_enabled is True
        assert response.provider_status.omdb_enabled is True
        result = response.items["m1"]
        assert result.tmdb is not None
        assert result.omdb is not None
        assert result.smart.providers.tmdb is True
        assert result.smart.providers.omdb is True
        assert result.merged.director == "Christopher Nolan"
        mock_tmdb.lookup.assert_awaited_once_with("movie", "Inception", 2010)
        mock_omdb.lookup.assert_awaited_once_with("movie", "Inception", 2010)
        mock_cache.put.assert_awaited_once()

    async def test_truncates_before_provider_calls(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        response = await uc.enrich_batch("movie", _items(150))

        assert len(response.items) == 120
        assert "id119" in response.items
        assert "id120" not in response.items
        assert mock_tmdb.lookup.await_count == 120
        assert mock_omdb.lookup.await_count == 120

    async def test_custom_batch_limit(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache, max_batch_size=2)
        response = await uc.enrich_batch("series", _items(5))
        assert set(response.items) == {"id0", "id1"}

    async def test_blank_ids_are_skipped(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        items = [EnrichmentItem(id="  ", title="Ghost"), EnrichmentItem(id="a", title="A")]
        response = await uc.enrich_batch("movie", items)

        assert list(response.items) == ["a"]
        assert mock_tmdb.lookup.await_count == 1

    async def test_duplicate_ids_last_wins(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        items = [
            EnrichmentItem(id="dup", title="First", local_rating=2.0),
            EnrichmentItem(id="dup", title="Second", local_rating=9.0),
        ]
        response = await uc.enrich_batch("movie", items)

        assert len(response.items) == 1
        assert response.items["dup"].smart.rating_sources.local == 9.0

    async def test_provider_status_reflects_disabled(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        mock_omdb.enabled = False
        mock_omdb.lookup = AsyncMock(return_value=ProviderOutcome.disabled("omdb"))
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)

        response = await uc.enrich_batch("movie", _items(1))

        assert response.provider_status.omdb_enabled is False
        assert response.items["id0"].omdb is None
        assert response.items["id0"].smart.providers.omdb is False


class TestConcurrency:
    async def test_providers_queried_concurrently(
        self, mock_cache: AsyncMock
    ) -> None:
        in_flight = 0
        peak = 0

        async def _lookup(content_type, title, year=None):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return ProviderOutcome.not_found("tmdb")

        tmdb = MagicMock(enabled=True, lookup=AsyncMock(side_effect=_lookup))
        omdb = MagicMock(enabled=True, lookup=AsyncMock(side_effect=_lookup))
        uc = _make_uc(tmdb, omdb, mock_cache)

        await uc.enrich_batch("movie", _items(3))

        # 3 items x 2 providers all in flight together.
        assert peak == 6


class TestCaching:
    async def test_second_batch_hits_cache(
        self,
        mock_tmdb: MagicMock,
        mock_omdb: MagicMock,
        inception_item: EnrichmentItem,
    ) -> None:
        cache = MemoryEnrichmentCache()
        metrics = MetricsCollector()
        uc = _make_uc(mock_tmdb, mock_omdb, cache, metrics=metrics)

        first = await uc.enrich_batch("movie", [inception_item])
        second = await uc.enrich_batch("movie", [inception_item])

        assert second.items["m1"] == first.items["m1"]
        assert mock_tmdb.lookup.await_count == 1
        assert mock_omdb.lookup.await_count == 1
        snap = metrics.snapshot()
        assert snap["cache"]["hits"] == 1
        assert snap["cache"]["misses"] == 1
        assert snap["batches"] == 2

    async def test_cached_result_reused_for_other_id(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock
    ) -> None:
        cache = MemoryEnrichmentCache()
        uc = _make_uc(mock_tmdb, mock_omdb, cache)

        await uc.enrich_batch("movie", [EnrichmentItem(id="a", title="Inception", year=2010)])
        response = await uc.enrich_batch(
            "movie", [EnrichmentItem(id="b", title="inception!", year="2010")]
        )

        assert "b" in response.items
        assert mock_tmdb.lookup.await_count == 1

    async def test_blank_title_scored_locally_and_not_cached(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)
        item = EnrichmentItem(id="x", title="  ", local_rating=7.0)

        response = await uc.enrich_batch("movie", [item])

        result = response.items["x"]
        assert result.tmdb is None
        assert result.omdb is None
        assert result.smart.providers.local is True
        assert result.smart.providers.tmdb is False
        mock_tmdb.lookup.assert_not_awaited()
        mock_cache.get.assert_not_awaited()
        mock_cache.put.assert_not_awaited()

    async def test_result_cached_even_when_providers_fail(
        self, mock_cache: AsyncMock
    ) -> None:
        tmdb = MagicMock(
            enabled=True,
            lookup=AsyncMock(return_value=ProviderOutcome.failed("tmdb", "timeout")),
        )
        omdb = MagicMock(
            enabled=True,
            lookup=AsyncMock(return_value=ProviderOutcome.failed("omdb", "http_500")),
        )
        uc = _make_uc(tmdb, omdb, mock_cache)

        response = await uc.enrich_batch("movie", _items(1))

        assert response.items["id0"].smart.providers.tmdb is False
        mock_cache.put.assert_awaited_once()


class TestFailureIsolation:
    async def test_one_failing_item_does_not_abort_batch(
        self, mock_omdb: MagicMock, mock_cache: AsyncMock, tmdb_record
    ) -> None:
        async def _lookup(content_type, title, year=None):
            if title == "Title 1":
                raise RuntimeError("boom")
            return ProviderOutcome.found(tmdb_record)

        tmdb = MagicMock(enabled=True, lookup=AsyncMock(side_effect=_lookup))
        uc = _make_uc(tmdb, mock_omdb, mock_cache)

        response = await uc.enrich_batch("movie", _items(3))

        assert set(response.items) == {"id0", "id1", "id2"}
        assert response.items["id0"].tmdb is not None
        failed = response.items["id1"]
        assert failed.tmdb is None
        assert failed.omdb is None
        assert mock_cache.put.await_count == 2

    async def test_cache_error_degrades_item(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        mock_cache.get = AsyncMock(side_effect=OSError("disk full"))
        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache)

        response = await uc.enrich_batch("movie", _items(1))

        assert response.items["id0"].smart.providers.tmdb is False


class TestMetrics:
    async def test_provider_lookups_recorded(
        self, mock_tmdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        omdb = MagicMock(
            enabled=True,
            lookup=AsyncMock(
                return_value=ProviderOutcome.not_found("omdb", "Movie not found!")
            ),
        )
        metrics = MetricsCollector()
        uc = _make_uc(mock_tmdb, omdb, mock_cache, metrics=metrics)

        await uc.enrich_batch("movie", _items(2))

        providers = metrics.snapshot()["providers"]
        assert providers["tmdb"]["found"] == 2
        assert providers["omdb"]["not_found"] == 2
        assert metrics.snapshot()["items"] == 2


class TestUnscorableItems:
    async def test_extreme_local_rating_does_not_abort_batch(
        self,
        mock_tmdb: MagicMock,
        mock_omdb: MagicMock,
        memory_cache: MemoryEnrichmentCache,
    ) -> None:
        uc = _make_uc(mock_tmdb, mock_omdb, memory_cache)
        items = [
            EnrichmentItem(id="good", title="Inception", local_rating=8.8),
            EnrichmentItem(id="bad", title="X", local_rating=2e307),
        ]

        response = await uc.enrich_batch("movie", items)

        assert set(response.items) == {"good", "bad"}
        assert response.items["good"].tmdb is not None
        bad = response.items["bad"].smart
        assert 0 <= bad.rating_percent <= 100
        assert 0.0 <= bad.score <= 1.0

    async def test_item_dropped_when_local_fallback_fails(
        self, mock_tmdb: MagicMock, mock_omdb: MagicMock, mock_cache: AsyncMock
    ) -> None:
        def _score(content_type, item, tmdb, omdb):
            if item.id == "id1":
                raise ValueError("unscorable")
            return build_smart_score(content_type, item, tmdb, omdb)

        uc = _make_uc(mock_tmdb, mock_omdb, mock_cache, score_fn=_score)

        response = await uc.enrich_batch("movie", _items(3))

        assert set(response.items) == {"id0", "id2"}
