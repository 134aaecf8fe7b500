"""Shared test fixtures for the reelscore test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from reelscore.domain.entities.enrichment import (
    EnrichmentItem,
    ProviderOutcome,
    ProviderRecord,
)
from reelscore.infrastructure.cache.memory_cache import MemoryEnrichmentCache

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def inception_item() -> EnrichmentItem:
    """Playlist entry for Inception with a local rating."""
    return EnrichmentItem(
        id="m1",
        title="Inception",
        year=2010,
        local_rating=8.1,
        local_votes=100,
    )


@pytest.fixture()
def tmdb_record() -> ProviderRecord:
    """TMDB match for Inception."""
    return ProviderRecord(
        provider="tmdb",
        id="27205",
        title="Inception",
        rating10=8.4,
        votes=35000,
        popularity=90.0,
        year=2010,
        overview="A thief who steals corporate secrets...",
        poster="https://image.tmdb.org/t/p/w500/inception.jpg",
        backdrop="https://image.tmdb.org/t/p/w780/inception-bg.jpg",
    )


@pytest.fixture()
def omdb_record() -> ProviderRecord:
    """OMDb match for Inception."""
    return ProviderRecord(
        provider="omdb",
        id="tt1375666",
        title="Inception",
        rating10=8.8,
        votes=2_400_000,
        year=2010,
        metascore=74,
        runtime="148 min",
        genre="Action, Adventure, Sci-Fi",
        director="Christopher Nolan",
        actors="Leonardo DiCaprio, Joseph Gordon-Levitt",
        overview="A thief is given the inverse task.",
        poster="https://m.media-amazon.com/images/inception.jpg",
    )


# ---------------------------------------------------------------------------
# Port mocks
# ---------------------------------------------------------------------------


def _mock_provider(name: str, outcome: ProviderOutcome) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    provider.enabled = True
    provider.lookup = AsyncMock(return_value=outcome)
    return provider


@pytest.fixture()
def mock_tmdb(tmdb_record: ProviderRecord) -> MagicMock:
    """RatingProviderPort mock that always finds the TMDB record."""
    return _mock_provider("tmdb", ProviderOutcome.found(tmdb_record))


@pytest.fixture()
def mock_omdb(omdb_record: ProviderRecord) -> MagicMock:
    """RatingProviderPort mock that always finds the OMDb record."""
    return _mock_provider("omdb", ProviderOutcome.found(omdb_record))


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Fully mocked EnrichmentCachePort (always a miss)."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.put = AsyncMock()
    cache.size = AsyncMock(return_value=0)
    cache.clear = AsyncMock()
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def memory_cache() -> MemoryEnrichmentCache:
    """Real in-memory cache with default bounds."""
    return MemoryEnrichmentCache()
