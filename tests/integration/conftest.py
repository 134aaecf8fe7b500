"""Shared fixtures for integration tests.

These tests use real infrastructure components (DiskEnrichmentCache,
httpx providers, load_config) with mocked HTTP via respx.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from reelscore.infrastructure.cache.diskcache_adapter import DiskEnrichmentCache

_ENV_VARS = (
    "TMDB_API_KEY",
    "OMDB_API_KEY",
    "METADATA_CACHE_TTL_MS",
    "REELSCORE_ENVIRONMENT",
    "REELSCORE_LOG_LEVEL",
    "REELSCORE_LOG_FORMAT",
    "REELSCORE_HTTP_TIMEOUT_SECONDS",
    "REELSCORE_TMDB_API_KEY",
    "REELSCORE_OMDB_API_KEY",
    "REELSCORE_CACHE_BACKEND",
    "REELSCORE_CACHE_TTL_MS",
    "REELSCORE_CACHE_MAX_ENTRIES",
    "REELSCORE_MAX_BATCH_SIZE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of config-sensitive tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
async def diskcache(tmp_path: Path) -> DiskEnrichmentCache:
    """Real DiskEnrichmentCache backed by tmp_path (auto-cleaned)."""
    adapter = DiskEnrichmentCache(
        directory=tmp_path / "cache",
        ttl_seconds=3600,
        max_entries=3,
        max_concurrent=5,
    )
    async with adapter:
        yield adapter


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
