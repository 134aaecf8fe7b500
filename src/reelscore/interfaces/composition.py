"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from reelscore.application.use_cases.enrich_metadata import EnrichMetadataUseCase
from reelscore.infrastructure.cache.cache_factory import create_enrichment_cache
from reelscore.infrastructure.metrics import MetricsCollector
from reelscore.infrastructure.providers import HttpxOmdbProvider, HttpxTmdbProvider
from reelscore.infrastructure.scoring.smart_score import (
    build_merged_metadata,
    build_smart_score,
)
from reelscore.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create shared resources on startup and release them on shutdown."""
    state = cast(AppState, app.state)
    config = state.config

    # 1) Enrichment cache
    state.cache = create_enrichment_cache(
        config.cache_backend,
        directory=config.cache_dir,
        ttl_seconds=config.cache_ttl_seconds,
        max_entries=config.cache_max_entries,
    )
    log.info(
        "cache_initialized",
        backend=config.cache_backend,
        ttl_ms=config.cache_ttl_ms,
        max_entries=config.cache_max_entries,
    )

    # 2) Shared HTTP client (timeouts are enforced per lookup)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )
    log.info("http_client_initialized", timeout_seconds=config.http_timeout_seconds)

    # 3) Rating providers
    state.tmdb_provider = HttpxTmdbProvider(
        api_key=config.tmdb_api_key,
        http_client=state.http_client,
        timeout_seconds=config.http_timeout_seconds,
    )
    state.omdb_provider = HttpxOmdbProvider(
        api_key=config.omdb_api_key,
        http_client=state.http_client,
        timeout_seconds=config.http_timeout_seconds,
    )
    log.info(
        "rating_providers_initialized",
        tmdb_enabled=state.tmdb_provider.enabled,
        omdb_enabled=state.omdb_provider.enabled,
    )

    # 4) Metrics + use case
    state.metrics = MetricsCollector()
    state.enrich_uc = EnrichMetadataUseCase(
        tmdb=state.tmdb_provider,
        omdb=state.omdb_provider,
        cache=state.cache,
        score_fn=build_smart_score,
        merge_fn=build_merged_metadata,
        max_batch_size=config.max_batch_size,
        metrics=state.metrics,
    )

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
