"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from reelscore.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from reelscore.application.use_cases.enrich_metadata import EnrichMetadataUseCase
    from reelscore.domain.ports import EnrichmentCachePort, RatingProviderPort
    from reelscore.infrastructure.metrics import MetricsCollector


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: EnrichmentCachePort
    http_client: httpx.AsyncClient

    # Rating providers (disabled when their API key is blank)
    tmdb_provider: RatingProviderPort
    omdb_provider: RatingProviderPort

    # Metrics (in-memory counters)
    metrics: MetricsCollector

    # Application Services
    enrich_uc: EnrichMetadataUseCase
