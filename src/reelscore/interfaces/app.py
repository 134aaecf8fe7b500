"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from reelscore import __version__
from reelscore.infrastructure.config import AppConfig
from reelscore.interfaces.app_state import AppState
from reelscore.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app; configuration only, no resource initialization.

    Resources (HTTP client, cache, providers) are created in lifespan().
    """
    app = FastAPI(
        title="reelscore",
        description="Movie/series metadata enrichment and smart scoring",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from reelscore.interfaces.api.metadata.router import router as metadata_router
    from reelscore.interfaces.api.stats.router import router as stats_router

    app.include_router(metadata_router, prefix="/api")
    app.include_router(stats_router, prefix="/api")

    @app.get("/api/healthz")
    async def healthz() -> dict[str, str | bool]:
        """Liveness probe; returns 200 as long as the process is running."""
        uc = getattr(app.state, "enrich_uc", None)
        status = uc.provider_status if uc is not None else None
        return {
            "status": "ok",
            "tmdb_enabled": bool(status and status.tmdb_enabled),
            "omdb_enabled": bool(status and status.omdb_enabled),
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
