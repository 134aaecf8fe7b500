"""Runtime metrics endpoint."""

from __future__ import annotations

from typing import Any, cast

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from reelscore.interfaces.app_state import AppState

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/metrics")
async def metrics(request: Request) -> JSONResponse:
    """Return in-memory runtime metrics.

    Includes provider lookup outcomes, cache hits/misses, batch counts,
    the current number of cached results and which providers are enabled.
    """
    state = cast(AppState, request.app.state)

    data: dict[str, Any] = {}

    m = getattr(state, "metrics", None)
    if m is not None:
        data.update(m.snapshot())

    cache = getattr(state, "cache", None)
    if cache is not None:
        data["cache_size"] = await cache.size()

    uc = getattr(state, "enrich_uc", None)
    if uc is not None:
        status = uc.provider_status
        data["provider_status"] = {
            "tmdb_enabled": status.tmdb_enabled,
            "omdb_enabled": status.omdb_enabled,
        }

    return JSONResponse(content=data)
