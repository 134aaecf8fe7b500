"""Metadata enrichment endpoint."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from reelscore.domain.entities.enrichment import EnrichmentError, EnrichmentItem
from reelscore.interfaces.api.metadata.presenter import present_response
from reelscore.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/metadata", tags=["metadata"])


def _error(message: str, *, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _coerce_item(raw: Any) -> EnrichmentItem:
    """Build an EnrichmentItem from one loosely-typed JSON entry."""
    if not isinstance(raw, dict):
        raw = {}
    return EnrichmentItem(
        id=str(raw.get("id") or "").strip(),
        title=str(raw.get("title") or "").strip(),
        year=raw.get("year"),
        local_rating=raw.get("localRating"),
        local_votes=raw.get("localVotes"),
    )


def _coerce_items(raw_items: Any, *, limit: int) -> list[EnrichmentItem]:
    if not isinstance(raw_items, list):
        return []
    items = [_coerce_item(raw) for raw in raw_items[:limit]]
    return [item for item in items if item.id or item.title]


@router.post("/enrich")
async def enrich_metadata(request: Request) -> JSONResponse:
    """Enrich a batch of movies or series with ratings and a smart score.

    Body: ``{"type": "movie"|"series", "items": [{id, title, year,
    localRating, localVotes}, ...]}``. At most ``max_batch_size`` items are
    considered.
    """
    state = cast(AppState, request.app.state)

    try:
        body = await request.json()
    except ValueError:
        return _error("request body must be JSON", status_code=400)
    if not isinstance(body, dict):
        body = {}

    content_type = str(body.get("type") or "").strip().lower()
    items = _coerce_items(body.get("items"), limit=state.config.max_batch_size)

    try:
        response = await state.enrich_uc.enrich_batch(content_type, items)
    except EnrichmentError as exc:
        return _error(str(exc), status_code=400)
    except Exception:
        log.error(
            "enrich_request_failed",
            content_type=content_type,
            items=len(items),
            exc_info=True,
        )
        return _error("Failed to enrich metadata", status_code=500)

    return JSONResponse(content=present_response(response))
