"""JSON presenter for enrichment responses.

Field names are camelCase to match what existing browser clients read
(``providerStatus``, ``ratingPercent``, ``ratingSources``).
"""

from __future__ import annotations

from typing import Any

from reelscore.domain.entities.enrichment import (
    EnrichmentResponse,
    EnrichmentResult,
    MergedMetadata,
    ProviderRecord,
    SmartScore,
)


def _smart_dict(smart: SmartScore) -> dict[str, Any]:
    return {
        "type": smart.content_type,
        "score": smart.score,
        "rating10": smart.rating10,
        "ratingPercent": smart.rating_percent,
        "votes": smart.votes,
        "year": smart.year,
        "ratingSources": {
            "local": smart.rating_sources.local,
            "tmdb": smart.rating_sources.tmdb,
            "omdb": smart.rating_sources.omdb,
        },
        "providers": {
            "local": smart.providers.local,
            "tmdb": smart.providers.tmdb,
            "omdb": smart.providers.omdb,
        },
    }


def _tmdb_dict(record: ProviderRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {
        "id": record.id,
        "title": record.title,
        "rating10": record.rating10,
        "votes": record.votes,
        "popularity": record.popularity,
        "year": record.year,
        "overview": record.overview,
        "poster": record.poster,
        "backdrop": record.backdrop,
    }


def _omdb_dict(record: ProviderRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {
        "id": record.id,
        "title": record.title,
        "rating10": record.rating10,
        "votes": record.votes,
        "metascore": record.metascore,
        "year": record.year,
        "runtime": record.runtime,
        "genre": record.genre,
        "director": record.director,
        "actors": record.actors,
        "plot": record.overview,
        "poster": record.poster,
    }


def _merged_dict(merged: MergedMetadata) -> dict[str, str]:
    return {
        "plot": merged.plot,
        "poster": merged.poster,
        "backdrop": merged.backdrop,
        "genre": merged.genre,
        "director": merged.director,
        "cast": merged.cast,
        "runtime": merged.runtime,
    }


def present_result(result: EnrichmentResult) -> dict[str, Any]:
    return {
        "smart": _smart_dict(result.smart),
        "tmdb": _tmdb_dict(result.tmdb),
        "omdb": _omdb_dict(result.omdb),
        "merged": _merged_dict(result.merged),
    }


def present_response(response: EnrichmentResponse) -> dict[str, Any]:
    """Render an EnrichmentResponse as the JSON body of ``/metadata/enrich``."""
    return {
        "providerStatus": {
            "tmdbEnabled": response.provider_status.tmdb_enabled,
            "omdbEnabled": response.provider_status.omdb_enabled,
        },
        "items": {
            item_id: present_result(result)
            for item_id, result in response.items.items()
        },
    }
