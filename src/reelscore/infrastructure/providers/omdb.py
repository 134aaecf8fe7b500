"""OMDb title lookup provider (async httpx)."""

from __future__ import annotations

from typing import Any

from reelscore.domain.entities.enrichment import (
    ContentType,
    ProviderOutcome,
    ProviderRecord,
)
from reelscore.infrastructure.common.normalize import (
    number_or_zero,
    votes_or_zero,
    year_from_range,
)
from reelscore.infrastructure.providers.base import HttpxProviderBase

OMDB_URL = "https://www.omdbapi.com/"


def _text(value: Any) -> str:
    """OMDb strings, with its ``"N/A"`` placeholder mapped to ""."""
    text = str(value or "").strip()
    return "" if text.upper() == "N/A" else text


class HttpxOmdbProvider(HttpxProviderBase):
    """Lookup-style provider: exact-title ``?t=`` query, at most one match.

    ``Response: "False"`` in the payload is OMDb's not-found sentinel.
    Implements ``RatingProviderPort``.
    """

    name = "omdb"

    def _params(
        self, content_type: ContentType, title: str, year: int
    ) -> dict[str, str]:
        params = {
            "apikey": self._api_key,
            "t": title,
            "type": "series" if content_type == "series" else "movie",
            "plot": "short",
        }
        if year > 0:
            params["y"] = str(year)
        return params

    @staticmethod
    def _to_record(payload: dict[str, Any]) -> ProviderRecord:
        return ProviderRecord(
            provider="omdb",
            id=_text(payload.get("imdbID")),
            title=_text(payload.get("Title")),
            rating10=number_or_zero(payload.get("imdbRating")),
            votes=votes_or_zero(payload.get("imdbVotes")),
            metascore=votes_or_zero(payload.get("Metascore")),
            year=year_from_range(payload.get("Year")),
            runtime=_text(payload.get("Runtime")),
            genre=_text(payload.get("Genre")),
            director=_text(payload.get("Director")),
            actors=_text(payload.get("Actors")),
            overview=_text(payload.get("Plot")),
            poster=_text(payload.get("Poster")),
        )

    async def _lookup(
        self, content_type: ContentType, title: str, year: int
    ) -> ProviderOutcome:
        payload = await self._fetch_json(
            OMDB_URL, self._params(content_type, title, year)
        )

        if str(payload.get("Response", "")).lower() == "false":
            reason = _text(payload.get("Error")) or "not_found"
            self._log.debug("omdb_no_match", title=title, year=year, reason=reason)
            return ProviderOutcome.not_found(self.name, reason)
        return ProviderOutcome.found(self._to_record(payload))
