"""TMDB search provider (async httpx)."""

from __future__ import annotations

from typing import Any

from reelscore.domain.entities.enrichment import (
    ContentType,
    ProviderOutcome,
    ProviderRecord,
)
from reelscore.infrastructure.common.normalize import number_or_zero, votes_or_zero
from reelscore.infrastructure.providers.base import HttpxProviderBase
from reelscore.infrastructure.providers.candidate_selector import (
    candidate_year,
    choose_candidate,
)

_BASE_URL = "https://api.themoviedb.org/3"
_POSTER_BASE = "https://image.tmdb.org/t/p/w500"
_BACKDROP_BASE = "https://image.tmdb.org/t/p/w780"


class HttpxTmdbProvider(HttpxProviderBase):
    """Search-style provider: one ``/search/{movie|tv}`` request per title.

    TMDB returns a candidate list; the best match is picked by
    ``choose_candidate``. Implements ``RatingProviderPort``.
    """

    name = "tmdb"

    def _params(
        self, content_type: ContentType, title: str, year: int
    ) -> dict[str, str]:
        params = {
            "api_key": self._api_key,
            "query": title,
            "include_adult": "false",
            "language": "en-US",
            "page": "1",
        }
        if year > 0:
            year_param = "first_air_date_year" if content_type == "series" else "year"
            params[year_param] = str(year)
        return params

    @staticmethod
    def _image_url(base: str, path: Any) -> str:
        if not path:
            return ""
        return f"{base}{path}"

    def _to_record(self, row: dict[str, Any], content_type: ContentType) -> ProviderRecord:
        return ProviderRecord(
            provider="tmdb",
            id=str(row.get("id") or ""),
            title=str(row.get("title") or row.get("name") or ""),
            rating10=number_or_zero(row.get("vote_average")),
            votes=votes_or_zero(row.get("vote_count")),
            popularity=number_or_zero(row.get("popularity")),
            year=candidate_year(row, content_type),
            overview=str(row.get("overview") or ""),
            poster=self._image_url(_POSTER_BASE, row.get("poster_path")),
            backdrop=self._image_url(_BACKDROP_BASE, row.get("backdrop_path")),
        )

    async def _lookup(
        self, content_type: ContentType, title: str, year: int
    ) -> ProviderOutcome:
        search_path = "tv" if content_type == "series" else "movie"
        payload = await self._fetch_json(
            f"{_BASE_URL}/search/{search_path}",
            self._params(content_type, title, year),
        )

        chosen = choose_candidate(payload.get("results"), year, content_type)
        if chosen is None:
            self._log.debug("tmdb_no_match", title=title, year=year)
            return ProviderOutcome.not_found(self.name, "no_results")
        return ProviderOutcome.found(self._to_record(chosen, content_type))
