"""Tests for HttpxOmdbProvider (lookup-style provider)."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx

from reelscore.infrastructure.providers.omdb import HttpxOmdbProvider

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_INCEPTION = {
    "Title": "Inception",
    "Year": "2010",
    "Runtime": "148 min",
    "Genre": "Action, Adventure, Sci-Fi",
    "Director": "Christopher Nolan",
    "Actors": "Leonardo DiCaprio, Joseph Gordon-Levitt, Elliot Page",
    "Plot": "A thief who steals corporate secrets...",
    "Poster": "https://m.media-amazon.com/images/M/inception.jpg",
    "Metascore": "74",
    "imdbRating": "8.8",
    "imdbVotes": "2,512,345",
    "imdbID": "tt1375666",
    "Type": "movie",
    "Response": "True",
}

_BREAKING_BAD = {
    "Title": "Breaking Bad",
    "Year": "2008–2013",
    "Runtime": "N/A",
    "Genre": "Crime, Drama, Thriller",
    "Director": "N/A",
    "Actors": "Bryan Cranston, Aaron Paul",
    "Plot": "N/A",
    "Poster": "N/A",
    "Metascore": "N/A",
    "imdbRating": "9.5",
    "imdbVotes": "2,100,000",
    "imdbID": "tt0903747",
    "Type": "series",
    "Response": "True",
}

_NOT_FOUND = {"Response": "False", "Error": "Movie not found!"}


def _make_provider(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    api_key: str | None = "omdb-key",
) -> tuple[HttpxOmdbProvider, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
    return HttpxOmdbProvider(api_key=api_key, http_client=http), seen


def _json(payload: object, status_code: int = 200):
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=json.dumps(payload))

    return _handler


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestRequest:
    async def test_movie_params(self) -> None:
        provider, seen = _make_provider(_json(_INCEPTION))
        await provider.lookup("movie", "Inception", 2010)

        url = seen[0].url
        assert url.host == "www.omdbapi.com"
        assert url.params["apikey"] == "omdb-key"
        assert url.params["t"] == "Inception"
        assert url.params["type"] == "movie"
        assert url.params["plot"] == "short"
        assert url.params["y"] == "2010"

    async def test_series_params_without_year(self) -> None:
        provider, seen = _make_provider(_json(_BREAKING_BAD))
        await provider.lookup("series", "Breaking Bad", None)

        url = seen[0].url
        assert url.params["type"] == "series"
        assert "y" not in url.params


class TestMapping:
    async def test_movie_mapping(self) -> None:
        provider, _ = _make_provider(_json(_INCEPTION))
        outcome = await provider.lookup("movie", "Inception", 2010)

        assert outcome.status == "found"
        record = outcome.record
        assert record is not None
        assert record.provider == "omdb"
        assert record.id == "tt1375666"
        assert record.rating10 == 8.8
        assert record.votes == 2_512_345
        assert record.metascore == 74
        assert record.year == 2010
        assert record.runtime == "148 min"
        assert record.director == "Christopher Nolan"
        assert record.overview.startswith("A thief")
        assert record.poster.endswith("inception.jpg")
        assert record.popularity == 0.0

    async def test_na_placeholders_become_empty(self) -> None:
        provider, _ = _make_provider(_json(_BREAKING_BAD))
        outcome = await provider.lookup("series", "Breaking Bad", None)

        record = outcome.record
        assert record is not None
        assert record.year == 2008
        assert record.runtime == ""
        assert record.director == ""
        assert record.overview == ""
        assert record.poster == ""
        assert record.metascore == 0
        assert record.rating10 == 9.5

    async def test_not_found_sentinel(self) -> None:
        provider, _ = _make_provider(_json(_NOT_FOUND))
        outcome = await provider.lookup("movie", "Nope", None)

        assert outcome.status == "not_found"
        assert outcome.reason == "Movie not found!"
        assert outcome.record is None


class TestDegradation:
    async def test_disabled_without_api_key(self) -> None:
        provider, seen = _make_provider(_json(_INCEPTION), api_key=None)
        outcome = await provider.lookup("movie", "Inception", 2010)

        assert outcome.status == "disabled"
        assert seen == []

    async def test_http_error(self) -> None:
        provider, _ = _make_provider(_json({}, 503))
        outcome = await provider.lookup("movie", "Inception", 2010)

        assert outcome.status == "failed"
        assert outcome.reason == "http_503"

    async def test_malformed_payload(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="{truncated")

        provider, _ = _make_provider(_handler)
        outcome = await provider.lookup("movie", "Inception", 2010)

        assert outcome.status == "failed"
        assert outcome.reason == "malformed_payload"
