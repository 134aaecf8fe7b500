"""Smart score aggregation across local, TMDB and OMDb ratings.

Pure transformation logic, no I/O. Produces one normalized quality
score in [0, 1] from a fixed-weight blend of:

    rating      0.34   vote-confidence weighted average of source ratings
    votes       0.24   confidence curve of the summed vote count
    popularity  0.20   TMDB popularity, saturating
    recency     0.10   linear decay to 0 over 30 years
    consensus   0.08   agreement between rating sources
    coverage    0.04   share of the three sources with any signal
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from reelscore.domain.entities.enrichment import (
    ContentType,
    EnrichmentItem,
    MergedMetadata,
    ProviderCoverage,
    ProviderRecord,
    RatingSources,
    SmartScore,
)
from reelscore.infrastructure.common.normalize import (
    clamp,
    normalize_popularity,
    normalize_votes,
    number_or_zero,
    to_year,
    votes_or_zero,
)

W_RATING = 0.34
W_VOTES = 0.24
W_POPULARITY = 0.2
W_RECENCY = 0.1
W_CONSENSUS = 0.08
W_COVERAGE = 0.04

UNKNOWN_AGE_YEARS = 35
RECENCY_HORIZON_YEARS = 30
CONSENSUS_SPREAD = 5.0
CONSENSUS_SINGLE_SOURCE = 0.62
CONSENSUS_NO_SOURCE = 0.45
SOURCE_COUNT = 3


@dataclass(frozen=True)
class _SourceWeight:
    """(base, confidence slope) for one rating source."""

    base: float
    per_confidence: float

    def weight(self, confidence: float) -> float:
        return self.base + confidence * self.per_confidence


# External providers are trusted more than the local playlist rating.
LOCAL_WEIGHT = _SourceWeight(1.05, 0.75)
TMDB_WEIGHT = _SourceWeight(1.2, 1.1)
OMDB_WEIGHT = _SourceWeight(1.25, 1.15)


def _current_year() -> int:
    return datetime.now(timezone.utc).year


def weighted_rating(sources: list[tuple[float, float]]) -> float:
    """Weighted mean of ``(rating, weight)`` pairs; 0 when empty."""
    total_weight = sum(weight for _, weight in sources)
    if total_weight <= 0:
        return 0.0
    return sum(rating * weight for rating, weight in sources) / total_weight


def consensus(ratings: list[float]) -> float:
    """Agreement between available ratings.

    Two or more ratings: 1 at zero spread, 0 at a spread of 5 points or
    more. A single rating scores 0.62 and no rating 0.45, so missing data
    alone is not punished as hard as disagreement.
    """
    if len(ratings) >= 2:
        spread = max(ratings) - min(ratings)
        return max(0.0, 1 - spread / CONSENSUS_SPREAD)
    if len(ratings) == 1:
        return CONSENSUS_SINGLE_SOURCE
    return CONSENSUS_NO_SOURCE


def recency(year: int, now_year: int) -> float:
    age = max(0, now_year - year) if year > 0 else UNKNOWN_AGE_YEARS
    return clamp(1 - age / RECENCY_HORIZON_YEARS, 0.0, 1.0)


def build_smart_score(
    content_type: ContentType,
    item: EnrichmentItem,
    tmdb: ProviderRecord | None,
    omdb: ProviderRecord | None,
    *,
    now_year: int | None = None,
) -> SmartScore:
    """Blend local data and both provider records into a SmartScore.

    Args:
        content_type: ``"movie"`` or ``"series"`` (echoed in the result).
        item: The locally-known title (rating, votes, declared year).
        tmdb: TMDB match or None.
        omdb: OMDb match or None.
        now_year: Reference year for recency (defaults to the current UTC year).
    """
    if now_year is None:
        now_year = _current_year()

    local_rating = number_or_zero(item.local_rating)
    local_votes = votes_or_zero(item.local_votes)
    tmdb_rating = tmdb.rating10 if tmdb else 0.0
    omdb_rating = omdb.rating10 if omdb else 0.0
    tmdb_votes = tmdb.votes if tmdb else 0
    omdb_votes = omdb.votes if omdb else 0

    weighted: list[tuple[float, float]] = []
    if local_rating > 0:
        weighted.append(
            (local_rating, LOCAL_WEIGHT.weight(normalize_votes(local_votes)))
        )
    if tmdb_rating > 0:
        weighted.append((tmdb_rating, TMDB_WEIGHT.weight(normalize_votes(tmdb_votes))))
    if omdb_rating > 0:
        weighted.append((omdb_rating, OMDB_WEIGHT.weight(normalize_votes(omdb_votes))))

    rating10 = weighted_rating(weighted)
    if not math.isfinite(rating10):
        rating10 = 0.0
    rating_percent = int(math.floor(clamp(rating10 * 10 + 0.5, 0, 100)))
    rating_norm = clamp(rating10 / 10, 0.0, 1.0)

    votes_combined = local_votes + tmdb_votes + omdb_votes
    votes_norm = normalize_votes(votes_combined)
    popularity_norm = normalize_popularity(tmdb.popularity if tmdb else 0)

    year = (
        (tmdb.year if tmdb else 0)
        or (omdb.year if omdb else 0)
        or to_year(item.year)
    )
    recency_norm = recency(year, now_year)

    consensus_norm = consensus([rating for rating, _ in weighted])

    # Local votes without a rating count for coverage, not for consensus.
    has_local = local_rating > 0 or local_votes > 0
    covered = sum((has_local, tmdb is not None, omdb is not None))
    coverage_norm = covered / SOURCE_COUNT

    score = (
        rating_norm * W_RATING
        + votes_norm * W_VOTES
        + popularity_norm * W_POPULARITY
        + recency_norm * W_RECENCY
        + consensus_norm * W_CONSENSUS
        + coverage_norm * W_COVERAGE
    )

    return SmartScore(
        content_type=content_type,
        score=round(clamp(score, 0.0, 1.0), 6),
        rating10=round(rating10, 2),
        rating_percent=rating_percent,
        votes=votes_combined,
        year=year,
        rating_sources=RatingSources(
            local=max(local_rating, 0.0),
            tmdb=max(tmdb_rating, 0.0),
            omdb=max(omdb_rating, 0.0),
        ),
        providers=ProviderCoverage(
            local=has_local,
            tmdb=tmdb is not None,
            omdb=omdb is not None,
        ),
    )


def build_merged_metadata(
    tmdb: ProviderRecord | None, omdb: ProviderRecord | None
) -> MergedMetadata:
    """Display fields, preferring TMDB artwork/overview and OMDb credits."""
    tmdb_overview = tmdb.overview if tmdb else ""
    omdb_plot = omdb.overview if omdb else ""
    tmdb_poster = tmdb.poster if tmdb else ""
    omdb_poster = omdb.poster if omdb else ""
    return MergedMetadata(
        plot=(tmdb_overview or omdb_plot).strip(),
        poster=(tmdb_poster or omdb_poster).strip(),
        backdrop=(tmdb.backdrop if tmdb else "").strip(),
        genre=(omdb.genre if omdb else "").strip(),
        director=(omdb.director if omdb else "").strip(),
        cast=(omdb.actors if omdb else "").strip(),
        runtime=(omdb.runtime if omdb else "").strip(),
    )
