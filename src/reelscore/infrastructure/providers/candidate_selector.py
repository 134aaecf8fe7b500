"""Best-match selection among TMDB search candidates.

Pure transformation logic, no I/O. TMDB search can return several
titles for one query (remakes, same-name series); the winner is the
candidate with the best blend of rating, vote count and popularity,
penalized by its distance from the requested year.
"""

from __future__ import annotations

import math
from typing import Any

from reelscore.domain.entities.enrichment import ContentType
from reelscore.infrastructure.common.normalize import (
    number_or_zero,
    to_year,
    year_from_date,
)

MAX_CANDIDATES = 8
MAX_YEAR_PENALTY = 10
UNKNOWN_YEAR_PENALTY = 4

_W_QUALITY = 0.9
_W_VOTES = 1.8
_W_POPULARITY = 2.1
_W_YEAR = 0.6


def candidate_year(row: dict[str, Any], content_type: ContentType) -> int:
    """Release year of a TMDB row (``first_air_date`` for series)."""
    field = "first_air_date" if content_type == "series" else "release_date"
    return year_from_date(row.get(field))


def score_candidate(
    row: dict[str, Any],
    requested_year: int,
    content_type: ContentType,
) -> float:
    """Match score for one candidate.

    Unknown years on either side cost a flat penalty of 4, so a
    confidently wrong year (5+ off) ranks below an unknown one.
    """
    year = candidate_year(row, content_type)
    if requested_year > 0 and year > 0:
        year_penalty = min(MAX_YEAR_PENALTY, abs(requested_year - year))
    else:
        year_penalty = UNKNOWN_YEAR_PENALTY

    quality = number_or_zero(row.get("vote_average"))
    votes = number_or_zero(row.get("vote_count"))
    popularity = number_or_zero(row.get("popularity"))
    return (
        quality * _W_QUALITY
        + math.log10(max(votes, 0) + 1) * _W_VOTES
        + math.log10(max(popularity, 0) + 1) * _W_POPULARITY
        - year_penalty * _W_YEAR
    )


def choose_candidate(
    results: Any,
    requested_year: Any,
    content_type: ContentType,
) -> dict[str, Any] | None:
    """Pick the best of the first eight candidates, or None.

    Ties keep the provider's original order (first wins).
    """
    if not isinstance(results, list) or not results:
        return None

    target_year = to_year(requested_year)
    best: dict[str, Any] | None = None
    best_score = -math.inf
    for row in results[:MAX_CANDIDATES]:
        if not isinstance(row, dict):
            continue
        score = score_candidate(row, target_year, content_type)
        if score > best_score:
            best, best_score = row, score
    return best
