"""Common infrastructure utilities."""

from __future__ import annotations

from .normalize import (
    cache_key,
    normalize_popularity,
    normalize_title,
    normalize_votes,
    number_or_zero,
    to_year,
)

__all__ = [
    "cache_key",
    "normalize_popularity",
    "normalize_title",
    "normalize_votes",
    "number_or_zero",
    "to_year",
]
