"""Normalization helpers for titles, years and numeric provider fields.

Pure functions, total over arbitrary input: bad values collapse to 0 or
"" instead of raising.
"""

from __future__ import annotations

import math
import re
from typing import Any

MIN_YEAR = 1900
MAX_YEAR = 2100

_QUOTES_RE = re.compile(r"['\"`]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")
_NUMERIC_CHARS_RE = re.compile(r"[^0-9.\-]")
_FLOAT_PREFIX_RE = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")
_NON_DIGIT_RE = re.compile(r"\D")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def normalize_title(title: Any) -> str:
    """Canonical comparison form of a title (cache keys only, never display).

    Lower-cases, drops quote characters and collapses every run of
    non-alphanumeric characters into a single space.
    """
    text = _text(title).strip().lower()
    text = _QUOTES_RE.sub("", text)
    text = _NON_ALNUM_RE.sub(" ", text)
    return text.strip()


def to_year(value: Any) -> int:
    """Parse the leading integer of *value* as a year.

    Returns 0 ("unknown") unless the result lies in 1900..2100.

    Examples:
        >>> to_year("2010")
        2010
        >>> to_year("1899")
        0
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        value = int(value)
    match = _LEADING_INT_RE.match(_text(value).strip())
    if not match:
        return 0
    year = int(match.group(0))
    return year if MIN_YEAR <= year <= MAX_YEAR else 0


def number_or_zero(value: Any) -> float:
    """Parse a loosely formatted number such as "1,234" or " 7.5 ".

    Everything except digits, ``.`` and ``-`` is stripped first; the
    longest valid float prefix is used. Non-finite results yield 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    raw = _NUMERIC_CHARS_RE.sub("", _text(value))
    match = _FLOAT_PREFIX_RE.match(raw)
    if not match:
        return 0.0
    parsed = float(match.group(0))
    return parsed if math.isfinite(parsed) else 0.0


def votes_or_zero(value: Any) -> int:
    """Vote counts are non-negative integers."""
    return max(0, math.floor(number_or_zero(value)))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalize_votes(votes: Any) -> float:
    """Confidence curve for a vote count, saturating near 1,000,000 votes."""
    parsed = number_or_zero(votes)
    if parsed <= 0:
        return 0.0
    return clamp(math.log10(parsed + 1) / 6, 0.0, 1.0)


def normalize_popularity(popularity: Any) -> float:
    """Saturating popularity curve, 0.5 at popularity 80."""
    parsed = number_or_zero(popularity)
    if parsed <= 0:
        return 0.0
    return parsed / (parsed + 80)


def year_from_date(value: Any) -> int:
    """Year of an ISO date string such as TMDB ``release_date``."""
    return to_year(_text(value)[:4])


def year_from_range(value: Any) -> int:
    """First year of an OMDb ``Year`` field ("2008", "2008–2013", "2019–")."""
    return to_year(_NON_DIGIT_RE.split(_text(value), maxsplit=1)[0])


def cache_key(content_type: str, title: Any, year: Any) -> str:
    """Cache key: ``<type>:<normalized title>:<year or 'na'>``."""
    return f"{content_type}:{normalize_title(title)}:{to_year(year) or 'na'}"
