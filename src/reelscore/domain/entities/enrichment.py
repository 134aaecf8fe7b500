"""Domain entities for metadata enrichment and smart scoring.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ContentType = Literal["movie", "series"]
ProviderName = Literal["tmdb", "omdb"]
LookupStatus = Literal["found", "not_found", "failed", "disabled"]

CONTENT_TYPES: tuple[ContentType, ...] = ("movie", "series")


@dataclass(frozen=True)
class EnrichmentItem:
    """A locally-known title submitted for enrichment.

    Numeric fields are kept raw (provider playlists ship strings like
    ``"8.1"`` or ``"2010"``); normalization happens where they are used.
    """

    id: str
    title: str = ""
    year: int | str | None = None
    local_rating: float | str | None = None  # 0-10 scale
    local_votes: int | str | None = None


@dataclass(frozen=True)
class ProviderRecord:
    """Common shape for a single provider match.

    Fields a provider does not supply stay at their zero/empty default.
    """

    provider: ProviderName
    id: str = ""
    title: str = ""
    rating10: float = 0.0  # 0 = no rating
    votes: int = 0
    popularity: float = 0.0
    year: int = 0  # 0 = unknown
    overview: str = ""
    poster: str = ""
    backdrop: str = ""
    metascore: int = 0
    runtime: str = ""
    genre: str = ""
    director: str = ""
    actors: str = ""


@dataclass(frozen=True)
class ProviderOutcome:
    """Result of one provider lookup.

    Only ``found`` carries a record. ``not_found``, ``failed`` and
    ``disabled`` all count as "no data" for scoring; ``reason`` is kept
    for logs and metrics.
    """

    provider: ProviderName
    status: LookupStatus
    record: ProviderRecord | None = None
    reason: str = ""

    @classmethod
    def found(cls, record: ProviderRecord) -> ProviderOutcome:
        return cls(provider=record.provider, status="found", record=record)

    @classmethod
    def not_found(cls, provider: ProviderName, reason: str = "") -> ProviderOutcome:
        return cls(provider=provider, status="not_found", reason=reason)

    @classmethod
    def failed(cls, provider: ProviderName, reason: str) -> ProviderOutcome:
        return cls(provider=provider, status="failed", reason=reason)

    @classmethod
    def disabled(cls, provider: ProviderName) -> ProviderOutcome:
        return cls(provider=provider, status="disabled")

    @property
    def available(self) -> bool:
        return self.status == "found" and self.record is not None


@dataclass(frozen=True)
class RatingSources:
    """Raw per-source ratings (0 = source had no rating)."""

    local: float = 0.0
    tmdb: float = 0.0
    omdb: float = 0.0


@dataclass(frozen=True)
class ProviderCoverage:
    """Which sources contributed any signal."""

    local: bool = False
    tmdb: bool = False
    omdb: bool = False


@dataclass(frozen=True)
class SmartScore:
    """Blended quality score for one title."""

    content_type: ContentType
    score: float  # [0, 1], 6 decimals
    rating10: float  # [0, 10], 2 decimals
    rating_percent: int  # [0, 100]
    votes: int
    year: int
    rating_sources: RatingSources = field(default_factory=RatingSources)
    providers: ProviderCoverage = field(default_factory=ProviderCoverage)


@dataclass(frozen=True)
class MergedMetadata:
    """Display metadata merged from both providers."""

    plot: str = ""
    poster: str = ""
    backdrop: str = ""
    genre: str = ""
    director: str = ""
    cast: str = ""
    runtime: str = ""


@dataclass(frozen=True)
class EnrichmentResult:
    """Fully computed enrichment for one item (the unit stored in cache)."""

    smart: SmartScore
    tmdb: ProviderRecord | None = None
    omdb: ProviderRecord | None = None
    merged: MergedMetadata = field(default_factory=MergedMetadata)


@dataclass(frozen=True)
class ProviderStatus:
    """Whether each provider is configured at all (has credentials)."""

    tmdb_enabled: bool = False
    omdb_enabled: bool = False


@dataclass(frozen=True)
class EnrichmentResponse:
    """Batch enrichment result keyed by item id."""

    provider_status: ProviderStatus
    items: dict[str, EnrichmentResult] = field(default_factory=dict)


class EnrichmentError(Exception):
    """Base error for enrichment requests."""


class InvalidContentTypeError(EnrichmentError):
    def __init__(self, content_type: Any) -> None:
        super().__init__(f"type must be movie or series, got {content_type!r}")
        self.content_type = content_type


class EmptyBatchError(EnrichmentError):
    def __init__(self) -> None:
        super().__init__("items must contain at least one entry")
