"""Port for external rating providers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from reelscore.domain.entities.enrichment import (
    ContentType,
    ProviderName,
    ProviderOutcome,
)


@runtime_checkable
class RatingProviderPort(Protocol):
    """Async interface for a single rating provider lookup.

    Implementations never raise: timeouts, HTTP errors and malformed
    payloads come back as a ``failed`` outcome.
    """

    name: ProviderName

    @property
    def enabled(self) -> bool:
        """True when the provider has credentials configured."""
        ...

    async def lookup(
        self, content_type: ContentType, title: str, year: Any = None
    ) -> ProviderOutcome:
        """Look up one title. Returns the outcome of a single request."""
        ...
