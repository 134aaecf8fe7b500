"""Shared base class for httpx-based rating providers.

Holds what both provider clients need: the injected client, the
credential check, one bounded JSON fetch and the conversion of every
failure mode into a ``failed`` outcome. Subclasses only build the
request and map the payload.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import structlog

from reelscore.domain.entities.enrichment import (
    ContentType,
    ProviderName,
    ProviderOutcome,
)
from reelscore.infrastructure.common.normalize import to_year

DEFAULT_TIMEOUT_SECONDS = 6.5


class ProviderRequestError(Exception):
    """A provider request produced no usable payload."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class HttpxProviderBase:
    """Shared base for rating provider clients.

    Subclasses **must** set ``name`` and override ``_lookup()``.

    ``lookup()`` never raises: a missing API key yields ``disabled``, and
    timeouts, HTTP errors, transport errors and malformed JSON yield
    ``failed`` with a short machine-readable reason.
    """

    name: ProviderName

    def __init__(
        self,
        *,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._http = http_client
        self._timeout = timeout_seconds
        self._log = structlog.get_logger(f"reelscore.providers.{self.name}")

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def lookup(
        self, content_type: ContentType, title: str, year: Any = None
    ) -> ProviderOutcome:
        """Look up *title*, bounded by the per-call timeout."""
        if not self.enabled:
            return ProviderOutcome.disabled(self.name)
        clean_title = str(title or "").strip()
        if not clean_title:
            return ProviderOutcome.not_found(self.name, "empty_title")

        try:
            return await asyncio.wait_for(
                self._lookup(content_type, clean_title, to_year(year)),
                timeout=self._timeout,
            )
        except TimeoutError:
            reason = "timeout"
        except ProviderRequestError as exc:
            reason = exc.reason

        self._log.warning(
            f"{self.name}_lookup_failed",
            content_type=content_type,
            title=clean_title,
            reason=reason,
        )
        return ProviderOutcome.failed(self.name, reason)

    async def _lookup(
        self, content_type: ContentType, title: str, year: int
    ) -> ProviderOutcome:
        raise NotImplementedError

    async def _fetch_json(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        """GET *url* and return the decoded JSON object.

        Raises:
            ProviderRequestError: For any response that is not a 2xx JSON object.
        """
        try:
            resp = await self._http.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            raise ProviderRequestError("timeout") from exc
        except httpx.HTTPError as exc:
            self._log.debug(f"{self.name}_network_error", error=str(exc))
            raise ProviderRequestError("network_error") from exc

        if not resp.is_success:
            raise ProviderRequestError(f"http_{resp.status_code}")

        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ProviderRequestError("malformed_payload") from exc
        if not isinstance(data, dict):
            raise ProviderRequestError("malformed_payload")
        return data
