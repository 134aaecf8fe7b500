"""Pydantic configuration models with validation."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["memory", "disk"]

_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


def _strip_key(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/providers/enrichment).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="reelscore", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=6.5,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-call timeout for outbound provider requests.",
    )
    http_user_agent: str = Field(
        default="reelscore/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Rating providers (YAML section: providers.*). Blank key = provider disabled.
    tmdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "tmdb_api_key",
            AliasPath("providers", "tmdb_api_key"),
        ),
        description="TMDB API key (search-style provider).",
    )
    omdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "omdb_api_key",
            AliasPath("providers", "omdb_api_key"),
        ),
        description="OMDb API key (title-lookup provider).",
    )

    # Cache (YAML section: cache.*)
    cache_backend: CacheBackendName = Field(
        default="memory",
        validation_alias=AliasChoices(
            "cache_backend",
            AliasPath("cache", "backend"),
        ),
        description="Enrichment cache backend: 'memory' or 'disk' (diskcache).",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/reelscore"),
        validation_alias=AliasChoices(
            "cache_dir",
            AliasPath("cache", "dir"),
        ),
        description="Cache directory (disk backend only).",
    )
    cache_ttl_ms: int = Field(
        default=21_600_000,
        validation_alias=AliasChoices(
            "cache_ttl_ms",
            AliasPath("cache", "ttl_ms"),
        ),
        description="Enrichment cache TTL in milliseconds (default 6h).",
    )
    cache_max_entries: int = Field(
        default=5000,
        validation_alias=AliasChoices(
            "cache_max_entries",
            AliasPath("cache", "max_entries"),
        ),
        description="Max cached enrichment results (oldest-inserted evicted).",
    )

    # Enrichment (YAML section: enrichment.*)
    max_batch_size: int = Field(
        default=120,
        validation_alias=AliasChoices(
            "max_batch_size",
            AliasPath("enrichment", "max_batch_size"),
        ),
        description="Max items per enrichment batch (bounds provider fan-out).",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("tmdb_api_key", "omdb_api_key", mode="before")
    @classmethod
    def _validate_api_keys(cls, v: Any) -> Optional[str]:
        return _strip_key(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("cache_ttl_ms")
    @classmethod
    def _validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_ttl_ms must be > 0")
        return v

    @field_validator("cache_max_entries", "max_batch_size")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_ms / 1000.0

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        API keys are reported as set/unset only.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "providers": {
                "tmdb_enabled": bool(self.tmdb_api_key),
                "omdb_enabled": bool(self.omdb_api_key),
            },
            "cache": {
                "backend": self.cache_backend,
                "dir": str(self.cache_dir),
                "ttl_ms": self.cache_ttl_ms,
                "max_entries": self.cache_max_entries,
            },
            "enrichment": {"max_batch_size": self.max_batch_size},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read REELSCORE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - REELSCORE_LOG_LEVEL
    - REELSCORE_HTTP_TIMEOUT_SECONDS
    - REELSCORE_CACHE_BACKEND
    - TMDB_API_KEY / OMDB_API_KEY / METADATA_CACHE_TTL_MS (unprefixed, also accepted)
    """

    model_config = SettingsConfigDict(
        env_prefix="REELSCORE_",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    tmdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REELSCORE_TMDB_API_KEY", "TMDB_API_KEY"),
    )
    omdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REELSCORE_OMDB_API_KEY", "OMDB_API_KEY"),
    )

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_ttl_ms: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(
            "REELSCORE_CACHE_TTL_MS", "METADATA_CACHE_TTL_MS"
        ),
    )
    cache_max_entries: Optional[int] = None

    max_batch_size: Optional[int] = None

    @field_validator("cache_ttl_ms", mode="before")
    @classmethod
    def _validate_env_ttl(cls, v: Any) -> Optional[int]:
        """Non-positive or unparseable TTLs fall back to the lower layers."""
        if v is None:
            return None
        match = _LEADING_INT_RE.match(str(v))
        if not match:
            return None
        ttl = int(match.group(0))
        return ttl if ttl > 0 else None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
