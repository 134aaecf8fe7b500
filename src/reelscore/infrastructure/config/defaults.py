"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "reelscore",
    "environment": "dev",
    "http": {
        "timeout_seconds": 6.5,
        "user_agent": "reelscore/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "providers": {
        "tmdb_api_key": None,
        "omdb_api_key": None,
    },
    "cache": {
        "backend": "memory",
        "dir": "./.cache/reelscore",
        "ttl_ms": 21_600_000,
        "max_entries": 5000,
    },
    "enrichment": {
        "max_batch_size": 120,
    },
}
