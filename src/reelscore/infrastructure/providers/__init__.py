"""Rating provider clients (TMDB search, OMDb lookup)."""

from .base import HttpxProviderBase, ProviderRequestError
from .omdb import HttpxOmdbProvider
from .tmdb import HttpxTmdbProvider

__all__ = [
    "HttpxOmdbProvider",
    "HttpxProviderBase",
    "HttpxTmdbProvider",
    "ProviderRequestError",
]
