from .cache import EnrichmentCachePort
from .rating_provider import RatingProviderPort

__all__ = [
    "EnrichmentCachePort",
    "RatingProviderPort",
]
