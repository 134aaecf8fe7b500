from .enrichment import (
    CONTENT_TYPES,
    ContentType,
    EmptyBatchError,
    EnrichmentError,
    EnrichmentItem,
    EnrichmentResponse,
    EnrichmentResult,
    InvalidContentTypeError,
    LookupStatus,
    MergedMetadata,
    ProviderCoverage,
    ProviderName,
    ProviderOutcome,
    ProviderRecord,
    ProviderStatus,
    RatingSources,
    SmartScore,
)

__all__ = [
    "CONTENT_TYPES",
    "ContentType",
    "EmptyBatchError",
    "EnrichmentError",
    "EnrichmentItem",
    "EnrichmentResponse",
    "EnrichmentResult",
    "InvalidContentTypeError",
    "LookupStatus",
    "MergedMetadata",
    "ProviderCoverage",
    "ProviderName",
    "ProviderOutcome",
    "ProviderRecord",
    "ProviderStatus",
    "RatingSources",
    "SmartScore",
]
