from .enrich_metadata import EnrichMetadataUseCase

__all__ = ["EnrichMetadataUseCase"]
