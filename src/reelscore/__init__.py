"""reelscore - metadata enrichment and smart scoring service."""

__version__ = "0.1.0"
