"""Core data model for metasearch.

Result processing lives in ``metasearch.core.results`` and is imported from
there directly; it depends on ``metasearch.config_schema``, which itself
imports ``metasearch.core.constants``.
"""

from .models import (
    CacheStats,
    EnhancedSearchOptions,
    EnhancedSearchResponse,
    EnrichedContent,
    EnrichedResult,
    EnrichmentOutcome,
    Heading,
    NormalizedResult,
    PageContent,
    RawResult,
    SearchDepth,
)

__all__ = [
    "CacheStats",
    "EnhancedSearchOptions",
    "EnhancedSearchResponse",
    "EnrichedContent",
    "EnrichedResult",
    "EnrichmentOutcome",
    "Heading",
    "NormalizedResult",
    "PageContent",
    "RawResult",
    "SearchDepth",
]
