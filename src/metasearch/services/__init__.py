"""Service layer for metasearch.

Caching, fallback handling, aggregation, enrichment and configuration.
"""

from .cache_service import CacheEntry, SearchCache
from .config_service import ConfigService
from .enrichment_service import EnrichmentService
from .fallback import (
    FallbackChain,
    FallbackStrategy,
    RetryingSourceStrategy,
    SingleAttemptStrategy,
    create_default_chain,
)
from .search_service import SearchService, generate_degraded_results

__all__ = [
    "CacheEntry",
    "ConfigService",
    "EnrichmentService",
    "FallbackChain",
    "FallbackStrategy",
    "RetryingSourceStrategy",
    "SearchCache",
    "SearchService",
    "SingleAttemptStrategy",
    "create_default_chain",
    "generate_degraded_results",
]
