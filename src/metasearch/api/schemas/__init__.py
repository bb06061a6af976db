"""Pydantic schemas for API request/response models."""

from .common import ErrorResponse, HealthResponse
from .search import (
    CacheFlushResponse,
    CacheStatsResponse,
    EnhancedSearchOptionsSchema,
    EnhancedSearchRequest,
    EnhancedSearchResponseSchema,
    EnrichedContentSchema,
    EnrichedResultSchema,
    HeadingSchema,
    SearchMeta,
    SearchRequest,
    SearchResponse,
    SearchResultSchema,
    TrendingResponse,
)

__all__ = [
    "CacheFlushResponse",
    "CacheStatsResponse",
    "EnhancedSearchOptionsSchema",
    "EnhancedSearchRequest",
    "EnhancedSearchResponseSchema",
    "EnrichedContentSchema",
    "EnrichedResultSchema",
    "ErrorResponse",
    "HealthResponse",
    "HeadingSchema",
    "SearchMeta",
    "SearchRequest",
    "SearchResponse",
    "SearchResultSchema",
    "TrendingResponse",
]
