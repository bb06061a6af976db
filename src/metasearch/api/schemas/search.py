"""Search-related schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from metasearch.core.models import SearchDepth


class SearchRequest(BaseModel):
    """Request body for the search endpoint.

    ``query`` is optional here so a missing query gets the same 400 as a
    blank one.
    """

    query: Optional[str] = None
    categorize: bool = False


class SearchResultSchema(BaseModel):
    """A scored search result."""

    title: str
    url: str
    snippet: str
    relevance_score: float
    source_domain: str
    source_tag: str
    favicon_url: str
    fetched_at: datetime
    degraded: bool = False


class SearchMeta(BaseModel):
    """Metadata about a search response."""

    query: str
    count: int
    timestamp: datetime
    degraded: bool = False


class SearchResponse(BaseModel):
    """Response for the search endpoint."""

    results: List[SearchResultSchema]
    meta: SearchMeta
    categories: Optional[Dict[str, List[SearchResultSchema]]] = None


class EnhancedSearchOptionsSchema(BaseModel):
    """Enrichment options."""

    fetch_content: bool = True
    max_content_results: int = Field(3, ge=0, le=10)
    depth: SearchDepth = SearchDepth.MODERATE


class EnhancedSearchRequest(BaseModel):
    """Request body for the enhanced search endpoint."""

    query: Optional[str] = None
    options: EnhancedSearchOptionsSchema = Field(
        default_factory=EnhancedSearchOptionsSchema
    )


class HeadingSchema(BaseModel):
    """A page heading."""

    level: int
    text: str


class EnrichedContentSchema(BaseModel):
    """Content scraped from a result's page."""

    summary: str
    headings: List[HeadingSchema] = Field(default_factory=list)
    extracted_dates: List[str] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)
    title: str = ""
    full_content: Optional[str] = None


class EnrichedResultSchema(SearchResultSchema):
    """A search result with its page content attached."""

    enhanced_content: EnrichedContentSchema


class EnhancedSearchResponseSchema(BaseModel):
    """Response for the enhanced search endpoint."""

    query: str
    results: List[SearchResultSchema]
    enriched_results: List[EnrichedResultSchema]
    error: Optional[str] = None
    timestamp: datetime


class TrendingResponse(BaseModel):
    """Response for the trending endpoint."""

    trending: List[str]


class CacheStatsResponse(BaseModel):
    """Cache statistics."""

    hits: int
    misses: int
    sets: int
    item_count: int
    keys: List[str]


class CacheFlushResponse(BaseModel):
    """Response after flushing the cache."""

    message: str
