"""Search endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from metasearch.api.deps import SearchServiceDep
from metasearch.api.schemas import (
    EnhancedSearchRequest,
    EnhancedSearchResponseSchema,
    ErrorResponse,
    SearchMeta,
    SearchRequest,
    SearchResponse,
    TrendingResponse,
)
from metasearch.core.constants import TRENDING_QUERIES
from metasearch.core.models import EnhancedSearchOptions, utc_now
from metasearch.core.results import categorize_results

logger = logging.getLogger(__name__)

router = APIRouter()

QUERY_REQUIRED_RESPONSES = {400: {"model": ErrorResponse}}


def _require_query(query: Optional[str]) -> str:
    if query is None or not query.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    return query


@router.post(
    "/search", response_model=SearchResponse, responses=QUERY_REQUIRED_RESPONSES
)
async def search(body: SearchRequest, search_service: SearchServiceDep) -> SearchResponse:
    """Aggregate results from all search engines."""
    query = _require_query(body.query)
    logger.info(f"Search request: {query!r}")

    results = await search_service.search(query)
    response = {
        "results": [r.to_dict() for r in results],
        "meta": SearchMeta(
            query=query,
            count=len(results),
            timestamp=utc_now(),
            degraded=any(r.degraded for r in results),
        ),
    }
    if body.categorize:
        response["categories"] = {
            category: [r.to_dict() for r in items]
            for category, items in categorize_results(results).items()
        }
    return SearchResponse(**response)


@router.post(
    "/enhanced-search",
    response_model=EnhancedSearchResponseSchema,
    responses=QUERY_REQUIRED_RESPONSES,
)
async def enhanced_search(
    body: EnhancedSearchRequest, search_service: SearchServiceDep
) -> EnhancedSearchResponseSchema:
    """Search and attach scraped page content to the top results."""
    query = _require_query(body.query)
    logger.info(f"Enhanced search request: {query!r} ({body.options.depth.value})")

    options = EnhancedSearchOptions(
        fetch_content=body.options.fetch_content,
        max_content_results=body.options.max_content_results,
        depth=body.options.depth,
    )
    response = await search_service.enhanced_search(query, options)

    return EnhancedSearchResponseSchema(
        query=response.query,
        results=[r.to_dict() for r in response.results],
        enriched_results=[r.to_dict() for r in response.enriched_results],
        error=response.error,
        timestamp=utc_now(),
    )


@router.get("/trending", response_model=TrendingResponse)
async def trending() -> TrendingResponse:
    """Return a fixed list of trending queries."""
    return TrendingResponse(trending=list(TRENDING_QUERIES))
