"""Cache inspection endpoints."""

from fastapi import APIRouter

from metasearch.api.deps import CacheDep
from metasearch.api.schemas import CacheFlushResponse, CacheStatsResponse

router = APIRouter()


@router.get("/stats", response_model=CacheStatsResponse)
async def cache_stats(cache: CacheDep) -> CacheStatsResponse:
    """Get cache hit/miss counters and live keys."""
    stats = cache.stats()
    return CacheStatsResponse(
        hits=stats.hits,
        misses=stats.misses,
        sets=stats.sets,
        item_count=stats.item_count,
        keys=stats.keys,
    )


@router.delete("", response_model=CacheFlushResponse)
async def flush_cache(cache: CacheDep) -> CacheFlushResponse:
    """Remove every cached search and page."""
    cache.flush()
    return CacheFlushResponse(message="Cache flushed")
