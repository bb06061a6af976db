"""Dependency injection for FastAPI routes.

Every provider is an ``lru_cache`` singleton, so one cache and one search
service exist per process and are shared by all requests.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from metasearch.config_schema import MetasearchConfig
from metasearch.services import (
    ConfigService,
    EnrichmentService,
    SearchCache,
    SearchService,
)
from metasearch.sources import create_default_sources


@lru_cache
def get_config_service() -> ConfigService:
    """Get the singleton ConfigService instance."""
    return ConfigService()


@lru_cache
def get_config() -> MetasearchConfig:
    """Get the configuration loaded at startup."""
    return get_config_service().load()


@lru_cache
def get_cache() -> SearchCache:
    """Get the singleton SearchCache shared by search and enrichment."""
    config = get_config()
    return SearchCache(
        default_ttl=config.cache.ttl_seconds,
        copy_values=config.cache.copy_values,
    )


@lru_cache
def get_enrichment_service() -> EnrichmentService:
    """Get the singleton EnrichmentService instance."""
    config = get_config()
    return EnrichmentService(
        cache=get_cache(),
        config=config.enrichment,
        content_ttl=config.cache.content_ttl_seconds,
    )


@lru_cache
def get_search_service() -> SearchService:
    """Get the singleton SearchService instance."""
    config = get_config()
    return SearchService(
        sources=create_default_sources(config.search),
        cache=get_cache(),
        enrichment_service=get_enrichment_service(),
        config=config.search,
        scoring=config.scoring,
        search_ttl=config.cache.ttl_seconds,
    )


def clear_providers() -> None:
    """Drop every cached singleton (used on shutdown and in tests)."""
    get_search_service.cache_clear()
    get_enrichment_service.cache_clear()
    get_cache.cache_clear()
    get_config.cache_clear()
    get_config_service.cache_clear()


# Type aliases for dependency injection
CacheDep = Annotated[SearchCache, Depends(get_cache)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
