"""Search aggregation service.

Orchestrates one search request:

    cache check -> parallel fan-out to all sources -> fallback chain if empty
    -> normalize -> deduplicate -> score -> top-K -> cache write

When every source and every fallback comes back empty the service returns a
small set of synthetic "degraded" results pointing at major search engines.
Those are never cached.
"""

import asyncio
import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence
from urllib.parse import quote

from metasearch.config_schema import ScoringConfig, SearchConfig
from metasearch.core.constants import (
    DEFINITION_DOMAINS,
    EMERGENCY_NOTICE_URL,
    EMERGENCY_SOURCE_TAG,
    FAVICON_URL_TEMPLATE,
    HOW_TO_DOMAINS,
    NEWS_DOMAINS,
    SEARCH_KEY_PREFIX,
)
from metasearch.core.models import (
    EnhancedSearchOptions,
    EnhancedSearchResponse,
    EnrichedContent,
    EnrichedResult,
    NormalizedResult,
    RawResult,
    SearchDepth,
    utc_now,
)
from metasearch.core.results import (
    deduplicate_results,
    filter_by_domains,
    normalize_results,
    score_results,
)
from metasearch.services.cache_service import SearchCache
from metasearch.services.enrichment_service import EnrichmentService
from metasearch.services.fallback import FallbackChain, create_default_chain
from metasearch.sources.base import SearchSource

logger = logging.getLogger(__name__)

NEWS_QUERY_PATTERN = re.compile(r"news|latest|recent|today|update", re.IGNORECASE)
DEFINITION_QUERY_PATTERN = re.compile(
    r"what is|define|meaning of|definition of", re.IGNORECASE
)
HOW_TO_QUERY_PATTERN = re.compile(r"how to|steps to|guide for", re.IGNORECASE)


def normalize_query(query: str) -> str:
    """Trim outer whitespace and lower-case; internal spacing is kept."""
    return query.strip().lower()


def search_cache_key(query: str) -> str:
    """Cache key for a query's aggregated results."""
    return SEARCH_KEY_PREFIX + normalize_query(query)


def _degraded_result(
    title: str, url: str, snippet: str, score: float, domain: str, tag: str
) -> NormalizedResult:
    return NormalizedResult(
        title=title,
        url=url,
        snippet=snippet,
        relevance_score=score,
        source_domain=domain,
        source_tag=tag,
        favicon_url=FAVICON_URL_TEMPLATE.format(domain=domain),
        fetched_at=utc_now(),
        degraded=True,
    )


def generate_degraded_results(query: str) -> List[NormalizedResult]:
    """Synthetic results used when live retrieval failed.

    A notice explaining that no live results could be fetched, followed by
    links to run the same query on Wikipedia, Google and DuckDuckGo.
    """
    logger.info(f"Generating degraded results for: {query!r}")
    encoded = quote(query, safe="")

    return [
        _degraded_result(
            "Search Engine Access Note",
            EMERGENCY_NOTICE_URL,
            f'NOTE: Direct search results could not be accessed for "{query}". '
            "Please try these search engines directly.",
            0.95,
            "example.com",
            EMERGENCY_SOURCE_TAG,
        ),
        _degraded_result(
            f"{query} - Wikipedia",
            f"https://en.wikipedia.org/wiki/Special:Search?search={encoded}",
            f"Wikipedia search results for {query}. Wikipedia is a free online "
            "encyclopedia, created and edited by volunteers around the world.",
            0.9,
            "wikipedia.org",
            "wikipedia.org",
        ),
        _degraded_result(
            f"{query} - Google Search",
            f"https://www.google.com/search?q={encoded}",
            f"Google search results for {query}.",
            0.85,
            "google.com",
            "google.com",
        ),
        _degraded_result(
            f"{query} - DuckDuckGo Search",
            f"https://duckduckgo.com/?q={encoded}",
            f"DuckDuckGo search results for {query}. "
            "DuckDuckGo is a privacy-focused search engine.",
            0.8,
            "duckduckgo.com",
            "duckduckgo.com",
        ),
    ]


def apply_depth(content: EnrichedContent, depth: SearchDepth) -> EnrichedContent:
    """Trim enrichment content to what the requested depth includes.

    Only ``deep`` keeps the full (truncated) page text; ``moderate`` and
    ``shallow`` both return the summary, headings, dates and metadata.
    """
    if depth == SearchDepth.DEEP:
        return content
    return replace(content, full_content=None)


class SearchService:
    """Aggregates results from several search engines.

    The cache is shared with other services and must be created once per
    process; this class never creates its own.
    """

    def __init__(
        self,
        sources: Sequence[SearchSource],
        cache: SearchCache,
        fallback_chain: Optional[FallbackChain] = None,
        enrichment_service: Optional[EnrichmentService] = None,
        config: Optional[SearchConfig] = None,
        scoring: Optional[ScoringConfig] = None,
        search_ttl: Optional[int] = None,
    ):
        """Initialize search service.

        Args:
            sources: Adapters queried in parallel, in tie-break order
            cache: Shared cache instance
            fallback_chain: Strategies tried when the fan-out is empty
                (defaults to retrying the first source, then the others once)
            enrichment_service: Enricher used by ``enhanced_search``
            config: Search settings
            scoring: Scoring weights
            search_ttl: TTL for cached search results (cache default if None)
        """
        self.sources = list(sources)
        self.cache = cache
        self.config = config or SearchConfig()
        self.fallback_chain = fallback_chain or create_default_chain(
            self.sources, self.config
        )
        self.enrichment_service = enrichment_service
        self.scoring = scoring or ScoringConfig()
        self.search_ttl = search_ttl

    async def search(self, query: str) -> List[NormalizedResult]:
        """Run an aggregated search.

        Never raises for upstream failures. Returns at most
        ``config.max_results`` results, or the degraded set if nothing could
        be retrieved.

        Args:
            query: Search query (non-blank)

        Returns:
            Results sorted by relevance, highest first
        """
        try:
            return await self._search(query)
        except Exception as e:
            logger.error(f"Error performing search for {query!r}: {e}", exc_info=True)
            return []

    async def _search(self, query: str) -> List[NormalizedResult]:
        normalized_query = normalize_query(query)
        cache_key = SEARCH_KEY_PREFIX + normalized_query
        logger.info(f"Processing query: {normalized_query!r}")

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for query: {normalized_query!r}")
            return list(cached)

        logger.info(f"Cache miss, performing new search for: {normalized_query!r}")
        raw_results = await self._fan_out(normalized_query)

        if not raw_results:
            logger.info("No results from multi-source search, running fallback chain")
            raw_results, _ = await self.fallback_chain.run(normalized_query)

        results = self._process(raw_results, normalized_query)
        if not results:
            logger.warning(
                f"No results from any source, using degraded output for: "
                f"{normalized_query!r}"
            )
            return generate_degraded_results(normalized_query)

        logger.info(f"Caching {len(results)} results for: {normalized_query!r}")
        self.cache.set(cache_key, tuple(results), self.search_ttl)
        return results

    async def _fan_out(self, query: str) -> List[RawResult]:
        """Query every source concurrently and concatenate their results.

        A failing source contributes nothing and does not affect the others.
        """
        logger.info(f"Multi-source search across {len(self.sources)} sources")
        gathered = asyncio.gather(
            *(source.fetch(query) for source in self.sources),
            return_exceptions=True,
        )

        if self.config.search_timeout:
            try:
                outcomes = await asyncio.wait_for(
                    gathered, timeout=self.config.search_timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"Multi-source search timed out after {self.config.search_timeout}s"
                )
                return []
        else:
            outcomes = await gathered

        combined: List[RawResult] = []
        for source, outcome in zip(self.sources, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"{source.name} failed during fan-out: {outcome}")
                continue
            combined.extend(outcome)

        logger.info(f"Multi-source search found {len(combined)} total results")
        return combined

    def _process(
        self, raw_results: Sequence[RawResult], query: str
    ) -> List[NormalizedResult]:
        normalized = normalize_results(raw_results, self.scoring)
        unique = deduplicate_results(normalized)
        scored = score_results(unique, query, self.scoring)
        return scored[: self.config.max_results]

    async def enhanced_search(
        self, query: str, options: Optional[EnhancedSearchOptions] = None
    ) -> EnhancedSearchResponse:
        """Search, then enrich the top results with page content.

        Enrichment runs concurrently; a result whose page cannot be fetched is
        left out of ``enriched_results``. Degraded results are never enriched.
        Never raises: on an internal error the plain search results are
        returned with ``error`` set.

        Args:
            query: Search query
            options: Enrichment options

        Returns:
            EnhancedSearchResponse
        """
        options = options or EnhancedSearchOptions()
        try:
            results = await self.search(query)
            candidates = [r for r in results if not r.degraded]
            if (
                not options.fetch_content
                or not candidates
                or self.enrichment_service is None
            ):
                return EnhancedSearchResponse(query=query, results=results)

            top_results = candidates[: options.max_content_results]
            logger.info(f"Enhancing top {len(top_results)} results with page content")

            outcomes = await asyncio.gather(
                *(self.enrichment_service.enrich(r.url, query) for r in top_results),
                return_exceptions=True,
            )

            enriched: List[EnrichedResult] = []
            for result, outcome in zip(top_results, outcomes):
                if isinstance(outcome, BaseException):
                    logger.warning(f"Enrichment raised for {result.url}: {outcome}")
                    continue
                if not outcome.success or outcome.content is None:
                    logger.info(f"Skipping {result.url}: {outcome.error}")
                    continue
                enriched.append(
                    EnrichedResult(
                        result=result, content=apply_depth(outcome.content, options.depth)
                    )
                )

            return EnhancedSearchResponse(
                query=query, results=results, enriched_results=enriched
            )

        except Exception as e:
            logger.error(f"Error in enhanced search: {e}", exc_info=True)
            results = await self.search(query)
            return EnhancedSearchResponse(query=query, results=results, error=str(e))

    async def news_search(self, query: str) -> List[NormalizedResult]:
        """Search with news modifiers and keep news outlets only."""
        results = await self.search(f"{query} news recent")
        return filter_by_domains(results, NEWS_DOMAINS)

    async def definition_search(self, query: str) -> List[NormalizedResult]:
        """Search with definition modifiers and keep reference sites only."""
        results = await self.search(f"{query} definition meaning explain")
        return filter_by_domains(results, DEFINITION_DOMAINS)

    async def how_to_search(self, query: str) -> List[NormalizedResult]:
        """Search with tutorial modifiers and keep how-to sites only."""
        results = await self.search(f"{query} how to guide tutorial steps")
        return filter_by_domains(results, HOW_TO_DOMAINS)

    async def smart_search(self, query: str) -> List[NormalizedResult]:
        """Route the query to a specialised search based on its wording.

        News wording is checked first, then definitions, then how-to; anything
        else runs a plain search.
        """
        if NEWS_QUERY_PATTERN.search(query):
            return await self.news_search(query)
        if DEFINITION_QUERY_PATTERN.search(query):
            return await self.definition_search(query)
        if HOW_TO_QUERY_PATTERN.search(query):
            return await self.how_to_search(query)
        return await self.search(query)
