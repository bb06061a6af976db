"""Enrichment of top search results with scraped page content.

For a result URL the service fetches the page (through the shared cache under
the ``content:`` namespace), trims the text, builds a short summary from the
first substantial paragraphs and pulls out date-like strings.
"""

import logging
import re
from typing import List, Optional

from metasearch.config_schema import CacheConfig, EnrichmentConfig
from metasearch.core.constants import CONTENT_KEY_PREFIX
from metasearch.core.models import EnrichedContent, EnrichmentOutcome, PageContent
from metasearch.scrapers.page_fetcher import PageFetcher
from metasearch.services.cache_service import SearchCache

logger = logging.getLogger(__name__)

_MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|"
    "November|December|Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"
)

DATE_PATTERNS = [
    # ISO dates: 2023-01-15
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    # January 15, 2023 / Jan. 15th 2023
    re.compile(
        rf"\b(?:{_MONTHS})[.\s]\s*\d{{1,2}}(?:st|nd|rd|th)?,?\s*\d{{4}}\b",
        re.IGNORECASE,
    ),
    # MM/DD/YYYY or DD/MM/YYYY
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
    # October 2023
    re.compile(rf"\b(?:{_MONTHS})[.\s]\s*\d{{4}}\b", re.IGNORECASE),
]


def extract_dates(content: str) -> List[str]:
    """Find date-like strings in text.

    Args:
        content: Page text

    Returns:
        Matched strings, deduplicated, in pattern order then text order
    """
    dates: List[str] = []
    seen = set()
    for pattern in DATE_PATTERNS:
        for match in pattern.findall(content):
            if match not in seen:
                seen.add(match)
                dates.append(match)
    return dates


def truncate_content(content: str, max_chars: int) -> str:
    """Cut content to ``max_chars`` characters, marking the cut with '...'."""
    if len(content) > max_chars:
        return content[:max_chars] + "..."
    return content


def summarize_content(
    content: str, min_paragraph_chars: int = 100, max_paragraphs: int = 3
) -> str:
    """Join the first paragraphs longer than ``min_paragraph_chars``."""
    paragraphs = [p for p in content.split("\n\n") if len(p) > min_paragraph_chars]
    return "\n\n".join(paragraphs[:max_paragraphs])


class EnrichmentService:
    """Fetches result pages and derives summaries, headings and dates."""

    def __init__(
        self,
        cache: SearchCache,
        fetcher: Optional[PageFetcher] = None,
        config: Optional[EnrichmentConfig] = None,
        content_ttl: Optional[int] = None,
    ):
        """
        Args:
            cache: Shared cache; page content is stored under ``content:<url>``
            fetcher: Page fetcher (built from config when omitted)
            config: Enrichment settings
            content_ttl: TTL for cached page content in seconds
        """
        self.cache = cache
        self.config = config or EnrichmentConfig()
        self.fetcher = fetcher or PageFetcher(
            timeout=self.config.fetch_timeout,
            min_delay=self.config.min_fetch_delay,
            max_delay=self.config.max_fetch_delay,
        )
        self.content_ttl = (
            content_ttl if content_ttl is not None else CacheConfig().content_ttl_seconds
        )

    async def scrape_page(self, url: str) -> PageContent:
        """Fetch a page, serving it from the cache when possible.

        Only successful fetches are cached.
        """
        cache_key = CONTENT_KEY_PREFIX + url
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Content cache hit for URL: {url}")
            return cached

        page = await self.fetcher.fetch(url)
        if page.ok:
            self.cache.set(cache_key, page, self.content_ttl)
        return page

    async def enrich(self, url: str, query: str) -> EnrichmentOutcome:
        """Build enrichment content for one result URL.

        Never raises; any fetch or processing failure is reported through
        ``EnrichmentOutcome.success``.

        Args:
            url: Result URL
            query: The search query the result belongs to

        Returns:
            EnrichmentOutcome
        """
        try:
            page = await self.scrape_page(url)
            if not page.ok:
                return EnrichmentOutcome(url=url, success=False, error=page.error)
            if not page.content:
                return EnrichmentOutcome(url=url, success=False, error="Empty content")

            content = truncate_content(page.content, self.config.max_content_chars)
            enriched = EnrichedContent(
                summary=summarize_content(
                    content,
                    min_paragraph_chars=self.config.min_paragraph_chars,
                    max_paragraphs=self.config.summary_paragraphs,
                ),
                headings=list(page.headings),
                extracted_dates=extract_dates(content),
                metadata=dict(page.metadata),
                title=page.title,
                full_content=content,
            )
            return EnrichmentOutcome(url=url, success=True, content=enriched)

        except Exception as e:
            logger.error(f"Error getting key facts for {url} ({query!r}): {e}")
            return EnrichmentOutcome(url=url, success=False, error=str(e))
