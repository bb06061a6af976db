"""Base class for search engine adapters.

Each adapter scrapes one public HTML search engine. Subclasses only build the
request URL and parse the returned HTML; ``fetch`` wraps them with the
randomized pre-request delay, the request timeout and the never-raise
contract the aggregator relies on.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

import aiohttp

from metasearch.core.constants import (
    DEFAULT_MAX_REQUEST_DELAY,
    DEFAULT_MIN_REQUEST_DELAY,
    DEFAULT_SOURCE_TIMEOUT,
)
from metasearch.core.models import RawResult
from metasearch.sources.http import ProxyPool, build_headers, fetch_html

logger = logging.getLogger(__name__)


class SearchSource(ABC):
    """Base class for search engine adapters."""

    # Status codes treated as a successful response
    accepted_statuses: Sequence[int] = (200,)

    def __init__(
        self,
        timeout: float = DEFAULT_SOURCE_TIMEOUT,
        min_delay: float = DEFAULT_MIN_REQUEST_DELAY,
        max_delay: float = DEFAULT_MAX_REQUEST_DELAY,
        proxy_pool: Optional[ProxyPool] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            timeout: Request timeout in seconds
            min_delay: Lower bound of the random pre-request delay (seconds)
            max_delay: Upper bound of the random pre-request delay (seconds)
            proxy_pool: Proxies to rotate through (direct connection if empty)
            session: Shared aiohttp session; a private one is opened per
                request when omitted
        """
        self.timeout = timeout
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.proxy_pool = proxy_pool or ProxyPool()
        self.session = session

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable engine name (e.g. 'DuckDuckGo')."""
        pass

    @property
    @abstractmethod
    def tag(self) -> str:
        """Short source tag stamped on every result (e.g. 'duckduckgo')."""
        pass

    @abstractmethod
    def build_url(self, query: str) -> str:
        """Return the search page URL for a query."""
        pass

    @abstractmethod
    def parse(self, html: str) -> List[RawResult]:
        """Extract ordered results from a search results page."""
        pass

    def extra_headers(self) -> Dict[str, str]:
        """Engine-specific request headers."""
        return {}

    async def fetch(self, query: str) -> List[RawResult]:
        """Search the engine for a query.

        Never raises: network, HTTP and parse failures are logged and yield an
        empty list.

        Args:
            query: Search query

        Returns:
            Results in engine rank order, or [] on failure
        """
        logger.info(f"{self.name} search: {query!r}")
        try:
            await self._pre_request_delay()
            html = await self._get(self.build_url(query))
            results = self.parse(html)
        except asyncio.TimeoutError:
            logger.error(f"{self.name} search timed out after {self.timeout}s")
            return []
        except Exception as e:
            logger.error(f"{self.name} scraping error: {e}")
            return []

        logger.info(f"{self.name} found {len(results)} results for {query!r}")
        return results

    async def _pre_request_delay(self) -> None:
        if self.max_delay > 0:
            await asyncio.sleep(random.uniform(self.min_delay, self.max_delay))

    async def _get(self, url: str) -> str:
        headers = build_headers(self.extra_headers())
        proxy = self.proxy_pool.random()
        if self.session is not None:
            return await fetch_html(
                self.session,
                url,
                headers=headers,
                timeout=self.timeout,
                proxy=proxy,
                accepted_statuses=self.accepted_statuses,
            )
        async with aiohttp.ClientSession() as session:
            return await fetch_html(
                session,
                url,
                headers=headers,
                timeout=self.timeout,
                proxy=proxy,
                accepted_statuses=self.accepted_statuses,
            )

    def _make_result(
        self, position: int, title: str, url: str, snippet: str
    ) -> RawResult:
        return RawResult(
            title=title,
            url=url,
            snippet=snippet,
            source_tag=self.tag,
            position_hint=position,
        )
