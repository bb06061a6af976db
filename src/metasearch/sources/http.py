"""HTTP helpers shared by the search engine adapters and the page fetcher."""

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence

import aiohttp

logger = logging.getLogger(__name__)

# Rotated per request to look less like a single client
USER_AGENTS = [
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
    ),
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
    ),
    (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
    ),
]

# Browser-like headers to bypass bot detection
BROWSER_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "max-age=0",
}


class SourceHTTPError(Exception):
    """Raised when an upstream responds with an unaccepted status code."""

    def __init__(self, url: str, status: int):
        super().__init__(f"HTTP {status} for {url}")
        self.url = url
        self.status = status


def get_random_user_agent() -> str:
    """Pick a user agent string at random."""
    return random.choice(USER_AGENTS)


def build_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Browser headers with a rotated User-Agent plus any extras."""
    headers = dict(BROWSER_HEADERS)
    headers["User-Agent"] = get_random_user_agent()
    if extra:
        headers.update(extra)
    return headers


class ProxyPool:
    """Rotating pool of proxy URLs.

    An empty pool means requests go out directly and selection returns None.
    """

    def __init__(self, proxies: Optional[Iterable[str]] = None):
        self._proxies: List[str] = list(proxies or [])

    def __len__(self) -> int:
        return len(self._proxies)

    def random(self) -> Optional[str]:
        """Return a random proxy, or None for a direct connection."""
        if not self._proxies:
            return None
        proxy = random.choice(self._proxies)
        logger.debug(f"Selected proxy: {proxy}")
        return proxy


async def fetch_html(
    session: aiohttp.ClientSession,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10,
    proxy: Optional[str] = None,
    accepted_statuses: Sequence[int] = (200,),
) -> str:
    """GET a URL and return the response body as text.

    Args:
        session: aiohttp ClientSession
        url: URL to fetch
        headers: Request headers (defaults to ``build_headers()``)
        timeout: Total timeout in seconds
        proxy: Optional proxy URL
        accepted_statuses: Status codes treated as success

    Returns:
        Response body

    Raises:
        SourceHTTPError: If the status code is not accepted
        asyncio.TimeoutError, aiohttp.ClientError: On transport failures
    """
    timeout_obj = aiohttp.ClientTimeout(total=timeout)
    async with session.get(
        url,
        headers=headers or build_headers(),
        timeout=timeout_obj,
        proxy=proxy,
    ) as response:
        if response.status not in accepted_statuses:
            raise SourceHTTPError(url, response.status)
        return await response.text()
