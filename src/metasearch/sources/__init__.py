"""Search engine adapters.

Adapters are returned in fan-out order. That order matters: when two engines
return the same page, the copy from the earlier engine survives deduplication.
"""

from typing import List, Optional

import aiohttp

from metasearch.config_schema import SearchConfig

from .base import SearchSource
from .brave import BraveSource
from .duckduckgo import DuckDuckGoSource
from .http import ProxyPool, SourceHTTPError
from .qwant import QwantSource


def create_default_sources(
    config: Optional[SearchConfig] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> List[SearchSource]:
    """Build the DuckDuckGo, Brave and Qwant adapters from config."""
    config = config or SearchConfig()
    proxy_pool = ProxyPool(config.proxies)
    kwargs = dict(
        timeout=config.source_timeout,
        min_delay=config.min_request_delay,
        max_delay=config.max_request_delay,
        proxy_pool=proxy_pool,
        session=session,
    )
    return [DuckDuckGoSource(**kwargs), BraveSource(**kwargs), QwantSource(**kwargs)]


__all__ = [
    "BraveSource",
    "DuckDuckGoSource",
    "ProxyPool",
    "QwantSource",
    "SearchSource",
    "SourceHTTPError",
    "create_default_sources",
]
