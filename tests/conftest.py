"""
Pytest configuration and shared fixtures.
"""

from typing import List, Optional, Sequence

import pytest

from metasearch.config_schema import SearchConfig
from metasearch.core.models import RawResult
from metasearch.services.cache_service import SearchCache
from metasearch.sources.base import SearchSource

# ============================================================================
# Fakes
# ============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource(SearchSource):
    """Search source returning canned results and counting calls.

    ``responses`` is consumed one entry per call; the last entry repeats.
    An Exception instance in ``responses`` is raised from ``fetch``.
    """

    def __init__(self, tag: str, responses: Optional[Sequence] = None):
        super().__init__(min_delay=0, max_delay=0)
        self._tag = tag
        self.responses = list(responses) if responses is not None else [[]]
        self.calls: List[str] = []

    @property
    def name(self) -> str:
        return f"Fake-{self._tag}"

    @property
    def tag(self) -> str:
        return self._tag

    def build_url(self, query: str) -> str:
        return f"https://{self._tag}.test/?q={query}"

    def parse(self, html: str) -> List[RawResult]:
        return []

    async def fetch(self, query: str) -> List[RawResult]:
        self.calls.append(query)
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return list(response)


def make_raw(
    url: str,
    title: str = "Title",
    snippet: str = "Snippet",
    tag: str = "duckduckgo",
    position: int = 0,
    score: Optional[float] = None,
) -> RawResult:
    """Build a RawResult with sensible defaults."""
    return RawResult(
        title=title,
        url=url,
        snippet=snippet,
        source_tag=tag,
        position_hint=position,
        relevance_score=score,
    )


async def no_sleep(seconds: float) -> None:
    """Drop-in for asyncio.sleep that returns immediately."""
    return None


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock():
    """Controllable clock for cache expiry tests."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Fresh cache using the fake clock."""
    return SearchCache(default_ttl=3600, clock=clock)


@pytest.fixture
def fast_search_config():
    """Search config with delays disabled."""
    return SearchConfig(
        min_request_delay=0,
        max_request_delay=0,
        fallback_base_delay=0,
    )


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the user data dir at a temp directory for every test."""
    home = tmp_path / "metasearch_home"
    monkeypatch.setenv("METASEARCH_HOME", str(home))
    return home


@pytest.fixture
def raw():
    """Factory for RawResult objects."""
    return make_raw


@pytest.fixture
def fake_source():
    """Factory for FakeSource(tag, responses)."""
    return FakeSource


@pytest.fixture
def instant_sleep():
    """Async sleep replacement that returns immediately."""
    return no_sleep
