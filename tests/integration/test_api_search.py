"""Integration tests for search and cache API endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from metasearch import __version__
from metasearch.api.deps import clear_providers, get_cache, get_search_service
from metasearch.api.main import create_app, lifespan
from metasearch.api.schemas import ErrorResponse
from metasearch.config_schema import SearchConfig
from metasearch.core.constants import TRENDING_QUERIES
from metasearch.core.models import EnrichedContent, EnrichmentOutcome, Heading
from metasearch.services import SearchCache, SearchService, create_default_chain


@pytest.fixture
def api_cache():
    return SearchCache(default_ttl=60)


@pytest.fixture
def sources(fake_source, raw):
    return [
        fake_source(
            "duckduckgo",
            [
                [
                    raw(
                        "https://en.wikipedia.org/wiki/Entropy",
                        "Entropy - Wikipedia",
                        "Entropy is a measure of disorder",
                        tag="duckduckgo",
                    ),
                    raw("https://www.bbc.co.uk/news/science", "Science news", tag="duckduckgo", position=1),
                ]
            ],
        ),
        fake_source("brave", [[raw("https://example.com/entropy", "Entropy explained", tag="brave")]]),
    ]


@pytest.fixture
def enricher():
    enricher = MagicMock()
    enricher.enrich = AsyncMock(
        side_effect=lambda url, query: EnrichmentOutcome(
            url=url,
            success=True,
            content=EnrichedContent(
                summary="A summary.",
                headings=[Heading(level=1, text="Entropy")],
                extracted_dates=["2023-01-15"],
                metadata={"description": "d"},
                title="Entropy",
                full_content="Full text.",
            ),
        )
    )
    return enricher


@pytest.fixture
def search_service(sources, api_cache, enricher, instant_sleep):
    config = SearchConfig(min_request_delay=0, max_request_delay=0)
    return SearchService(
        sources=sources,
        cache=api_cache,
        fallback_chain=create_default_chain(sources, config, sleep=instant_sleep),
        enrichment_service=enricher,
        config=config,
    )


@pytest.fixture
def app(search_service, api_cache):
    """Create test application with injected services."""
    app = create_app()
    app.dependency_overrides[get_search_service] = lambda: search_service
    app.dependency_overrides[get_cache] = lambda: api_cache
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


@pytest.mark.integration
class TestSearchAPI:
    """Test search endpoints."""

    @pytest.mark.asyncio
    async def test_search(self, client):
        response = await client.post("/api/search", json={"query": "Entropy"})
        assert response.status_code == 200
        data = response.json()

        assert data["meta"]["query"] == "Entropy"
        assert data["meta"]["count"] == 3
        assert data["meta"]["degraded"] is False
        assert data["categories"] is None
        assert data["results"][0]["url"] == "https://en.wikipedia.org/wiki/Entropy"
        assert data["results"][0]["relevance_score"] == 1.0
        assert set(data["results"][0]) >= {
            "title",
            "url",
            "snippet",
            "relevance_score",
            "source_domain",
            "source_tag",
            "favicon_url",
            "fetched_at",
        }

    @pytest.mark.asyncio
    async def test_search_with_categories(self, client):
        response = await client.post(
            "/api/search", json={"query": "entropy", "categorize": True}
        )
        assert response.status_code == 200
        categories = response.json()["categories"]
        assert len(categories["reference"]) == 1
        assert len(categories["news"]) == 1
        assert len(categories["other"]) == 1
        assert categories["social"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"query": ""}, {"query": "   "}, {}])
    async def test_search_requires_query(self, client, body):
        response = await client.post("/api/search", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Search query is required"

    @pytest.mark.asyncio
    async def test_degraded_flag(self, client, sources):
        for source in sources:
            source.responses = [[]]
        response = await client.post("/api/search", json={"query": "nothing"})
        data = response.json()
        assert data["meta"]["degraded"] is True
        assert data["meta"]["count"] == 4

    @pytest.mark.asyncio
    async def test_enhanced_search(self, client):
        response = await client.post(
            "/api/enhanced-search",
            json={"query": "entropy", "options": {"max_content_results": 2}},
        )
        assert response.status_code == 200
        data = response.json()

        assert data["query"] == "entropy"
        assert len(data["results"]) == 3
        assert len(data["enriched_results"]) == 2
        content = data["enriched_results"][0]["enhanced_content"]
        assert content["summary"] == "A summary."
        assert content["headings"] == [{"level": 1, "text": "Entropy"}]
        assert content["full_content"] is None
        assert data["error"] is None

    @pytest.mark.asyncio
    async def test_enhanced_search_deep(self, client):
        response = await client.post(
            "/api/enhanced-search",
            json={"query": "entropy", "options": {"depth": "deep"}},
        )
        enriched = response.json()["enriched_results"]
        assert all(e["enhanced_content"]["full_content"] == "Full text." for e in enriched)

    @pytest.mark.asyncio
    async def test_enhanced_search_requires_query(self, client):
        response = await client.post("/api/enhanced-search", json={"query": " "})
        assert response.status_code == 400
        assert ErrorResponse(**response.json()).detail == "Search query is required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/search", "/api/enhanced-search"])
    async def test_missing_query_documented_in_openapi(self, client, path):
        schema = (await client.get("/openapi.json")).json()
        bad_request = schema["paths"][path]["post"]["responses"]["400"]
        ref = bad_request["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")

    @pytest.mark.asyncio
    async def test_enhanced_search_invalid_depth(self, client):
        response = await client.post(
            "/api/enhanced-search",
            json={"query": "entropy", "options": {"depth": "abyssal"}},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_trending(self, client):
        response = await client.get("/api/trending")
        assert response.status_code == 200
        assert response.json()["trending"] == list(TRENDING_QUERIES)


@pytest.mark.integration
class TestCacheAPI:
    """Test cache endpoints."""

    @pytest.mark.asyncio
    async def test_stats_after_search(self, client, sources):
        await client.post("/api/search", json={"query": "entropy"})
        await client.post("/api/search", json={"query": "Entropy"})

        response = await client.get("/api/cache/stats")
        assert response.status_code == 200
        stats = response.json()
        assert stats["keys"] == ["search:entropy"]
        assert stats["hits"] == 1
        assert stats["sets"] == 1
        assert len(sources[0].calls) == 1

    @pytest.mark.asyncio
    async def test_flush(self, client, api_cache):
        await client.post("/api/search", json={"query": "entropy"})
        response = await client.delete("/api/cache")
        assert response.status_code == 200
        assert len(api_cache) == 0


@pytest.mark.integration
class TestHealthAPI:
    """Test health endpoints."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/api/health"])
    async def test_health(self, client, path):
        response = await client.get(path)
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


@pytest.mark.integration
class TestLifespan:
    """Test application startup and shutdown."""

    @pytest.mark.asyncio
    async def test_cache_sweeper_started_and_stopped(self):
        clear_providers()
        app = create_app()
        async with lifespan(app):
            cache = get_cache()
            assert cache._sweep_task is not None
        assert cache._sweep_task is None
