"""Unit tests for the command-line interface."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from metasearch.cli import build_search_service, main
from metasearch.config_schema import MetasearchConfig
from metasearch.core.models import EnhancedSearchResponse, NormalizedResult, SearchDepth


def _result(url="https://en.wikipedia.org/wiki/Entropy"):
    return NormalizedResult(
        title="Entropy - Wikipedia",
        url=url,
        snippet="Entropy is a measure of disorder",
        relevance_score=1.0,
        source_domain="en.wikipedia.org",
        source_tag="duckduckgo",
        favicon_url="https://www.google.com/s2/favicons?domain=en.wikipedia.org",
    )


@pytest.fixture
def service():
    service = MagicMock()
    service.search = AsyncMock(return_value=[_result()])
    service.smart_search = AsyncMock(return_value=[_result()])
    service.enhanced_search = AsyncMock(
        return_value=EnhancedSearchResponse(query="entropy", results=[_result()])
    )
    with patch("metasearch.cli.build_search_service", return_value=service):
        yield service


@pytest.mark.unit
class TestCli:
    """Tests for the metasearch command."""

    def test_search_json(self, service, capsys):
        assert main(["search", "entropy", "--json"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output[0]["url"] == "https://en.wikipedia.org/wiki/Entropy"
        service.search.assert_awaited_once_with("entropy")

    def test_search_text(self, service, capsys):
        main(["search", "entropy"])
        out = capsys.readouterr().out
        assert "Entropy - Wikipedia" in out
        assert "(1.00)" in out

    def test_smart_search(self, service):
        main(["search", "latest entropy news", "--smart"])
        service.smart_search.assert_awaited_once_with("latest entropy news")
        service.search.assert_not_awaited()

    def test_categorize(self, service, capsys):
        main(["search", "entropy", "--categorize"])
        assert "== reference ==" in capsys.readouterr().out

    def test_enhanced_options(self, service):
        main(["enhanced", "entropy", "--depth", "deep", "--max-content", "2"])
        _, options = service.enhanced_search.await_args.args
        assert options.depth == SearchDepth.DEEP
        assert options.max_content_results == 2

    def test_blank_query(self, service, capsys):
        assert main(["search", "   "]) == 2
        assert "query is required" in capsys.readouterr().err
        service.search.assert_not_awaited()

    def test_serve(self):
        with patch("metasearch.api.main.serve") as serve:
            assert main(["serve", "--port", "8080"]) == 0
        serve.assert_called_once_with("0.0.0.0", 8080, reload=False)


@pytest.mark.unit
def test_build_search_service_shares_one_cache():
    service = build_search_service(MetasearchConfig.create_default())
    assert service.enrichment_service.cache is service.cache
    assert [s.tag for s in service.sources] == ["duckduckgo", "brave", "qwant"]
