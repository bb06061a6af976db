"""Unit tests for page fetching and content extraction."""

import asyncio
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest
from bs4 import BeautifulSoup

from metasearch.core.models import Heading
from metasearch.scrapers.page_fetcher import (
    PageFetcher,
    clean_html_for_content,
    extract_headings,
    extract_metadata,
    normalize_paragraphs,
    parse_page,
)
from metasearch.sources.http import SourceHTTPError

PARAGRAPH_ONE = (
    "Entropy is a scientific concept most commonly associated with a state of "
    "disorder, randomness, or uncertainty. The term and the concept are used in "
    "diverse fields, from classical thermodynamics, where it was first recognized, "
    "to the microscopic description of nature in statistical physics."
)
PARAGRAPH_TWO = (
    "The concept was introduced in the nineteenth century while studying heat "
    "engines. It was later given a statistical interpretation, and in the "
    "twentieth century it was adopted by information theory to describe the "
    "average amount of information conveyed by a message from a source."
)

ARTICLE_HTML = f"""
<html>
<head>
  <title>Understanding Entropy</title>
  <meta name="description" content="A primer on entropy">
  <meta name="author" content="Jane Doe">
  <meta property="article:published_time" content="2023-05-01T10:00:00Z">
  <script>var tracking = 1;</script>
</head>
<body>
  <nav><a href="/">Home</a></nav>
  <article>
    <h1>Entropy</h1>
    <p>{PARAGRAPH_ONE}</p>
    <div class="share-buttons">Share this article</div>
    <h2>History</h2>
    <p>{PARAGRAPH_TWO}</p>
  </article>
  <footer>Copyright 2023</footer>
</body>
</html>
"""


@pytest.mark.unit
class TestHtmlHelpers:
    """Tests for the parsing helpers."""

    def test_clean_html_removes_noise(self):
        soup = BeautifulSoup(
            "<div><script>x()</script><div class='ad-banner'>Buy</div>"
            "<div id='sidebar-left'>Links</div><p>Keep me</p><p> </p></div>",
            "html.parser",
        )
        text = clean_html_for_content(soup).get_text(" ", strip=True)
        assert text == "Keep me"

    def test_noise_class_matched_per_token(self):
        soup = BeautifulSoup(
            "<div><div class='header-shadow'>Shadow</div>"
            "<div class='ads'>Ad</div></div>",
            "html.parser",
        )
        text = clean_html_for_content(soup).get_text(" ", strip=True)
        # "shadow" contains "ad" as a substring but is not a noise token
        assert text == "Shadow"

    def test_normalize_paragraphs(self):
        assert normalize_paragraphs("a  b\nc\n\n\n  d ") == "a b c\n\nd"

    def test_extract_metadata(self):
        soup = BeautifulSoup(ARTICLE_HTML, "html.parser")
        assert extract_metadata(soup) == {
            "description": "A primer on entropy",
            "keywords": "",
            "author": "Jane Doe",
            "published_date": "2023-05-01T10:00:00Z",
        }

    def test_extract_headings(self):
        soup = BeautifulSoup(
            "<h1>One</h1><h4>Skipped</h4><h2> </h2><h3>Three</h3>", "html.parser"
        )
        assert extract_headings(soup) == [
            Heading(level=1, text="One"),
            Heading(level=3, text="Three"),
        ]


@pytest.mark.unit
class TestParsePage:
    """Tests for parse_page."""

    def test_article_page(self):
        page = parse_page("https://example.com/entropy", ARTICLE_HTML)

        assert page.ok
        assert page.title == "Understanding Entropy"
        assert page.headings == [
            Heading(level=1, text="Entropy"),
            Heading(level=2, text="History"),
        ]
        assert PARAGRAPH_ONE in page.content
        assert PARAGRAPH_TWO in page.content
        assert "Share this article" not in page.content
        assert "Copyright" not in page.content
        assert "tracking" not in page.content
        assert page.metadata["author"] == "Jane Doe"

    def test_paragraphs_separated_by_blank_lines(self):
        page = parse_page("https://example.com/entropy", ARTICLE_HTML)
        paragraphs = page.content.split("\n\n")
        assert PARAGRAPH_ONE in paragraphs
        assert PARAGRAPH_TWO in paragraphs

    def test_falls_back_to_paragraphs(self):
        html = "<html><body><div><p>First short.</p><p>Second short.</p></div></body></html>"
        page = parse_page("https://example.com/", html)
        assert page.ok
        assert page.content == "First short.\n\nSecond short."

    def test_no_content_is_parse_error(self):
        page = parse_page("https://example.com/", "<html><body><div></div></body></html>")
        assert page.status == "parse_error"
        assert page.error == "No content found"
        assert not page.ok


@pytest.mark.unit
class TestPageFetcher:
    """Tests for PageFetcher.fetch status mapping."""

    @pytest.fixture
    def fetcher(self):
        return PageFetcher(min_delay=0, max_delay=0)

    @pytest.mark.asyncio
    async def test_success(self, fetcher):
        with patch.object(fetcher, "_get", AsyncMock(return_value=ARTICLE_HTML)):
            page = await fetcher.fetch("https://example.com/entropy")
        assert page.status == "success"
        assert page.url == "https://example.com/entropy"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,status",
        [
            (SourceHTTPError("https://example.com/", 404), "http_error"),
            (asyncio.TimeoutError(), "timeout"),
            (aiohttp.ClientConnectionError("refused"), "network_error"),
        ],
    )
    async def test_failure_statuses(self, fetcher, error, status):
        with patch.object(fetcher, "_get", AsyncMock(side_effect=error)):
            page = await fetcher.fetch("https://example.com/")
        assert page.status == status
        assert page.error

    @pytest.mark.asyncio
    async def test_http_error_message(self, fetcher):
        error = SourceHTTPError("https://example.com/", 404)
        with patch.object(fetcher, "_get", AsyncMock(side_effect=error)):
            page = await fetcher.fetch("https://example.com/")
        assert page.error == "HTTP 404"

    @pytest.mark.asyncio
    async def test_parser_crash_is_parse_error(self, fetcher):
        with patch.object(fetcher, "_get", AsyncMock(return_value="<html></html>")):
            with patch(
                "metasearch.scrapers.page_fetcher.parse_page",
                side_effect=RuntimeError("bad tree"),
            ):
                page = await fetcher.fetch("https://example.com/")
        assert page.status == "parse_error"
        assert "bad tree" in page.error
