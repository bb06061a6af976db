"""Qwant lite search adapter."""

from typing import List
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from metasearch.core.models import RawResult
from metasearch.sources.base import SearchSource


class QwantSource(SearchSource):
    """Scrapes lite.qwant.com, skipping sponsored results."""

    @property
    def name(self) -> str:
        return "Qwant"

    @property
    def tag(self) -> str:
        return "qwant"

    def build_url(self, query: str) -> str:
        return f"https://lite.qwant.com/?q={quote_plus(query)}"

    def parse(self, html: str) -> List[RawResult]:
        soup = BeautifulSoup(html, "html.parser")
        results: List[RawResult] = []

        for element in soup.select(".result:not(.ad)"):
            title_element = element.select_one(".result-title")
            title = title_element.get_text(strip=True) if title_element else ""

            link = element.select_one("a.result-url")
            href = link.get("href") if link else None
            if not title or not href:
                continue

            snippet_element = element.select_one(".result-snippet")
            snippet = snippet_element.get_text(strip=True) if snippet_element else ""

            results.append(self._make_result(len(results), title, href, snippet))

        return results
