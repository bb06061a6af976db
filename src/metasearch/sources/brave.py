"""Brave Search adapter."""

from typing import List
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from metasearch.core.models import RawResult
from metasearch.sources.base import SearchSource


class BraveSource(SearchSource):
    """Scrapes search.brave.com web results."""

    @property
    def name(self) -> str:
        return "Brave Search"

    @property
    def tag(self) -> str:
        return "brave"

    def build_url(self, query: str) -> str:
        return f"https://search.brave.com/search?q={quote_plus(query)}&source=web"

    def parse(self, html: str) -> List[RawResult]:
        soup = BeautifulSoup(html, "html.parser")
        results: List[RawResult] = []

        for element in soup.select(".snippet"):
            title_element = element.select_one(".snippet-title")
            if title_element is None:
                continue
            title = title_element.get_text(strip=True)

            # The anchor either wraps the title or sits inside it
            link = title_element.find("a") or title_element.find_parent("a")
            href = link.get("href") if link else None
            if not title or not href:
                continue

            description = element.select_one(".snippet-description")
            snippet = description.get_text(strip=True) if description else ""

            results.append(self._make_result(len(results), title, href, snippet))

        return results
