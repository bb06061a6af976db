"""DuckDuckGo HTML search adapter."""

from typing import Dict, List
from urllib.parse import parse_qs, quote_plus, urlparse

from bs4 import BeautifulSoup

from metasearch.core.models import RawResult
from metasearch.sources.base import SearchSource


def unwrap_redirect(href: str) -> str:
    """Resolve DuckDuckGo redirect links to the target URL.

    Result links on the HTML endpoint can point at ``/l/?uddg=<target>`` or
    ``/d.js?...uddg=<target>`` instead of the page itself.
    """
    if "uddg=" not in href:
        return href
    query = urlparse(href).query
    targets = parse_qs(query).get("uddg")
    return targets[0] if targets else href


class DuckDuckGoSource(SearchSource):
    """Scrapes html.duckduckgo.com (the no-JS results page)."""

    # DuckDuckGo often answers valid searches with 202
    accepted_statuses = (200, 202)

    @property
    def name(self) -> str:
        return "DuckDuckGo"

    @property
    def tag(self) -> str:
        return "duckduckgo"

    def build_url(self, query: str) -> str:
        return f"https://html.duckduckgo.com/html/?q={quote_plus(query)}"

    def extra_headers(self) -> Dict[str, str]:
        return {"Referer": "https://duckduckgo.com/"}

    def parse(self, html: str) -> List[RawResult]:
        soup = BeautifulSoup(html, "html.parser")
        results: List[RawResult] = []

        for element in soup.select(".result"):
            title_element = element.select_one(".result__title")
            if title_element is None:
                continue
            title = title_element.get_text(strip=True)

            link = title_element.find("a")
            href = link.get("href") if link else None
            if not title or not href:
                continue

            snippet_element = element.select_one(".result__snippet")
            snippet = snippet_element.get_text(strip=True) if snippet_element else ""

            results.append(
                self._make_result(len(results), title, unwrap_redirect(href), snippet)
            )

        return results
