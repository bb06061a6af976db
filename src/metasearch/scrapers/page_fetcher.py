"""Web page fetching and text extraction for result enrichment."""

import asyncio
import logging
import random
import re
from typing import Dict, List, Optional

import aiohttp
from bs4 import BeautifulSoup, Tag
from markdownify import markdownify as md

from metasearch.core.constants import (
    DEFAULT_MAX_FETCH_DELAY,
    DEFAULT_MIN_FETCH_DELAY,
    DEFAULT_SOURCE_TIMEOUT,
)
from metasearch.core.models import Heading, PageContent
from metasearch.sources.http import ProxyPool, SourceHTTPError, build_headers, fetch_html

logger = logging.getLogger(__name__)

# Containers that usually hold the main article text, most specific last
CONTENT_SELECTORS = [
    "article",
    ".article",
    ".post",
    ".content",
    "main",
    "#content",
    "#main-content",
    ".main-content",
    ".article-content",
    ".post-content",
]

# A container must yield at least this much text to be trusted
MIN_CONTAINER_CHARS = 500

# <meta> tags copied into PageContent.metadata
META_FIELDS = {
    "description": ['meta[name="description"]'],
    "keywords": ['meta[name="keywords"]'],
    "author": ['meta[name="author"]'],
    "published_date": [
        'meta[name="pubdate"]',
        'meta[property="article:published_time"]',
    ],
}

NOISE_TAGS = ["script", "style", "svg", "footer", "nav", "header", "iframe", "noscript"]

NOISE_CLASS_TOKENS = {
    "advertisement",
    "ad",
    "ads",
    "social",
    "share",
    "cookie",
    "modal",
    "popup",
    "sidebar",
    "navigation",
    "nav",
    "menu",
    "comment",
    "comments",
    "related",
    "recommendations",
}

NOISE_IDS = ["sidebar", "footer", "nav", "menu", "comments", "cookie", "modal"]


def _has_noise_class(classes) -> bool:
    if not classes:
        return False
    if isinstance(classes, str):
        classes = classes.split()
    for cls in classes:
        tokens = re.split(r"[-_]", cls.lower())
        if NOISE_CLASS_TOKENS.intersection(tokens):
            return True
    return False


def clean_html_for_content(soup: BeautifulSoup | Tag) -> BeautifulSoup | Tag:
    """
    Strip scripts, navigation, ads and other noise from an HTML subtree.

    Args:
        soup: BeautifulSoup object or tag

    Returns:
        The same object, cleaned in place
    """
    # 1. Scripts, styles, and visual-only elements
    for tag in soup.find_all(
        ["script", "style", "iframe", "img", "svg", "noscript", "link", "meta"]
    ):
        tag.decompose()

    # 2. Navigation and UI elements
    for tag in soup.find_all(["nav", "header", "footer", "aside", "form", "button"]):
        tag.decompose()

    # 3. Noise classes (ads, social, cookies, modals), matched per class token
    for tag in soup.find_all(class_=True):
        if not tag.decomposed and _has_noise_class(tag.get("class")):
            tag.decompose()

    # 4. Noise IDs
    for noise_id in NOISE_IDS:
        for tag in soup.find_all(id=lambda x: x and noise_id in x.lower()):
            tag.decompose()

    # 5. Empty paragraphs and divs
    for tag in soup.find_all(["p", "div", "span"]):
        if not tag.decomposed and not tag.get_text(strip=True):
            tag.decompose()

    return soup


def normalize_paragraphs(text: str) -> str:
    """Collapse whitespace inside paragraphs and keep blank lines between them."""
    paragraphs = []
    for block in re.split(r"\n\s*\n", text):
        block = re.sub(r"\s+", " ", block).strip()
        if block:
            paragraphs.append(block)
    return "\n\n".join(paragraphs)


def extract_metadata(soup: BeautifulSoup) -> Dict[str, str]:
    """Read description, keywords, author and publish date from <meta> tags."""
    metadata: Dict[str, str] = {}
    for key, selectors in META_FIELDS.items():
        value = ""
        for selector in selectors:
            tag = soup.select_one(selector)
            if tag and tag.get("content"):
                value = tag["content"].strip()
                break
        metadata[key] = value
    return metadata


def extract_headings(soup: BeautifulSoup | Tag) -> List[Heading]:
    """Return non-empty h1-h3 headings in document order."""
    headings = []
    for el in soup.find_all(["h1", "h2", "h3"]):
        text = el.get_text(" ", strip=True)
        if text:
            headings.append(Heading(level=int(el.name[1]), text=text))
    return headings


def extract_main_text(soup: BeautifulSoup) -> str:
    """Extract the main text, paragraphs separated by blank lines.

    Tries the common content containers first; falls back to joining every
    <p> on the page when none of them holds enough text.
    """
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        element = clean_html_for_content(element)
        text = normalize_paragraphs(md(str(element), heading_style="ATX"))
        if len(text) > MIN_CONTAINER_CHARS:
            return text

    paragraphs = [p.get_text(" ", strip=True) for p in soup.find_all("p")]
    return normalize_paragraphs("\n\n".join(paragraphs))


def parse_page(url: str, html: str) -> PageContent:
    """Parse fetched HTML into a PageContent.

    Args:
        url: URL the HTML came from
        html: Raw HTML

    Returns:
        PageContent with status "success", or "parse_error" if no text was found
    """
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""
    metadata = extract_metadata(soup)

    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()

    headings = extract_headings(soup)
    content = extract_main_text(soup)

    if not content:
        return PageContent(
            url=url,
            title=title,
            headings=headings,
            metadata=metadata,
            status="parse_error",
            error="No content found",
        )

    return PageContent(
        url=url,
        title=title,
        content=content,
        headings=headings,
        metadata=metadata,
    )


class PageFetcher:
    """Fetches web pages and extracts their text content.

    ``fetch`` never raises; failures come back as a PageContent whose
    ``status`` is not "success".
    """

    def __init__(
        self,
        timeout: float = DEFAULT_SOURCE_TIMEOUT,
        min_delay: float = DEFAULT_MIN_FETCH_DELAY,
        max_delay: float = DEFAULT_MAX_FETCH_DELAY,
        proxy_pool: Optional[ProxyPool] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.timeout = timeout
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.proxy_pool = proxy_pool or ProxyPool()
        self.session = session

    async def fetch(self, url: str) -> PageContent:
        """
        Fetch a page and extract its content.

        Args:
            url: URL to fetch

        Returns:
            PageContent; status is one of "success", "http_error", "timeout",
            "network_error", "parse_error"
        """
        logger.info(f"Scraping content from: {url}")

        if self.max_delay > 0:
            await asyncio.sleep(random.uniform(self.min_delay, self.max_delay))

        try:
            html = await self._get(url)
        except SourceHTTPError as e:
            logger.warning(f"HTTP {e.status} for {url}")
            return PageContent(url=url, status="http_error", error=f"HTTP {e.status}")
        except asyncio.TimeoutError:
            logger.warning(f"Timeout fetching {url}")
            return PageContent(url=url, status="timeout", error="Timeout")
        except Exception as e:
            logger.warning(f"Error fetching {url}: {e}")
            return PageContent(url=url, status="network_error", error=str(e))

        try:
            page = parse_page(url, html)
        except Exception as e:
            logger.warning(f"Error processing {url}: {e}")
            return PageContent(url=url, status="parse_error", error=f"Parse error: {e}")

        if page.ok:
            logger.info(f"Fetched {url} ({len(page.content)} chars)")
        else:
            logger.warning(f"{page.error} in {url}")
        return page

    async def _get(self, url: str) -> str:
        headers = build_headers({"Accept-Language": "en-US,en;q=0.5"})
        proxy = self.proxy_pool.random()
        if self.session is not None:
            return await fetch_html(
                self.session, url, headers=headers, timeout=self.timeout, proxy=proxy
            )
        async with aiohttp.ClientSession() as session:
            return await fetch_html(
                session, url, headers=headers, timeout=self.timeout, proxy=proxy
            )
