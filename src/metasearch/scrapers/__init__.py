"""Page scraping for result enrichment."""

from .page_fetcher import PageFetcher, parse_page

__all__ = ["PageFetcher", "parse_page"]
