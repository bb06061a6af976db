"""Core constants for metasearch.

This module defines shared constants used across the application to ensure
consistency and avoid hardcoded values in multiple locations. Values that are
tuning knobs rather than fixed formats are mirrored as defaults in
``metasearch.config_schema`` so they can be overridden from config.yaml.
"""

from typing import Tuple

# Cache key namespaces
SEARCH_KEY_PREFIX = "search:"
"""Prefix for aggregated search result entries."""

CONTENT_KEY_PREFIX = "content:"
"""Prefix for fetched page content entries (Enricher)."""

# Cache lifetimes
DEFAULT_CACHE_TTL_SECONDS = 3600
"""Default time-to-live for cache entries (1 hour)."""

CACHE_SWEEP_FRACTION = 0.2
"""Background sweep runs every ``CACHE_SWEEP_FRACTION * default_ttl`` seconds."""

# Aggregation
DEFAULT_MAX_RESULTS = 20
"""Number of results kept after scoring."""

DEFAULT_FALLBACK_ATTEMPTS = 3
"""Attempts made against the primary source in the fallback chain."""

DEFAULT_FALLBACK_BASE_DELAY = 1.5
"""Attempt n of the primary fallback waits ``n * base_delay`` seconds."""

# Source adapters
DEFAULT_SOURCE_TIMEOUT = 10
"""Per-request timeout for search engine requests, in seconds."""

DEFAULT_MIN_REQUEST_DELAY = 1.0
DEFAULT_MAX_REQUEST_DELAY = 3.0
"""Randomized pre-request delay window used to avoid rate limiting."""

# Normalization
DEFAULT_TITLE = "No Title"
DEFAULT_SNIPPET = "No description available."
POSITION_SCORE_DECAY = 0.05
"""Initial score is ``1 - POSITION_SCORE_DECAY * position``."""

FAVICON_URL_TEMPLATE = "https://www.google.com/s2/favicons?domain={domain}"

# Scoring boosts
EXACT_TITLE_MATCH_BOOST = 0.4
TITLE_WORD_MATCH_BOOST = 0.1
SNIPPET_WORD_MATCH_BOOST = 0.05
AUTHORITY_DOMAIN_BOOST = 0.2
MIN_QUERY_WORD_LENGTH = 3
"""Query words shorter than this are ignored for partial matches."""

AUTHORITY_DOMAIN_SUBSTRINGS: Tuple[str, ...] = ("wikipedia.org",)
AUTHORITY_DOMAIN_SUFFIXES: Tuple[str, ...] = (".gov", ".edu")

# Enrichment
MAX_CONTENT_CHARS = 10_000
MIN_SUMMARY_PARAGRAPH_CHARS = 100
SUMMARY_PARAGRAPHS = 3
DEFAULT_MAX_CONTENT_RESULTS = 3
DEFAULT_CONTENT_TTL_SECONDS = 3600
DEFAULT_MIN_FETCH_DELAY = 1.0
DEFAULT_MAX_FETCH_DELAY = 2.0

# Degraded output
EMERGENCY_SOURCE_TAG = "emergency-fallback"
EMERGENCY_NOTICE_URL = "https://example.com/search-info"

# Domain categories, evaluated in this order. A domain can match several
# categories; the first match wins, so the order must not change.
DOMAIN_CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "news",
        ("news.", ".news", "cnn.com", "bbc.", "nytimes.com", "reuters.com"),
    ),
    (
        "academic",
        (
            ".edu",
            "scholar.",
            "academic.",
            "research.",
            "jstor.org",
            "sciencedirect.com",
        ),
    ),
    (
        "social",
        (
            "twitter.",
            "facebook.",
            "instagram.",
            "reddit.",
            "linkedin.com",
            "medium.com",
        ),
    ),
    (
        "commercial",
        ("amazon.", "ebay.", "walmart.", "shop.", "store.", "product."),
    ),
    (
        "forums",
        (
            "forum.",
            "community.",
            "discuss.",
            "stackoverflow.com",
            "quora.com",
            "forums.",
        ),
    ),
    (
        "reference",
        (
            "wikipedia.org",
            "dictionary.",
            "encyclopedia",
            "howto",
            "docs.",
            "reference.",
        ),
    ),
)
FALLBACK_CATEGORY = "other"

# Specialised searches: query suffix and the domain substrings kept afterwards
NEWS_DOMAINS: Tuple[str, ...] = (
    "news",
    "bbc.",
    "cnn.com",
    "nytimes.com",
    "reuters.com",
    "washingtonpost.com",
    "theguardian.com",
)
DEFINITION_DOMAINS: Tuple[str, ...] = (
    "wikipedia.org",
    "dictionary.",
    "merriam-webster.com",
    "britannica.com",
    "definitions",
)
HOW_TO_DOMAINS: Tuple[str, ...] = (
    "howto",
    "tutorial",
    "guide",
    "wikihow.com",
    "instructables.com",
)

TRENDING_QUERIES: Tuple[str, ...] = (
    "technology news",
    "artificial intelligence",
    "programming tutorials",
    "data science",
    "web development",
)
"""Static trending topics served by the API."""
