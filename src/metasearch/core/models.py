"""Dataclasses for the search pipeline.

Raw adapter output, normalized/scored results, page content and enrichment
payloads. Result types are frozen so a list served from the cache can be handed
to several requests without one of them corrupting another.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RawResult:
    """A result as scraped from one search engine.

    ``position_hint`` is the 0-based rank within that engine's output.
    ``relevance_score`` is only set when the engine supplies its own score.
    """

    title: str
    url: str
    snippet: str
    source_tag: str
    position_hint: int = 0
    relevance_score: Optional[float] = None


@dataclass(frozen=True)
class NormalizedResult:
    """Canonical search result shape shared by every source."""

    title: str
    url: str
    snippet: str
    relevance_score: float
    source_domain: str
    source_tag: str
    favicon_url: str
    fetched_at: datetime = field(default_factory=utc_now)
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["fetched_at"] = self.fetched_at.isoformat()
        return data


@dataclass(frozen=True)
class Heading:
    """A page heading (h1-h3) in document order."""

    level: int
    text: str


@dataclass
class PageContent:
    """Text content extracted from a fetched web page.

    Attributes:
        url: Page URL
        title: Contents of the <title> tag
        content: Main text content, paragraphs separated by blank lines
        headings: h1-h3 headings in document order
        metadata: Selected <meta> values (description, keywords, ...)
        status: "success", "http_error", "timeout", "network_error", "parse_error"
        error: Human-readable error description or None
    """

    url: str
    title: str = ""
    content: str = ""
    headings: List[Heading] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    status: str = "success"
    error: Optional[str] = None
    fetched_at: datetime = field(default_factory=utc_now)

    @property
    def ok(self) -> bool:
        return self.status == "success"


class SearchDepth(str, Enum):
    """How much page detail an enhanced search attaches to each result."""

    SHALLOW = "shallow"
    MODERATE = "moderate"
    DEEP = "deep"


@dataclass(frozen=True)
class EnrichedContent:
    """Content derived from a result's page."""

    summary: str
    headings: List[Heading] = field(default_factory=list)
    extracted_dates: List[str] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    title: str = ""
    full_content: Optional[str] = None


@dataclass(frozen=True)
class EnrichmentOutcome:
    """Success/failure variant returned by the Enricher."""

    url: str
    success: bool
    content: Optional[EnrichedContent] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class EnrichedResult:
    """A scored result together with the content scraped from its page."""

    result: NormalizedResult
    content: EnrichedContent

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["enhanced_content"] = asdict(self.content)
        return data


@dataclass
class EnhancedSearchOptions:
    """Options for ``SearchService.enhanced_search``."""

    fetch_content: bool = True
    max_content_results: int = 3
    depth: SearchDepth = SearchDepth.MODERATE

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_content_results < 0:
            raise ValueError(
                "max_content_results must be non-negative, "
                f"got {self.max_content_results}"
            )
        self.depth = SearchDepth(self.depth)


@dataclass
class EnhancedSearchResponse:
    """Plain results plus the successfully enriched subset."""

    query: str
    results: List[NormalizedResult] = field(default_factory=list)
    enriched_results: List[EnrichedResult] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class CacheStats:
    """Counters reported by ``SearchCache.stats``."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    item_count: int = 0
    keys: List[str] = field(default_factory=list)
