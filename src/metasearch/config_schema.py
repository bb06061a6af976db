"""Configuration schema and default values for metasearch."""

from dataclasses import asdict, dataclass, field, fields
from typing import List, Optional

from metasearch.core.constants import (
    AUTHORITY_DOMAIN_BOOST,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_CONTENT_TTL_SECONDS,
    DEFAULT_FALLBACK_ATTEMPTS,
    DEFAULT_FALLBACK_BASE_DELAY,
    DEFAULT_MAX_CONTENT_RESULTS,
    DEFAULT_MAX_FETCH_DELAY,
    DEFAULT_MAX_REQUEST_DELAY,
    DEFAULT_MAX_RESULTS,
    DEFAULT_MIN_FETCH_DELAY,
    DEFAULT_MIN_REQUEST_DELAY,
    DEFAULT_SOURCE_TIMEOUT,
    EXACT_TITLE_MATCH_BOOST,
    MAX_CONTENT_CHARS,
    MIN_QUERY_WORD_LENGTH,
    MIN_SUMMARY_PARAGRAPH_CHARS,
    POSITION_SCORE_DECAY,
    SNIPPET_WORD_MATCH_BOOST,
    SUMMARY_PARAGRAPHS,
    TITLE_WORD_MATCH_BOOST,
)


@dataclass
class SearchConfig:
    """Aggregation and source adapter settings."""

    max_results: int = DEFAULT_MAX_RESULTS

    # Per-request timeout for each search engine (seconds)
    source_timeout: int = DEFAULT_SOURCE_TIMEOUT

    # Randomized delay before each engine request (seconds)
    min_request_delay: float = DEFAULT_MIN_REQUEST_DELAY
    max_request_delay: float = DEFAULT_MAX_REQUEST_DELAY

    # Primary fallback source: attempts and linear backoff base (seconds)
    fallback_attempts: int = DEFAULT_FALLBACK_ATTEMPTS
    fallback_base_delay: float = DEFAULT_FALLBACK_BASE_DELAY

    # Upper bound on the parallel fan-out phase (seconds); None disables it
    search_timeout: Optional[float] = None

    # Proxy URLs (e.g. "http://proxy1.example.com:8080"); empty = direct
    proxies: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_results <= 0:
            raise ValueError(f"max_results must be positive, got {self.max_results}")
        if self.fallback_attempts < 1:
            raise ValueError(
                f"fallback_attempts must be at least 1, got {self.fallback_attempts}"
            )
        if self.min_request_delay < 0 or self.max_request_delay < self.min_request_delay:
            raise ValueError(
                "request delay window is invalid: "
                f"({self.min_request_delay}, {self.max_request_delay})"
            )


@dataclass
class CacheConfig:
    """In-memory cache settings."""

    ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    content_ttl_seconds: int = DEFAULT_CONTENT_TTL_SECONDS

    # Deep-copy values on set/get instead of storing references
    copy_values: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if self.ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {self.ttl_seconds}")
        if self.content_ttl_seconds < 0:
            raise ValueError(
                f"content_ttl_seconds must be >= 0, got {self.content_ttl_seconds}"
            )


@dataclass
class ScoringConfig:
    """Relevance scoring weights.

    These are tuning values, not derived quantities. Defaults reproduce the
    original ranking behaviour.
    """

    position_decay: float = POSITION_SCORE_DECAY
    exact_title_boost: float = EXACT_TITLE_MATCH_BOOST
    title_word_boost: float = TITLE_WORD_MATCH_BOOST
    snippet_word_boost: float = SNIPPET_WORD_MATCH_BOOST
    authority_boost: float = AUTHORITY_DOMAIN_BOOST
    min_word_length: int = MIN_QUERY_WORD_LENGTH


@dataclass
class EnrichmentConfig:
    """Page content enrichment settings."""

    max_content_results: int = DEFAULT_MAX_CONTENT_RESULTS
    max_content_chars: int = MAX_CONTENT_CHARS
    min_paragraph_chars: int = MIN_SUMMARY_PARAGRAPH_CHARS
    summary_paragraphs: int = SUMMARY_PARAGRAPHS
    fetch_timeout: int = DEFAULT_SOURCE_TIMEOUT
    min_fetch_delay: float = DEFAULT_MIN_FETCH_DELAY
    max_fetch_delay: float = DEFAULT_MAX_FETCH_DELAY


@dataclass
class ServerConfig:
    """REST server settings."""

    host: str = "0.0.0.0"
    port: int = 3001


@dataclass
class MetasearchConfig:
    """Main configuration for metasearch."""

    search: SearchConfig
    cache: CacheConfig
    scoring: ScoringConfig
    enrichment: EnrichmentConfig
    server: ServerConfig

    def to_dict(self) -> dict:
        """Convert config to dictionary for YAML serialization."""
        return {
            "search": asdict(self.search),
            "cache": asdict(self.cache),
            "scoring": asdict(self.scoring),
            "enrichment": asdict(self.enrichment),
            "server": asdict(self.server),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MetasearchConfig":
        """Create config from dictionary (loaded from YAML)."""

        def _filter(cls_, data_):
            """Filter dict to only include known dataclass fields."""
            known = {f.name for f in fields(cls_)}
            return {k: v for k, v in (data_ or {}).items() if k in known}

        return cls(
            search=SearchConfig(**_filter(SearchConfig, data.get("search"))),
            cache=CacheConfig(**_filter(CacheConfig, data.get("cache"))),
            scoring=ScoringConfig(**_filter(ScoringConfig, data.get("scoring"))),
            enrichment=EnrichmentConfig(
                **_filter(EnrichmentConfig, data.get("enrichment"))
            ),
            server=ServerConfig(**_filter(ServerConfig, data.get("server"))),
        )

    @classmethod
    def create_default(cls) -> "MetasearchConfig":
        """Create default configuration."""
        return cls(
            search=SearchConfig(),
            cache=CacheConfig(),
            scoring=ScoringConfig(),
            enrichment=EnrichmentConfig(),
            server=ServerConfig(),
        )
