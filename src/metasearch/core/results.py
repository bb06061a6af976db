"""Result normalization, deduplication, scoring and categorization.

Pure functions applied by the aggregator after the sources have been queried:

    raw results -> normalize_results -> deduplicate_results -> score_results
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from metasearch.config_schema import ScoringConfig
from metasearch.core.constants import (
    AUTHORITY_DOMAIN_SUBSTRINGS,
    AUTHORITY_DOMAIN_SUFFIXES,
    DEFAULT_SNIPPET,
    DEFAULT_TITLE,
    DOMAIN_CATEGORIES,
    FALLBACK_CATEGORY,
    FAVICON_URL_TEMPLATE,
)
from metasearch.core.models import NormalizedResult, RawResult, utc_now

logger = logging.getLogger(__name__)

DEFAULT_SCORING = ScoringConfig()


def extract_domain(url: str) -> str:
    """Extract the host from a URL.

    Args:
        url: URL to parse

    Returns:
        Lower-cased hostname, or the raw URL string if it cannot be parsed
    """
    try:
        parsed = urlparse(url)
        if parsed.scheme and parsed.hostname:
            return parsed.hostname
    except ValueError as e:
        logger.warning(f"Failed to parse URL {url!r}: {e}")
        return url
    logger.warning(f"Failed to parse URL {url!r}: no scheme or host")
    return url


def normalize_results(
    raw_results: Iterable[RawResult],
    scoring: Optional[ScoringConfig] = None,
) -> List[NormalizedResult]:
    """Map raw adapter output to the canonical result shape.

    Entries without a URL are dropped. Missing titles and snippets get
    placeholder text. When the adapter did not supply a score, the initial
    score decays with the result's position in that adapter's output; it may
    go negative here and is clamped later by ``score_results``.

    Args:
        raw_results: Results as returned by the source adapters
        scoring: Scoring weights (position decay)

    Returns:
        Normalized results in input order
    """
    scoring = scoring or DEFAULT_SCORING
    normalized: List[NormalizedResult] = []

    for raw in raw_results:
        if not raw.url:
            logger.warning(f"Result missing URL, skipping: {raw.title!r}")
            continue

        domain = extract_domain(raw.url)
        if raw.relevance_score is not None:
            score = raw.relevance_score
        else:
            score = 1 - scoring.position_decay * raw.position_hint

        normalized.append(
            NormalizedResult(
                title=raw.title or DEFAULT_TITLE,
                url=raw.url,
                snippet=raw.snippet or DEFAULT_SNIPPET,
                relevance_score=score,
                source_domain=domain,
                source_tag=raw.source_tag or domain,
                favicon_url=FAVICON_URL_TEMPLATE.format(domain=domain),
                fetched_at=utc_now(),
            )
        )

    return normalized


def dedup_key(url: str) -> str:
    """Key under which two results count as the same target.

    Host plus path, ignoring query string and fragment. URLs that do not
    parse use the full string.
    """
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError:
        return url
    if not parsed.scheme or not host:
        return url
    return host + (parsed.path or "/")


def deduplicate_results(results: Sequence[NormalizedResult]) -> List[NormalizedResult]:
    """Remove results pointing at the same host and path.

    The first occurrence wins even when a later duplicate would score higher,
    so the order in which sources are combined decides which copy survives.

    Args:
        results: Normalized results

    Returns:
        Results with duplicates removed, first-seen order preserved
    """
    seen = set()
    unique: List[NormalizedResult] = []
    for result in results:
        key = dedup_key(result.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)

    if len(unique) < len(results):
        logger.debug(f"Removed {len(results) - len(unique)} duplicate results")
    return unique


def is_authority_domain(domain: str) -> bool:
    """Check whether a domain gets the authority boost."""
    domain = domain.lower()
    return any(s in domain for s in AUTHORITY_DOMAIN_SUBSTRINGS) or domain.endswith(
        AUTHORITY_DOMAIN_SUFFIXES
    )


def score_result(
    result: NormalizedResult,
    query: str,
    scoring: Optional[ScoringConfig] = None,
) -> float:
    """Compute the final relevance score of a single result.

    Args:
        result: Result to score (its current score is the starting point)
        query: Search query
        scoring: Scoring weights

    Returns:
        Score clamped to [0, 1]
    """
    scoring = scoring or DEFAULT_SCORING
    query_lower = query.lower()
    words = [w for w in query_lower.split() if len(w) >= scoring.min_word_length]

    score = result.relevance_score
    title = result.title.lower()
    if query_lower and query_lower in title:
        score += scoring.exact_title_boost
    else:
        score += scoring.title_word_boost * sum(1 for w in words if w in title)

    snippet = result.snippet.lower()
    score += scoring.snippet_word_boost * sum(1 for w in words if w in snippet)

    if is_authority_domain(result.source_domain):
        score += scoring.authority_boost

    return min(1.0, max(0.0, score))


def score_results(
    results: Sequence[NormalizedResult],
    query: str,
    scoring: Optional[ScoringConfig] = None,
) -> List[NormalizedResult]:
    """Rescore results against the query and sort them.

    Sorting is stable, so results with equal scores keep their input order.

    Args:
        results: Deduplicated results
        query: Normalized search query
        scoring: Scoring weights

    Returns:
        New list of rescored results, highest score first
    """
    rescored = [
        replace(r, relevance_score=score_result(r, query, scoring)) for r in results
    ]
    return sorted(rescored, key=lambda r: r.relevance_score, reverse=True)


def categorize_result(result: NormalizedResult) -> str:
    """Return the category tag for a result's domain.

    Categories are checked in a fixed order (news, academic, social,
    commercial, forums, reference); the first matching one wins.
    """
    domain = extract_domain(result.url).lower()
    for category, needles in DOMAIN_CATEGORIES:
        if any(needle in domain for needle in needles):
            return category
    return FALLBACK_CATEGORY


def categorize_results(
    results: Iterable[NormalizedResult],
) -> Dict[str, List[NormalizedResult]]:
    """Group results by domain category.

    Returns:
        Dict with every category key present (possibly empty), in table order
    """
    categories: Dict[str, List[NormalizedResult]] = {
        name: [] for name, _ in DOMAIN_CATEGORIES
    }
    categories[FALLBACK_CATEGORY] = []
    for result in results:
        categories[categorize_result(result)].append(result)
    return categories


def filter_by_domains(
    results: Iterable[NormalizedResult], needles: Sequence[str]
) -> List[NormalizedResult]:
    """Keep results whose domain contains any of the given substrings."""
    return [
        r
        for r in results
        if any(needle in extract_domain(r.url).lower() for needle in needles)
    ]
