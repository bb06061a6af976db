#!/usr/bin/env python3
"""Command-line interface for metasearch.

Subcommands:
    search    Aggregate results for a query and print them
    enhanced  Search and attach scraped page content to the top results
    serve     Run the REST API server
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from metasearch.config_schema import MetasearchConfig
from metasearch.core.models import EnhancedSearchOptions, SearchDepth
from metasearch.core.results import categorize_results
from metasearch.logging_config import configure_logging
from metasearch.services import (
    ConfigService,
    EnrichmentService,
    SearchCache,
    SearchService,
)
from metasearch.sources import create_default_sources


def build_search_service(config: MetasearchConfig) -> SearchService:
    """Wire a SearchService with its own cache from config."""
    cache = SearchCache(
        default_ttl=config.cache.ttl_seconds, copy_values=config.cache.copy_values
    )
    enrichment = EnrichmentService(
        cache=cache,
        config=config.enrichment,
        content_ttl=config.cache.content_ttl_seconds,
    )
    return SearchService(
        sources=create_default_sources(config.search),
        cache=cache,
        enrichment_service=enrichment,
        config=config.search,
        scoring=config.scoring,
        search_ttl=config.cache.ttl_seconds,
    )


def _print_results(results, as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return
    if not results:
        print("No results.")
        return
    for i, r in enumerate(results, 1):
        marker = " [degraded]" if r.degraded else ""
        print(f"{i:2d}. {r.title} ({r.relevance_score:.2f}){marker}")
        print(f"    {r.url}")
        print(f"    {r.snippet}")


async def _run_search(service: SearchService, args: argparse.Namespace) -> int:
    if args.smart:
        results = await service.smart_search(args.query)
    else:
        results = await service.search(args.query)

    if args.categorize:
        grouped = categorize_results(results)
        if args.json:
            print(
                json.dumps(
                    {k: [r.to_dict() for r in v] for k, v in grouped.items()}, indent=2
                )
            )
        else:
            for category, items in grouped.items():
                if items:
                    print(f"== {category} ==")
                    _print_results(items, as_json=False)
        return 0

    _print_results(results, args.json)
    return 0


async def _run_enhanced(service: SearchService, args: argparse.Namespace) -> int:
    options = EnhancedSearchOptions(
        fetch_content=True,
        max_content_results=args.max_content,
        depth=SearchDepth(args.depth),
    )
    response = await service.enhanced_search(args.query, options)

    if args.json:
        print(
            json.dumps(
                {
                    "query": response.query,
                    "results": [r.to_dict() for r in response.results],
                    "enriched_results": [r.to_dict() for r in response.enriched_results],
                    "error": response.error,
                },
                indent=2,
            )
        )
        return 0

    _print_results(response.results, as_json=False)
    for item in response.enriched_results:
        print(f"\n--- {item.result.url} ---")
        print(item.content.summary or "(no summary)")
        if item.content.extracted_dates:
            print(f"Dates: {', '.join(item.content.extracted_dates)}")
        if item.content.headings:
            print("Headings: " + "; ".join(h.text for h in item.content.headings))
    if response.error:
        print(f"\nError: {response.error}", file=sys.stderr)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metasearch", description="Privacy-respecting metasearch aggregator"
    )
    parser.add_argument(
        "--config", default=None, help="Path to config.yaml (default: ~/.metasearch)"
    )
    parser.add_argument("--log-level", default=None, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Run an aggregated search")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument(
        "--categorize", action="store_true", help="Group results by site category"
    )
    search_parser.add_argument(
        "--smart",
        action="store_true",
        help="Route news/definition/how-to queries to specialised searches",
    )
    search_parser.add_argument("--json", action="store_true", help="Print JSON")

    enhanced_parser = subparsers.add_parser(
        "enhanced", help="Search and enrich the top results with page content"
    )
    enhanced_parser.add_argument("query", help="Search query")
    enhanced_parser.add_argument(
        "--depth",
        choices=[d.value for d in SearchDepth],
        default=SearchDepth.MODERATE.value,
        help="How much page detail to include (default: moderate)",
    )
    enhanced_parser.add_argument(
        "--max-content",
        type=int,
        default=3,
        help="Number of top results to enrich (default: 3)",
    )
    enhanced_parser.add_argument("--json", action="store_true", help="Print JSON")

    serve_parser = subparsers.add_parser("serve", help="Run the REST API server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = ConfigService(config_file=args.config).load()

    if args.command == "serve":
        from metasearch.api.main import serve

        serve(
            args.host or config.server.host,
            args.port or config.server.port,
            reload=args.reload,
        )
        return 0

    configure_logging(args.log_level or "WARNING")

    if not args.query.strip():
        print("Error: search query is required", file=sys.stderr)
        return 2

    service = build_search_service(config)
    if args.command == "search":
        return asyncio.run(_run_search(service, args))
    return asyncio.run(_run_enhanced(service, args))


if __name__ == "__main__":
    sys.exit(main())
