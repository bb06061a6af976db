"""FastAPI application factory and entry point."""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from metasearch import __version__
from metasearch.api.routes import cache, search
from metasearch.api.schemas import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    from metasearch.api.deps import clear_providers, get_cache

    logger.info("Initializing metasearch API...")

    search_cache = get_cache()
    await search_cache.start()

    logger.info("✓ metasearch API startup complete")

    yield

    logger.info("Shutting down metasearch API...")
    await search_cache.stop()
    clear_providers()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="metasearch API",
        description="Aggregated web search across DuckDuckGo, Brave and Qwant",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(cache.router, prefix="/api/cache", tags=["cache"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    @app.get("/api/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__)

    return app


# Create default app instance
app = create_app()


def run() -> None:
    """Run the API server (CLI entry point)."""
    from metasearch.api.deps import get_config

    server = get_config().server

    parser = argparse.ArgumentParser(description="metasearch API Server")
    parser.add_argument(
        "--host",
        default=server.host,
        help=f"Host to bind to (default: {server.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=server.port,
        help=f"Port to bind to (default: {server.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    args = parser.parse_args()
    serve(args.host, args.port, args.reload)


def serve(host: str, port: int, reload: bool = False) -> None:
    """Start uvicorn on the default app."""
    from metasearch.logging_config import configure_logging

    configure_logging()
    display_host = "localhost" if host in ("0.0.0.0", "::") else host
    print(f"\n  metasearch v{__version__}")
    print(f"  API listening on: http://{display_host}:{port}/api\n")

    uvicorn.run(
        "metasearch.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run()
