"""FastAPI application serving the published snapshot."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from market_data_api import __version__
from market_data_api.cache import SnapshotCache
from market_data_api.config.schema import AppConfig
from market_data_api.normalize import parse_failure_count
from market_data_api.orchestrator import CacheRefresher

logger = structlog.get_logger()


def create_app(
    cache: SnapshotCache,
    refresher: CacheRefresher | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Build the app around an explicitly owned cache.

    With a *refresher*, startup runs one refresh cycle before serving and
    then keeps refreshing in the background until shutdown. Request
    handlers only ever read *cache*.
    """
    config = config or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if refresher is not None:
            await refresher.refresh_cycle()
            refresher.start(config.refresh.interval_s, immediate=False)
        logger.info("api_ready", markets=len(cache.markets()), generation=cache.generation)
        try:
            yield
        finally:
            if refresher is not None:
                await refresher.stop()

    app = FastAPI(
        title="Market Data API",
        description="Normalized contract summaries and order books",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/contracts")
    async def list_contracts():
        """Every normalized market from the latest refresh, in listing order."""
        return [m.model_dump() for m in cache.markets()]

    @app.get("/orderbook/{ticker}")
    async def get_order_book(ticker: str):
        """Order book for one ticker; ``null`` if the ticker is unknown."""
        book = cache.order_book(ticker)
        if book is None:
            return None
        return book.model_dump()

    @app.get("/health")
    async def health_check():
        snapshot = cache.current()
        return {
            "status": "healthy",
            "markets": len(snapshot.markets),
            "order_books": len(snapshot.order_books),
            "generation": cache.generation,
            "published_at": snapshot.published_at.isoformat() if snapshot.published_at else None,
            "parse_failures": parse_failure_count(),
        }

    return app
