"""Cache refresher — pulls every active market from the data node, normalizes
it, and publishes one new Snapshot per cycle."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

import structlog

from market_data_api.cache import Snapshot, SnapshotCache
from market_data_api.exchange import VegaDataNodeClient
from market_data_api.models import (
    NormalizedMarket,
    OrderBookSnapshot,
    RawMarket,
    RawMarketData,
    RawOrderBook,
)
from market_data_api.normalize import normalize_market, normalize_order_book

log = structlog.get_logger("refresher")

T = TypeVar("T")

NANOS_PER_HOUR = 3600 * 1_000_000_000


class CacheRefresher:
    """Runs refresh cycles against the data node and publishes to a SnapshotCache.

    Per-call failures degrade (empty data, excluded market) instead of
    aborting the cycle; the next scheduled cycle is the retry.
    """

    def __init__(
        self,
        client: VegaDataNodeClient,
        cache: SnapshotCache,
        *,
        candle_window_hours: int = 24,
        call_timeout_s: float = 10.0,
        clock: Callable[[], int] = time.time_ns,
    ) -> None:
        self._client = client
        self._cache = cache
        self._candle_window_ns = candle_window_hours * NANOS_PER_HOUR
        self._call_timeout_s = call_timeout_s
        self._clock = clock
        self._cycle_lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    # ── Cycle ─────────────────────────────────────────────────

    async def refresh_cycle(self) -> Snapshot | None:
        """Build and publish a fresh snapshot.

        Returns the published snapshot, or None if the cycle was skipped
        (another cycle in progress, or the market listing failed).
        """
        if self._cycle_lock.locked():
            log.warning("refresh_skipped", reason="cycle already running")
            return None
        async with self._cycle_lock:
            return await self._refresh()

    async def _refresh(self) -> Snapshot | None:
        log.info("refresh_started")
        try:
            markets = await self._call(self._client.list_markets())
        except Exception:
            log.exception("market_listing_failed", keeping_generation=self._cache.generation)
            return None

        vega_time = await self._fetch("vega_time", self._client.get_vega_time(), 0)
        end_ns = self._clock()
        start_ns = end_ns - self._candle_window_ns

        normalized: list[NormalizedMarket] = []
        order_books: dict[str, OrderBookSnapshot] = {}
        for market in markets:
            result = await self._refresh_market(market, vega_time, start_ns, end_ns)
            if result is None:
                continue
            summary, book = result
            normalized.append(summary)
            order_books[summary.ticker_id] = book

        snapshot = Snapshot.build(
            normalized, order_books, published_at=datetime.now(timezone.utc),
        )
        self._cache.publish(snapshot)
        log.info(
            "refresh_complete",
            markets=len(normalized),
            excluded=len(markets) - len(normalized),
            generation=self._cache.generation,
        )
        return snapshot

    async def _refresh_market(
        self,
        market: RawMarket,
        vega_time: int,
        start_ns: int,
        end_ns: int,
    ) -> tuple[NormalizedMarket, OrderBookSnapshot] | None:
        ticker = market.ticker_id
        log.debug("refreshing_market", ticker=ticker, market_id=market.id)

        market_data = await self._fetch(
            "market_data", self._client.get_market_data(market.id), RawMarketData(),
            market_id=market.id,
        )

        asset_id = market.settlement_asset_id
        asset = None
        if asset_id:
            asset = await self._fetch(
                "asset", self._client.get_asset(asset_id), None,
                market_id=market.id, asset_id=asset_id,
            )
        if asset is None:
            log.warning("settlement_asset_not_found", market_id=market.id, ticker=ticker)
            return None

        candles = await self._fetch(
            "candles", self._client.list_candles(market.id, start_ns, end_ns), [],
            market_id=market.id,
        )
        depth = await self._fetch(
            "order_book", self._client.get_order_book(market.id), RawOrderBook(),
            market_id=market.id,
        )

        try:
            summary = normalize_market(market, market_data, candles, asset, vega_time)
            book = normalize_order_book(
                ticker,
                depth.buy,
                depth.sell,
                market.decimal_places,
                market.position_decimal_places,
            )
        except Exception:
            log.exception("normalize_failed", market_id=market.id, ticker=ticker)
            return None
        return summary, book

    async def _call(self, coro: Awaitable[T]) -> T:
        return await asyncio.wait_for(coro, timeout=self._call_timeout_s)

    async def _fetch(self, call: str, coro: Awaitable[T], default: T, **context) -> T:
        """Await one upstream call; on failure or timeout log and return *default*."""
        try:
            return await self._call(coro)
        except Exception:
            log.exception("fetch_failed", call=call, **context)
            return default

    # ── Lifecycle ─────────────────────────────────────────────

    async def run_forever(self, interval_s: float, *, immediate: bool = True) -> None:
        """Refresh every *interval_s* seconds (fixed rate, not fixed delay)."""
        loop = asyncio.get_running_loop()
        next_run = loop.time() if immediate else loop.time() + interval_s
        while True:
            delay = next_run - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            next_run += interval_s
            try:
                await self.refresh_cycle()
            except Exception:
                log.exception("refresh_cycle_error")
            # An overrun cycle doesn't queue up missed ticks.
            next_run = max(next_run, loop.time())

    def start(self, interval_s: float, *, immediate: bool = True) -> asyncio.Task:
        """Start the periodic refresh as a background task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever(interval_s, immediate=immediate))
            log.info("refresher_started", interval_s=interval_s)
        return self._task

    async def stop(self) -> None:
        """Cancel the background task, if any."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("refresher_stopped")
