"""Vega data-node client — REST gateway (API v2).

Each method is one request/response call. HTTP errors and malformed bodies
raise; callers decide how a failed fetch degrades.
"""

from __future__ import annotations

from typing import Any

import httpx

from market_data_api.models import (
    MARKET_STATE_ACTIVE,
    RawAsset,
    RawCandle,
    RawMarket,
    RawMarketData,
    RawOrderBook,
)

CANDLE_INTERVAL = "5_minutes"


def _edge_nodes(connection: dict | None) -> list[dict]:
    """Unwrap a gateway connection ``{"edges": [{"node": ...}]}``."""
    if not connection:
        return []
    return [edge["node"] for edge in connection.get("edges") or [] if edge.get("node")]


class VegaDataNodeClient:
    """Async client for a Vega data node's REST API."""

    def __init__(
        self,
        base_url: str = "http://localhost:3008",
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def _get(self, path: str, params: dict | None = None) -> Any:
        http = await self._get_http()
        resp = await http.get(f"{self.base_url}/api/v2{path}", params=params)
        resp.raise_for_status()
        return resp.json()

    async def list_markets(self) -> list[RawMarket]:
        """Active markets, in the order the data node lists them."""
        data = await self._get("/markets")
        markets = [RawMarket.model_validate(node) for node in _edge_nodes(data.get("markets"))]
        return [m for m in markets if m.state == MARKET_STATE_ACTIVE]

    async def get_market_data(self, market_id: str) -> RawMarketData:
        data = await self._get(f"/market/data/{market_id}/latest")
        return RawMarketData.model_validate(data.get("marketData") or {})

    async def get_asset(self, asset_id: str) -> RawAsset:
        data = await self._get(f"/asset/{asset_id}")
        return RawAsset.model_validate(data["asset"])

    async def get_vega_time(self) -> int:
        """Current block time in nanoseconds since the epoch."""
        data = await self._get("/vega/time")
        return int(data["timestamp"])

    async def list_candles(
        self,
        market_id: str,
        from_ns: int,
        to_ns: int,
        interval: str = CANDLE_INTERVAL,
    ) -> list[RawCandle]:
        """Trade candles for *market_id* between two nanosecond timestamps."""
        data = await self._get(
            "/candle",
            params={
                "candleId": f"trades_candle_{interval}_{market_id}",
                "fromTimestamp": from_ns,
                "toTimestamp": to_ns,
            },
        )
        return [RawCandle.model_validate(node) for node in _edge_nodes(data.get("candles"))]

    async def get_order_book(self, market_id: str) -> RawOrderBook:
        """Latest aggregated depth: ``buy`` levels are bids, ``sell`` asks."""
        data = await self._get(f"/market/depth/{market_id}/latest")
        return RawOrderBook.model_validate(data)
