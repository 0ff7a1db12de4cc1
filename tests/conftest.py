"""Shared test fixtures — data-node payloads and a fake client."""

from __future__ import annotations

import asyncio
import copy

import pytest

from market_data_api.models import (
    RawAsset,
    RawCandle,
    RawMarket,
    RawMarketData,
    RawOrderBook,
)
from market_data_api.normalize.fixedpoint import reset_parse_failures

# 2024-01-01T00:00:00Z
FUNDING_INITIAL_S = 1704067200
FUNDING_EVERY_S = 28800
# initial + 3661.5s, in nanoseconds
VEGA_TIME_NS = (FUNDING_INITIAL_S + 3661) * 1_000_000_000 + 500_000_000


PERP_MARKET = {
    "id": "perp-1",
    "decimalPlaces": "2",
    "positionDecimalPlaces": "3",
    "state": "STATE_ACTIVE",
    "tradableInstrument": {
        "instrument": {
            "code": "BTC/USDT-PERP",
            "name": "Bitcoin perpetual",
            "metadata": {
                "tags": [
                    "base:BTC",
                    "quote:USDT",
                    "class:fx/crypto",
                    "enactment:2024-01-01T00:00:00Z",
                ],
            },
            "perpetual": {
                "settlementAsset": "usdt-id",
                "quoteName": "USDT",
                "dataSourceSpecForSettlementSchedule": {
                    "id": "sched-1",
                    "data": {
                        "internal": {
                            "timeTrigger": {
                                "conditions": [],
                                "triggers": [
                                    {"initial": str(FUNDING_INITIAL_S), "every": str(FUNDING_EVERY_S)},
                                ],
                            },
                        },
                    },
                },
            },
        },
    },
}

FUTURE_MARKET = {
    "id": "future-1",
    "decimalPlaces": "1",
    "positionDecimalPlaces": "2",
    "state": "STATE_ACTIVE",
    "tradableInstrument": {
        "instrument": {
            "code": "ETH/USD-DEC24",
            "metadata": {
                "tags": [
                    "base:ETH",
                    "quote:USD",
                    "enactment:2024-06-01T00:00:00Z",
                    "settlement:2024-12-27T08:00:00Z",
                ],
            },
            "future": {"settlementAsset": "usd-id", "quoteName": "USD"},
        },
    },
}

SPOT_MARKET = {
    "id": "spot-1",
    "decimalPlaces": "0",
    "positionDecimalPlaces": "0",
    "state": "STATE_ACTIVE",
    "tradableInstrument": {
        "instrument": {
            "code": "BTC/USDT",
            "metadata": {"tags": ["base:BTC", "quote:USDT"]},
            "spot": {"baseAsset": "btc-id", "quoteAsset": "usdt-id"},
        },
    },
}

PERP_MARKET_DATA = {
    "market": "perp-1",
    "lastTradedPrice": "4250000",
    "bestBidPrice": "4249900",
    "bestOfferPrice": "4250100",
    "openInterest": "1500",
    "productData": {
        "perpetualData": {
            "externalTwap": "42510000000",
            "fundingRate": "0.0001",
        },
    },
}

ASSETS = {
    "usdt-id": {"id": "usdt-id", "details": {"symbol": "USDT", "decimals": "6"}},
    "usd-id": {"id": "usd-id", "details": {"symbol": "USD", "decimals": "6"}},
}


@pytest.fixture(autouse=True)
def _clean_parse_failures():
    reset_parse_failures()
    yield
    reset_parse_failures()


@pytest.fixture
def perp_market() -> RawMarket:
    return RawMarket.model_validate(PERP_MARKET)


@pytest.fixture
def future_market() -> RawMarket:
    return RawMarket.model_validate(FUTURE_MARKET)


@pytest.fixture
def spot_market() -> RawMarket:
    return RawMarket.model_validate(SPOT_MARKET)


@pytest.fixture
def perp_market_data() -> RawMarketData:
    return RawMarketData.model_validate(PERP_MARKET_DATA)


@pytest.fixture
def usdt_asset() -> RawAsset:
    return RawAsset.model_validate(ASSETS["usdt-id"])


class FakeDataNode:
    """In-memory stand-in for VegaDataNodeClient.

    Failures are injected per call name / id; every call is recorded.
    """

    def __init__(
        self,
        markets: list[dict] | None = None,
        market_data: dict[str, dict] | None = None,
        assets: dict[str, dict] | None = None,
        candles: dict[str, list[dict]] | None = None,
        books: dict[str, dict] | None = None,
        vega_time: int = VEGA_TIME_NS,
    ):
        self.markets = copy.deepcopy(markets if markets is not None else [PERP_MARKET, FUTURE_MARKET, SPOT_MARKET])
        self.market_data = market_data if market_data is not None else {"perp-1": PERP_MARKET_DATA}
        self.assets = assets if assets is not None else ASSETS
        self.candles = candles or {}
        self.books = books or {}
        self.vega_time = vega_time
        self.fail: set[str] = set()
        self.delay: dict[str, float] = {}
        self.calls: list[tuple] = []

    async def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.delay:
            await asyncio.sleep(self.delay[name])
        if name in self.fail or (name, *args) in self.fail:
            raise RuntimeError(f"{name} unavailable")

    async def list_markets(self) -> list[RawMarket]:
        await self._enter("list_markets")
        return [RawMarket.model_validate(m) for m in self.markets]

    async def get_market_data(self, market_id: str) -> RawMarketData:
        await self._enter("get_market_data", market_id)
        return RawMarketData.model_validate(self.market_data.get(market_id, {}))

    async def get_asset(self, asset_id: str) -> RawAsset:
        await self._enter("get_asset", asset_id)
        if asset_id not in self.assets:
            raise KeyError(asset_id)
        return RawAsset.model_validate(self.assets[asset_id])

    async def get_vega_time(self) -> int:
        await self._enter("get_vega_time")
        return self.vega_time

    async def list_candles(self, market_id: str, from_ns: int, to_ns: int) -> list[RawCandle]:
        await self._enter("list_candles", market_id, from_ns, to_ns)
        return [RawCandle.model_validate(c) for c in self.candles.get(market_id, [])]

    async def get_order_book(self, market_id: str) -> RawOrderBook:
        await self._enter("get_order_book", market_id)
        return RawOrderBook.model_validate(self.books.get(market_id, {}))


@pytest.fixture
def fake_node() -> FakeDataNode:
    return FakeDataNode()
