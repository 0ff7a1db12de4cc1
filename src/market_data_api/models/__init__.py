"""Pydantic domain models."""

from market_data_api.models.market import (
    CONTRACT_TYPE_VANILLA,
    PRODUCT_FUTURES,
    PRODUCT_PERPETUAL,
    PRODUCT_SPOT,
    NormalizedMarket,
    OrderBookSnapshot,
)
from market_data_api.models.raw import (
    MARKET_STATE_ACTIVE,
    FundingSchedule,
    PriceLevel,
    RawAsset,
    RawCandle,
    RawFuture,
    RawInstrument,
    RawMarket,
    RawMarketData,
    RawOrderBook,
    RawPerpetual,
    RawSpot,
)

__all__ = [
    "CONTRACT_TYPE_VANILLA",
    "FundingSchedule",
    "MARKET_STATE_ACTIVE",
    "NormalizedMarket",
    "OrderBookSnapshot",
    "PRODUCT_FUTURES",
    "PRODUCT_PERPETUAL",
    "PRODUCT_SPOT",
    "PriceLevel",
    "RawAsset",
    "RawCandle",
    "RawFuture",
    "RawInstrument",
    "RawMarket",
    "RawMarketData",
    "RawOrderBook",
    "RawPerpetual",
    "RawSpot",
]
