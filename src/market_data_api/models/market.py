"""Normalized output models — the records served by the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

PRODUCT_FUTURES = "Futures"
PRODUCT_SPOT = "Spot"
PRODUCT_PERPETUAL = "Perpetual"

CONTRACT_TYPE_VANILLA = "Vanilla"


class NormalizedMarket(BaseModel):
    """One flattened market summary.

    Fields that don't apply to the market's product type are zero-valued,
    never omitted.
    """

    model_config = ConfigDict(frozen=True)

    ticker_id: str
    base_currency: str = ""
    target_currency: str = ""
    last_price: float = 0.0
    base_volume: float = 0.0
    target_volume: float = 0.0
    bid: float = 0.0
    ask: float = 0.0
    high: float = 0.0
    low: float = 0.0
    product_type: str = ""
    open_interest: float = 0.0
    open_interest_usd: float = 0.0
    index_price: float = 0.0
    index_name: str = ""
    index_currency: str = ""
    creation_timestamp: int = 0
    start_timestamp: int = 0
    expiry_timestamp: int = 0
    end_timestamp: int = 0
    funding_rate: float = 0.0
    next_funding_rate: float = 0.0
    next_funding_rate_timestamp: int = 0
    contract_type: str = CONTRACT_TYPE_VANILLA
    contract_price: float = 0.0
    contract_price_currency: str = ""


class OrderBookSnapshot(BaseModel):
    """Decoded depth for one ticker as ``[quantity, price]`` pairs."""

    model_config = ConfigDict(frozen=True)

    ticker_id: str
    bids: list[list[float]] = Field(default_factory=list)
    asks: list[list[float]] = Field(default_factory=list)
