"""Raw data-node models — Pydantic mirrors of the REST gateway's JSON.

The gateway renders protobuf messages as camelCase JSON with 64-bit integers
as strings. Only the fields the normalizers need are modelled; nested paths
are flattened with ``AliasPath``.
"""

from __future__ import annotations

from pydantic import AliasPath, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MARKET_STATE_ACTIVE = "STATE_ACTIVE"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class FundingSchedule(_WireModel):
    """First time trigger of a perpetual's settlement schedule (seconds)."""

    initial: int = 0
    every: int = 0


class RawFuture(_WireModel):
    settlement_asset: str = ""
    quote_name: str = ""


class RawSpot(_WireModel):
    base_asset: str = ""
    quote_asset: str = ""


class RawPerpetual(_WireModel):
    settlement_asset: str = ""
    quote_name: str = ""
    funding_schedule: FundingSchedule = Field(
        default_factory=FundingSchedule,
        validation_alias=AliasPath(
            "dataSourceSpecForSettlementSchedule",
            "data",
            "internal",
            "timeTrigger",
            "triggers",
            0,
        ),
    )


class RawInstrument(_WireModel):
    code: str = ""
    name: str = ""
    tags: list[str] = Field(
        default_factory=list,
        validation_alias=AliasPath("metadata", "tags"),
    )
    future: RawFuture | None = None
    spot: RawSpot | None = None
    perpetual: RawPerpetual | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v):
        return [] if v is None else v


class RawMarket(_WireModel):
    """One market definition from ``/api/v2/markets``."""

    id: str
    decimal_places: int = 0
    position_decimal_places: int = 0
    state: str = MARKET_STATE_ACTIVE
    instrument: RawInstrument = Field(
        default_factory=RawInstrument,
        validation_alias=AliasPath("tradableInstrument", "instrument"),
    )

    @property
    def ticker_id(self) -> str:
        """Public ticker: the instrument code with ``/`` separators removed."""
        return self.instrument.code.replace("/", "")

    @property
    def product_type(self) -> str | None:
        """``"future"``, ``"spot"``, ``"perpetual"`` or None if unknown."""
        if self.instrument.future is not None:
            return "future"
        if self.instrument.spot is not None:
            return "spot"
        if self.instrument.perpetual is not None:
            return "perpetual"
        return None

    @property
    def settlement_asset_id(self) -> str:
        """Asset the market settles in; spot markets use their quote asset."""
        inst = self.instrument
        if inst.future is not None:
            return inst.future.settlement_asset
        if inst.spot is not None:
            return inst.spot.quote_asset
        if inst.perpetual is not None:
            return inst.perpetual.settlement_asset
        return ""


class RawMarketData(_WireModel):
    """Latest market data; every price is a fixed-point integer string."""

    market: str = ""
    last_traded_price: str = "0"
    best_bid_price: str = "0"
    best_offer_price: str = "0"
    open_interest: str = "0"
    # Perpetual-only values live under productData.perpetualData.
    external_twap: str = Field(
        default="0",
        validation_alias=AliasPath("productData", "perpetualData", "externalTwap"),
    )
    funding_rate: str = Field(
        default="0",
        validation_alias=AliasPath("productData", "perpetualData", "fundingRate"),
    )


class RawAsset(_WireModel):
    id: str = ""
    symbol: str = Field(default="", validation_alias=AliasPath("details", "symbol"))
    decimals: int = Field(default=0, validation_alias=AliasPath("details", "decimals"))


class RawCandle(_WireModel):
    """One 5-minute trade candle; volume/notional are plain integers."""

    start: int = 0
    high: str = "0"
    low: str = "0"
    open: str = "0"
    close: str = "0"
    volume: int = 0
    notional: int = 0


class PriceLevel(_WireModel):
    price: str = "0"
    volume: int = 0
    number_of_orders: int = 0


class RawOrderBook(_WireModel):
    """Latest market depth: ``buy`` is the bid side, ``sell`` the ask side."""

    buy: list[PriceLevel] = Field(default_factory=list)
    sell: list[PriceLevel] = Field(default_factory=list)

    @field_validator("buy", "sell", mode="before")
    @classmethod
    def _null_levels(cls, v):
        return [] if v is None else v
