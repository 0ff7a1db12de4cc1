"""Market normalizer — raw market + data + candles → NormalizedMarket.

Pure functions, no I/O. Nothing here raises on bad upstream data: missing or
unparsable fields become zero values and are counted in
``fixedpoint.parse_failure_count``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from market_data_api.models import (
    CONTRACT_TYPE_VANILLA,
    PRODUCT_FUTURES,
    PRODUCT_PERPETUAL,
    PRODUCT_SPOT,
    FundingSchedule,
    NormalizedMarket,
    RawAsset,
    RawCandle,
    RawMarket,
    RawMarketData,
)
from market_data_api.normalize.fixedpoint import (
    decode,
    parse_float,
    record_parse_failure,
    rfc3339_to_millis,
)

NANOS_PER_SECOND = 1_000_000_000

# tag key -> MarketTags attribute
_TAG_KEYS = {
    "base": "base_currency",
    "quote": "target_currency",
    "enactment": "enactment",
    "settlement": "settlement",
}


@dataclass
class MarketTags:
    """Values carried in instrument metadata tags (``key:value``)."""

    base_currency: str = ""
    target_currency: str = ""
    enactment: str = ""
    settlement: str = ""


@dataclass
class CandleSummary:
    """24h window aggregate: decoded high/low, integer volume totals."""

    high: float = 0.0
    low: float = 0.0
    volume: int = 0
    notional: int = 0


def parse_tags(tags: Sequence[str]) -> MarketTags:
    """Split each tag on its first ``:`` and pick out the known keys.

    Later tags overwrite earlier ones with the same key. Tags without a
    ``:`` or with an unknown key are ignored.
    """
    result = MarketTags()
    for tag in tags:
        key, sep, value = tag.partition(":")
        if not sep:
            continue
        attr = _TAG_KEYS.get(key)
        if attr is not None:
            setattr(result, attr, value)
    return result


def aggregate_candles(candles: Sequence[RawCandle], decimal_places: int) -> CandleSummary:
    """High/low over the window plus integer sums of volume and notional.

    A zero running high/low is treated as unset, so the first candle seeds
    both and an empty window yields 0/0.
    """
    summary = CandleSummary()
    for candle in candles:
        high = decode(candle.high, decimal_places)
        low = decode(candle.low, decimal_places)
        if summary.high == 0 or high > summary.high:
            summary.high = high
        if summary.low == 0 or low < summary.low:
            summary.low = low
        summary.volume += candle.volume
        summary.notional += candle.notional
    return summary


def seconds_to_funding(schedule: FundingSchedule, upstream_time_ns: int) -> int:
    """Seconds until the next funding trigger.

    ``every - ((now_s - initial) mod every)`` with a truncated (sign of the
    dividend) remainder. Returns 0 for a schedule with no interval.
    """
    if schedule.every <= 0:
        return 0
    now_s = _trunc_div(upstream_time_ns, NANOS_PER_SECOND)
    elapsed = now_s - schedule.initial
    remainder = abs(elapsed) % schedule.every
    if elapsed < 0:
        remainder = -remainder
    return schedule.every - remainder


def next_funding_millis(schedule: FundingSchedule, upstream_time_ns: int) -> int:
    """Epoch millis of the next funding trigger, aligned to whole seconds."""
    if schedule.every <= 0:
        return 0
    secs = seconds_to_funding(schedule, upstream_time_ns)
    return _trunc_div(upstream_time_ns + secs * NANOS_PER_SECOND, NANOS_PER_SECOND) * 1000


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def normalize_market(
    market: RawMarket,
    market_data: RawMarketData,
    candles: Sequence[RawCandle],
    asset: RawAsset,
    upstream_time_ns: int,
) -> NormalizedMarket:
    """Build the public market summary for one market."""
    dp = market.decimal_places
    pdp = market.position_decimal_places
    tags = parse_tags(market.instrument.tags)
    window = aggregate_candles(candles, dp)

    product_type = ""
    start_ts = 0
    end_ts = 0
    funding_rate = 0.0
    next_funding_ts = 0
    index_price = 0.0
    index_name = ""
    index_currency = ""

    kind = market.product_type
    if kind == "future":
        product_type = PRODUCT_FUTURES
        start_ts = rfc3339_to_millis(tags.enactment)
        end_ts = rfc3339_to_millis(tags.settlement)
    elif kind == "spot":
        product_type = PRODUCT_SPOT
    elif kind == "perpetual":
        product_type = PRODUCT_PERPETUAL
        # TWAP is quoted in the settlement asset's precision, not the market's.
        index_price = decode(market_data.external_twap, asset.decimals)
        funding_rate = parse_float(market_data.funding_rate)
        index_name = tags.base_currency
        index_currency = tags.target_currency
        start_ts = rfc3339_to_millis(tags.enactment)
        next_funding_ts = next_funding_millis(
            market.instrument.perpetual.funding_schedule, upstream_time_ns
        )
        end_ts = next_funding_ts

    last_price = decode(market_data.last_traded_price, dp)
    open_interest = decode(market_data.open_interest, pdp)
    open_interest_usd = open_interest * last_price
    if not math.isfinite(open_interest_usd):
        record_parse_failure("open_interest_usd", open_interest_usd)
        open_interest_usd = 0.0

    return NormalizedMarket(
        ticker_id=market.ticker_id,
        base_currency=tags.base_currency,
        target_currency=tags.target_currency,
        last_price=last_price,
        base_volume=decode(str(window.volume), pdp),
        target_volume=decode(str(window.notional), dp + pdp),
        bid=decode(market_data.best_bid_price, dp),
        ask=decode(market_data.best_offer_price, dp),
        high=window.high,
        low=window.low,
        product_type=product_type,
        open_interest=open_interest,
        open_interest_usd=open_interest_usd,
        index_price=index_price,
        index_name=index_name,
        index_currency=index_currency,
        creation_timestamp=start_ts,
        start_timestamp=start_ts,
        expiry_timestamp=end_ts,
        end_timestamp=end_ts,
        funding_rate=funding_rate,
        # No forecast upstream; the current rate is reported for both.
        next_funding_rate=funding_rate,
        next_funding_rate_timestamp=next_funding_ts,
        contract_type=CONTRACT_TYPE_VANILLA,
        contract_price=last_price,
        contract_price_currency=tags.target_currency,
    )
