"""Normalization of raw data-node records into the public schema."""

from market_data_api.normalize.fixedpoint import (
    decode,
    parse_failure_count,
    parse_float,
    rfc3339_to_millis,
)
from market_data_api.normalize.market import (
    aggregate_candles,
    next_funding_millis,
    normalize_market,
    parse_tags,
    seconds_to_funding,
)
from market_data_api.normalize.orderbook import normalize_order_book

__all__ = [
    "aggregate_candles",
    "decode",
    "next_funding_millis",
    "normalize_market",
    "normalize_order_book",
    "parse_failure_count",
    "parse_float",
    "parse_tags",
    "rfc3339_to_millis",
    "seconds_to_funding",
]
