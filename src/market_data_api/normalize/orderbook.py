"""Order-book normalizer — raw price levels → ``[quantity, price]`` pairs."""

from __future__ import annotations

from typing import Sequence

from market_data_api.models import OrderBookSnapshot, PriceLevel
from market_data_api.normalize.fixedpoint import decode


def decode_levels(
    levels: Sequence[PriceLevel] | None,
    decimal_places: int,
    position_decimal_places: int,
) -> list[list[float]]:
    """Decode levels in upstream order; no re-sorting."""
    return [
        [decode(str(level.volume), position_decimal_places), decode(level.price, decimal_places)]
        for level in levels or ()
    ]


def normalize_order_book(
    ticker_id: str,
    bids: Sequence[PriceLevel] | None,
    asks: Sequence[PriceLevel] | None,
    decimal_places: int,
    position_decimal_places: int,
) -> OrderBookSnapshot:
    return OrderBookSnapshot(
        ticker_id=ticker_id,
        bids=decode_levels(bids, decimal_places, position_decimal_places),
        asks=decode_levels(asks, decimal_places, position_decimal_places),
    )
