"""Upstream data-node clients."""

from market_data_api.exchange.vega import VegaDataNodeClient

__all__ = ["VegaDataNodeClient"]
