"""Refresh orchestrator — rebuilds and publishes the snapshot on a timer."""

from market_data_api.orchestrator.refresher import CacheRefresher

__all__ = ["CacheRefresher"]
