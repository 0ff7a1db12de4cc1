"""HTTP API."""

from market_data_api.api.app import create_app

__all__ = ["create_app"]
