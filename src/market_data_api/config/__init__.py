"""Configuration system."""

from market_data_api.config.loader import load_config
from market_data_api.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
