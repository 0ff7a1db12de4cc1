"""Structured logging."""

from market_data_api.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
