"""Market data API — normalized Vega markets and order books over HTTP."""

__version__ = "0.1.0"
