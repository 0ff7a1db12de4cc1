"""Config loader — reads YAML, applies MARKET_DATA_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from market_data_api.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "MARKET_DATA_DATANODE_URL": ("datanode", "base_url"),
    "MARKET_DATA_API_PORT": ("api", "port"),
    "MARKET_DATA_LOG_LEVEL": ("logging", "level"),
    "MARKET_DATA_LOG_FORMAT": ("logging", "format"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        MARKET_DATA_DATANODE_URL  -> datanode.base_url
        MARKET_DATA_API_PORT      -> api.port
        MARKET_DATA_LOG_LEVEL     -> logging.level
        MARKET_DATA_LOG_FORMAT    -> logging.format
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
