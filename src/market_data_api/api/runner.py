"""API server runner — wires client, cache, refresher and app, then serves."""

from __future__ import annotations

import uvicorn
import structlog

from market_data_api.api.app import create_app
from market_data_api.cache import SnapshotCache
from market_data_api.config.loader import load_config
from market_data_api.exchange import VegaDataNodeClient
from market_data_api.logging.setup import setup_logging
from market_data_api.orchestrator import CacheRefresher

logger = structlog.get_logger()


def main(config_path: str | None = None) -> None:
    """Run the HTTP server with a background cache refresh."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)

    client = VegaDataNodeClient(
        base_url=config.datanode.base_url,
        timeout_s=config.datanode.timeout_s,
    )
    cache = SnapshotCache()
    refresher = CacheRefresher(
        client,
        cache,
        candle_window_hours=config.refresh.candle_window_hours,
        call_timeout_s=config.datanode.timeout_s,
    )
    app = create_app(cache, refresher=refresher, config=config)

    logger.info(
        "starting_api_server",
        host=config.api.host,
        port=config.api.port,
        datanode=config.datanode.base_url,
    )

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None,  # Use our structlog setup
        )
    except Exception as e:
        logger.error("api_server_failed", error=str(e))
        raise


if __name__ == "__main__":
    main()
