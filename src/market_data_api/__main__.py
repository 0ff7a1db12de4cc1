"""Allow running the service as: python -m market_data_api [--config path]."""

import argparse

from market_data_api.api.runner import main

parser = argparse.ArgumentParser(description="Market data API")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
main(config_path=args.config)
