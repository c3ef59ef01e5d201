#!/usr/bin/env python
"""
Main entry point for the bot control plane.

Loads configuration and serves the control plane API.
"""

import argparse
import sys

import structlog
import uvicorn

from api.main import create_app
from config.settings import load_config

logger = structlog.get_logger()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bot control plane API server")
    parser.add_argument("--config", help="Path to JSON configuration file")
    parser.add_argument("--host", help="Bind address (overrides api.host)")
    parser.add_argument("--port", type=int, help="Bind port (overrides api.port)")
    parser.add_argument("--engine-url", help="Engine control URL (overrides engine.url)")
    parser.add_argument("--log-level", help="Log level (overrides logging.level)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the API server."""
    args = parse_args(argv)
    config = load_config(args.config)

    if args.host:
        config['api']['host'] = args.host
    if args.port:
        config['api']['port'] = args.port
    if args.engine_url:
        config['engine']['url'] = args.engine_url
    if args.log_level:
        config['logging']['level'] = args.log_level

    app = create_app(config)
    logger.info(
        "Serving bot control plane",
        host=config['api']['host'],
        port=config['api']['port'],
        engine_url=config['engine']['url']
    )
    uvicorn.run(
        app,
        host=config['api']['host'],
        port=config['api']['port'],
        log_level=str(config['logging']['level']).lower()
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
