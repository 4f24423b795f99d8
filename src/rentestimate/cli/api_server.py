#!/usr/bin/env python
"""
CLI for running the Rent Estimation API Server.

Usage:
    python -m rentestimate.cli.api_server
    python -m rentestimate.cli.api_server --host 0.0.0.0 --port 8080 --preload
"""

import argparse
import sys

from rentestimate.config import get_config
from rentestimate.exceptions import ModelError
from rentestimate.logging_config import setup_logging, get_logger


def main(argv=None):
    """Main entry point for the API server CLI."""
    parser = argparse.ArgumentParser(description="Rent Estimation API Server")
    parser.add_argument("--host", default=None, help="Host to bind to (default: from config)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: from config)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument(
        "--preload",
        action="store_true",
        help="Load the price model before accepting requests",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set log level",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, force=True)
    logger = get_logger(__name__)

    config = get_config()
    host = args.host or config.api.host
    port = args.port or config.api.port
    debug = args.debug or config.api.debug

    if args.preload:
        from rentestimate.ml.model_cache import get_model_cache

        try:
            loaded = get_model_cache().get()
            logger.info("Preloaded %s model", "fallback" if loaded.is_fallback else "trained")
        except ModelError as e:
            logger.warning("Model preload failed, will retry on first request: %s", e)

    try:
        from rentestimate.api.server import run_server
        run_server(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error("Server error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
