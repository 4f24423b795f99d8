"""
Flask Application Factory

Creates and configures the Flask application.
"""

from typing import Optional

from flask import Flask
from flask_cors import CORS

from rentestimate.api.routes import SERVICE_EXTENSION, register_routes
from rentestimate.config import get_config
from rentestimate.logging_config import get_logger, setup_logging
from rentestimate.services.estimation import EstimationService

logger = get_logger(__name__)


def create_app(test_config=None, service: Optional[EstimationService] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        test_config: Optional test configuration dict.
        service: Estimation service to serve; created on first request if omitted.

    Returns:
        Configured Flask application.
    """
    config = get_config()
    setup_logging()

    app = Flask(__name__)
    app.config["DEBUG"] = config.api.debug
    if test_config:
        app.config.update(test_config)

    CORS(app)

    if service is not None:
        app.extensions[SERVICE_EXTENSION] = service

    register_routes(app)

    logger.info("Flask app created")
    return app


def run_server(host: str = None, port: int = None, debug: bool = None):
    """Run the Flask development server."""
    config = get_config()

    host = host or config.api.host
    port = port or config.api.port
    debug = debug if debug is not None else config.api.debug

    app = create_app()

    logger.info("Starting server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
