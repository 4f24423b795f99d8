"""
API Routes for the Rent Estimation Service

Provides REST API endpoints for:
- Rent estimates
- Model cache health
- Model metadata
"""

from flask import Blueprint, current_app, jsonify, request

from rentestimate.exceptions import (
    EstimationUnavailableError,
    InvalidRequestError,
    ModelError,
)
from rentestimate.logging_config import get_logger
from rentestimate.services.estimation import EstimationService

logger = get_logger(__name__)

# Create blueprint
api = Blueprint("api", __name__, url_prefix="/api")

SERVICE_EXTENSION = "estimation_service"


def get_service() -> EstimationService:
    """Lazily create the app's estimation service."""
    service = current_app.extensions.get(SERVICE_EXTENSION)
    if service is None:
        service = EstimationService()
        current_app.extensions[SERVICE_EXTENSION] = service
    return service


@api.route("/estimate", methods=["POST"])
def estimate():
    """Estimate the monthly rent for a property."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        result = get_service().estimate(data)
    except InvalidRequestError as e:
        return jsonify({
            "error": e.message,
            "required": e.required,
            "received": e.received,
        }), 400
    except EstimationUnavailableError as e:
        return jsonify({"error": e.message}), 503
    except Exception as e:
        logger.error("Estimate failed: %s", e, exc_info=True)
        return jsonify({"error": f"Failed to predict price: {e}"}), 500

    return jsonify(result.to_dict())


@api.route("/health", methods=["GET"])
def health_check():
    """Report model cache health, loading the model if needed."""
    cache = get_service().model_cache
    try:
        cache.get()
    except ModelError as e:
        logger.warning("Health check failed: %s", e)

    status = cache.status()
    healthy = status["model_loaded"]
    body = {
        "status": ("degraded" if status["is_fallback"] else "healthy") if healthy else "unhealthy",
        "model": status,
    }
    return jsonify(body), 200 if healthy else 503


@api.route("/model-info", methods=["GET"])
def model_info():
    """Metadata of the model currently served."""
    try:
        loaded = get_service().model_cache.get()
    except ModelError as e:
        logger.error("Model info error: %s", e)
        return jsonify({"error": e.message}), 503

    return jsonify({
        "is_fallback": loaded.is_fallback,
        "feature_count": loaded.metadata.feature_count,
        "metadata": loaded.metadata.to_dict(),
    })


def register_routes(app) -> None:
    """Register API blueprint with the Flask app."""
    app.register_blueprint(api)
