"""
Rent Estimation Engine

Estimates the monthly rent of a partially-specified property by combining a
lazily-loaded price model with live comparable listings.

Main components:
- ml.model_cache: process-wide model cache with fallback model
- ml.feature_encoder: deterministic feature vectors
- ml.blender: model/comparables blending, confidence and range
- services.estimation: request validation and fallback chain
- api: Flask REST API
- cli: Command-line interfaces

Usage:
    from rentestimate.services import EstimationService

    with EstimationService() as service:
        result = service.estimate({"bedrooms": 2, "property_type": "Flat"})
"""

__version__ = "1.0.0"

from rentestimate.config import get_config
from rentestimate.logging_config import setup_logging

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
]
