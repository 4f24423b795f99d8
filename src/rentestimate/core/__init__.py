"""
Core modules for the rent estimation engine.

Contains data models, shared constants and database helpers.
"""

from rentestimate.core.models import (
    ComparableListing,
    ModelStatus,
    PredictionResult,
    PriceRange,
    PropertyAttributes,
)

__all__ = [
    "ComparableListing",
    "ModelStatus",
    "PredictionResult",
    "PriceRange",
    "PropertyAttributes",
]
