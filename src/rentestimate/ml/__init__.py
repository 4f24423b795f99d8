"""
Machine learning modules for rent estimation.

Provides the model cache and fallback model, the feature encoder and the
prediction blender.
"""

from rentestimate.ml.metadata import ModelMetadata, fallback_metadata
from rentestimate.ml.model_cache import (
    CacheState,
    LoadedModel,
    ModelCache,
    get_model_cache,
    reset_model_cache,
)

__all__ = [
    "CacheState",
    "LoadedModel",
    "ModelCache",
    "ModelMetadata",
    "fallback_metadata",
    "get_model_cache",
    "reset_model_cache",
]
