"""
Custom Exceptions for the Rent Estimation Engine

Provides a hierarchy of exceptions for standardized error handling across all modules.

Exception Hierarchy:
    RentEstimateError (base)
    ├── ConfigurationError
    ├── DatabaseError
    │   └── DatabaseConnectionError
    ├── ArtifactError
    │   ├── ArtifactNotFoundError
    │   └── TransientArtifactError
    ├── ModelError
    │   ├── InvalidMetadataError
    │   ├── ModelUnavailableError
    │   ├── ModelLoadTimeoutError
    │   ├── FeatureEncodingError
    │   └── PredictionError
    ├── ComparablesError
    ├── InvalidRequestError
    └── EstimationUnavailableError
"""

from typing import List, Optional


class RentEstimateError(Exception):
    """Base exception for all rent estimation errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


# Configuration Errors
class ConfigurationError(RentEstimateError):
    """Raised when there's a configuration problem."""

    pass


# Database Errors
class DatabaseError(RentEstimateError):
    """Base exception for database-related errors."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when unable to connect to the database."""

    pass


# Artifact Store Errors
class ArtifactError(RentEstimateError):
    """Base exception for artifact store failures."""

    def __init__(self, message: str, key: str = None):
        self.key = key
        super().__init__(message)


class ArtifactNotFoundError(ArtifactError):
    """Raised when an artifact key does not exist in the store."""

    def __init__(self, key: str):
        super().__init__(f"Artifact not found: {key}", key=key)


class TransientArtifactError(ArtifactError):
    """Raised when the store fails for network or storage reasons."""

    pass


# ML Model Errors
class ModelError(RentEstimateError):
    """Base exception for ML model-related errors."""

    pass


class InvalidMetadataError(ModelError):
    """Raised when model metadata fails validation."""

    pass


class ModelUnavailableError(ModelError):
    """Raised when no model can be served, e.g. during a failure cooldown."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        self.retry_after = retry_after
        super().__init__(message)


class ModelLoadTimeoutError(ModelError):
    """Raised when waiting on another caller's load exceeds the bound."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:g}s waiting for model to load")


class FeatureEncodingError(ModelError):
    """Raised when a feature vector cannot be built from the metadata."""

    def __init__(self, message: str, feature: str = None):
        self.feature = feature
        super().__init__(message)


class PredictionError(ModelError):
    """Raised when a prediction fails."""

    def __init__(self, message: str, input_data: list = None):
        self.input_data = input_data
        super().__init__(message)


# Comparables Errors
class ComparablesError(RentEstimateError):
    """Raised when the comparable listings query fails."""

    pass


# Request / Estimation Errors
class InvalidRequestError(RentEstimateError):
    """Raised when an estimation request is missing or has invalid fields."""

    def __init__(
        self,
        message: str,
        required: Optional[List[str]] = None,
        received: Optional[List[str]] = None,
    ):
        self.required = list(required or [])
        self.received = list(received or [])
        super().__init__(message)


class EstimationUnavailableError(RentEstimateError):
    """Raised when neither the model nor comparables can produce an estimate."""

    pass
