"""
Fallback Regressor

Untrained single-hidden-layer network used when the trained artifact cannot be
loaded. Weights come from a seeded generator, so every process builds the same
fallback and its predictions are reproducible. Its output carries no trained
signal; the blender's comparables weighting compensates.
"""

from typing import Optional

import numpy as np

from rentestimate.core.constants import FALLBACK_HIDDEN_UNITS, FALLBACK_SEED


class FallbackRegressor:
    """Dense(hidden, relu) -> Dense(1) regressor with estimator-style predict."""

    def __init__(self, n_features: int, hidden_units: int = FALLBACK_HIDDEN_UNITS,
                 seed: Optional[int] = FALLBACK_SEED):
        if n_features <= 0 or hidden_units <= 0:
            raise ValueError("n_features and hidden_units must be positive")

        rng = np.random.default_rng(seed)
        self.n_features_in_ = n_features
        self.hidden_units = hidden_units
        self.hidden_weights_ = self._glorot(rng, n_features, hidden_units)
        self.hidden_bias_ = np.zeros(hidden_units)
        self.output_weights_ = self._glorot(rng, hidden_units, 1)
        self.output_bias_ = np.zeros(1)

    @staticmethod
    def _glorot(rng: np.random.Generator, fan_in: int, fan_out: int) -> np.ndarray:
        limit = np.sqrt(6.0 / (fan_in + fan_out))
        return rng.uniform(-limit, limit, size=(fan_in, fan_out))

    def predict(self, X) -> np.ndarray:
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        if X.shape[1] != self.n_features_in_:
            raise ValueError(
                f"Expected {self.n_features_in_} features, got {X.shape[1]}"
            )
        hidden = np.maximum(X @ self.hidden_weights_ + self.hidden_bias_, 0.0)
        return (hidden @ self.output_weights_ + self.output_bias_).ravel()
