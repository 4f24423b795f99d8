"""
Model Cache

Owns at most one loaded price model per process. The first caller loads the
artifact from the artifact store; callers that arrive while that load is in
flight wait on a shared future resolved once by the loader, bounded by a fixed
timeout. When the artifact cannot be loaded the cache degrades to a
deterministic fallback model instead of blocking future requests, and a
failure cooldown rate-limits retries against the store.

State machine:
    EMPTY -> LOADING -> READY            (artifact or fallback)
                     -> FAILED_COOLDOWN  (artifact and fallback both failed)

Usage:
    from rentestimate.ml.model_cache import get_model_cache

    loaded = get_model_cache().get()
    price = loaded.predict(vector)
"""

import io
import math
import threading
import time
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

import joblib
import numpy as np
import pandas as pd
from sklearn.exceptions import NotFittedError
from sklearn.utils.validation import check_is_fitted

from rentestimate.config import get_config
from rentestimate.exceptions import (
    ModelError,
    ModelLoadTimeoutError,
    ModelUnavailableError,
    PredictionError,
)
from rentestimate.logging_config import get_logger
from rentestimate.ml.artifact_store import ArtifactStore, LocalArtifactStore
from rentestimate.ml.fallback import FallbackRegressor
from rentestimate.ml.metadata import ModelMetadata, fallback_metadata

logger = get_logger(__name__)


class CacheState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    FAILED_COOLDOWN = "failed_cooldown"


class LoadedModel:
    """Inference handle paired with the metadata it was built against.

    Read-only once constructed; shared by every caller of the cache.
    """

    def __init__(self, estimator: Any, metadata: ModelMetadata, is_fallback: bool = False):
        self._estimator = estimator
        self.metadata = metadata
        self.is_fallback = is_fallback

    def _as_input(self, vector: Sequence[float]):
        row = np.asarray([list(vector)], dtype=float)
        # Estimators fitted on a DataFrame expect the same column names back
        if hasattr(self._estimator, "feature_names_in_"):
            return pd.DataFrame(row, columns=list(self.metadata.feature_names))
        return row

    def predict(self, vector: Sequence[float]) -> float:
        """Predict a monthly rent from a normalized feature vector.

        Raises:
            PredictionError: If inference fails or returns a non-finite value.
        """
        if len(vector) != self.metadata.feature_count:
            raise PredictionError(
                f"Expected {self.metadata.feature_count} features, got {len(vector)}",
                input_data=list(vector),
            )
        try:
            output = np.asarray(self._estimator.predict(self._as_input(vector))).ravel()
            value = float(output[0])
        except Exception as e:
            raise PredictionError(f"Inference failed: {e}", input_data=list(vector)) from e

        if not math.isfinite(value):
            raise PredictionError(f"Model returned non-finite prediction: {value}",
                                  input_data=list(vector))
        return value


def deserialize_model(raw: bytes, metadata: ModelMetadata) -> LoadedModel:
    """Turn joblib bytes into a LoadedModel checked against its metadata.

    Raises:
        ModelError: If the object cannot serve predictions for this metadata.
    """
    try:
        estimator = joblib.load(io.BytesIO(raw))
    except Exception as e:
        raise ModelError(f"Failed to deserialize model: {e}") from e

    if not callable(getattr(estimator, "predict", None)):
        raise ModelError(f"Deserialized object {type(estimator).__name__} has no predict()")

    if hasattr(estimator, "fit"):
        try:
            check_is_fitted(estimator)
        except NotFittedError as e:
            raise ModelError("Model artifact contains an unfitted estimator") from e

    n_features = getattr(estimator, "n_features_in_", None)
    if n_features is not None and int(n_features) != metadata.feature_count:
        raise ModelError(
            f"Model expects {n_features} features but metadata lists {metadata.feature_count}"
        )

    return LoadedModel(estimator, metadata)


def build_fallback_model() -> LoadedModel:
    """Untrained minimal model paired with the hard-coded fallback metadata."""
    metadata = fallback_metadata()
    return LoadedModel(FallbackRegressor(metadata.feature_count), metadata, is_fallback=True)


class ModelCache:
    """Process-wide, thread-safe holder of the price model."""

    def __init__(
        self,
        store: ArtifactStore,
        model_key: Optional[str] = None,
        metadata_key: Optional[str] = None,
        failure_cooldown: Optional[float] = None,
        wait_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        fallback_factory: Callable[[], LoadedModel] = build_fallback_model,
    ):
        config = get_config()
        self.store = store
        self.model_key = model_key or config.artifacts.model_key
        self.metadata_key = metadata_key or config.artifacts.metadata_key
        self.failure_cooldown = (
            config.model_cache.failure_cooldown_seconds if failure_cooldown is None
            else failure_cooldown
        )
        self.wait_timeout = (
            config.model_cache.load_wait_timeout if wait_timeout is None else wait_timeout
        )
        self._clock = clock
        self._fallback_factory = fallback_factory

        # Guards every field below
        self._lock = threading.Lock()
        self._state = CacheState.EMPTY
        self._model: Optional[LoadedModel] = None
        self._pending: Optional[Future] = None
        self._last_failure_at: Optional[float] = None
        self._last_failure_time: Optional[str] = None
        self._last_error: Optional[str] = None
        self._loaded_at: Optional[str] = None
        self._load_attempts = 0

    @property
    def state(self) -> CacheState:
        return self._state

    def _cooldown_remaining(self, now: float) -> float:
        if self._last_failure_at is None:
            return 0.0
        return max(0.0, self.failure_cooldown - (now - self._last_failure_at))

    def get(self) -> LoadedModel:
        """Return the cached model, loading it on first use.

        Raises:
            ModelUnavailableError: During the cooldown after a total load failure.
            ModelLoadTimeoutError: If another caller's load does not finish in time.
        """
        model = self._model
        if model is not None and not model.is_fallback:
            return model

        with self._lock:
            model = self._model
            remaining = self._cooldown_remaining(self._clock())

            if self._state is CacheState.LOADING:
                if model is not None:
                    # Retrying the artifact while a fallback is serving
                    return model
                pending = self._pending
                is_loader = False
            elif self._state is CacheState.READY and (not model.is_fallback or remaining > 0):
                return model
            elif self._state is CacheState.FAILED_COOLDOWN and remaining > 0:
                logger.debug("Model load refused, cooldown has %.1fs left", remaining)
                raise ModelUnavailableError(
                    "Recent model load attempt failed, try again later",
                    retry_after=remaining,
                )
            else:
                is_loader = True
                pending = Future()
                self._pending = pending
                self._state = CacheState.LOADING
                self._load_attempts += 1

        if is_loader:
            return self._load(pending)
        return self._wait(pending)

    def _wait(self, pending: Future) -> LoadedModel:
        try:
            return pending.result(timeout=self.wait_timeout)
        except FutureTimeoutError:
            logger.warning("Timed out after %.1fs waiting for model load", self.wait_timeout)
            raise ModelLoadTimeoutError(self.wait_timeout)

    def _load_artifact(self) -> LoadedModel:
        raw_model = self.store.fetch_model(self.model_key)
        metadata = ModelMetadata.from_json(self.store.fetch_metadata(self.metadata_key))
        return deserialize_model(raw_model, metadata)

    def _load(self, pending: Future) -> LoadedModel:
        logger.info("Loading model artifact %s", self.model_key)
        try:
            loaded = self._load_artifact()
        except Exception as e:
            logger.warning("Failed to load model artifact %s: %s", self.model_key, e)
            return self._degrade(pending, e)
        except BaseException as e:
            self._abort(pending, e)
            raise

        with self._lock:
            self._model = loaded
            self._state = CacheState.READY
            self._pending = None
            self._loaded_at = datetime.now().isoformat()
            self._last_failure_at = None
            self._last_failure_time = None
            self._last_error = None
        pending.set_result(loaded)
        logger.info("Model loaded with %d features", loaded.metadata.feature_count)
        return loaded

    def _degrade(self, pending: Future, error: Exception) -> LoadedModel:
        """Serve a fallback after a failed load, starting the cooldown."""
        current = self._model
        try:
            fallback = current if current is not None else self._fallback_factory()
        except Exception as fe:
            logger.error("Failed to create fallback model: %s", fe, exc_info=True)
            with self._lock:
                self._state = CacheState.FAILED_COOLDOWN
                self._pending = None
                self._last_failure_at = self._clock()
                self._last_failure_time = datetime.now().isoformat()
                self._last_error = str(error)
            exc = ModelUnavailableError("Failed to load or create model",
                                        retry_after=self.failure_cooldown)
            pending.set_exception(exc)
            raise exc from fe

        with self._lock:
            self._model = fallback
            self._state = CacheState.READY
            self._pending = None
            self._last_failure_at = self._clock()
            self._last_failure_time = datetime.now().isoformat()
            self._last_error = str(error)
            if current is None:
                self._loaded_at = datetime.now().isoformat()
        pending.set_result(fallback)
        if current is None:
            logger.warning("Serving fallback model; next artifact retry in %.0fs",
                           self.failure_cooldown)
        return fallback

    def _abort(self, pending: Future, error: BaseException) -> None:
        with self._lock:
            self._state = CacheState.READY if self._model is not None else CacheState.EMPTY
            self._pending = None
        pending.set_exception(ModelUnavailableError(f"Model load interrupted: {error!r}"))

    def status(self) -> Dict[str, Any]:
        """Snapshot of the cache for health reporting."""
        with self._lock:
            model = self._model
            return {
                "state": self._state.value,
                "model_loaded": model is not None,
                "is_fallback": bool(model and model.is_fallback),
                "feature_names": list(model.metadata.feature_names) if model else [],
                "loaded_at": self._loaded_at,
                "last_failure_at": self._last_failure_time,
                "last_error": self._last_error,
                "cooldown_remaining": round(self._cooldown_remaining(self._clock()), 1),
                "load_attempts": self._load_attempts,
            }


_cache: Optional[ModelCache] = None
_cache_lock = threading.Lock()


def get_model_cache() -> ModelCache:
    """Get the process-wide model cache, built from config on first use."""
    global _cache
    with _cache_lock:
        if _cache is None:
            _cache = ModelCache(LocalArtifactStore())
        return _cache


def reset_model_cache() -> None:
    """Drop the process-wide model cache (useful for testing)."""
    global _cache
    with _cache_lock:
        _cache = None
