"""
Estimation Service

Top-level entry point for rent estimates. Validates the request, queries
comparable listings alongside the model path, and owns the fallback chain:

    model + comparables        -> blended estimate         (model_status=model)
    model fails, comparables   -> comparables-only estimate (fallback_to_comparables)
    model fails, no comparables-> EstimationUnavailableError

Low confidence is never an error; only invalid requests and the last case
above surface to the caller.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, List, Mapping, Optional, Union

from rentestimate.config import get_config
from rentestimate.core.models import ComparableListing, PredictionResult, PropertyAttributes
from rentestimate.exceptions import EstimationUnavailableError
from rentestimate.logging_config import get_logger
from rentestimate.ml import blender, feature_encoder
from rentestimate.ml.model_cache import ModelCache, get_model_cache
from rentestimate.services.comparables import ComparablesProvider, SQLiteComparablesProvider

logger = get_logger(__name__)


class EstimationService:
    """Drives model cache, encoder, inference and blending for one request."""

    def __init__(
        self,
        model_cache: Optional[ModelCache] = None,
        comparables: Optional[ComparablesProvider] = None,
        comparables_limit: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        config = get_config()
        self.model_cache = model_cache or get_model_cache()
        self.comparables = comparables or SQLiteComparablesProvider()
        self.comparables_limit = comparables_limit or config.estimation.comparables_limit
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or config.estimation.max_workers,
            thread_name_prefix="comparables",
        )

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _find_comparables(self, attrs: PropertyAttributes) -> List[ComparableListing]:
        return self.comparables.find(attrs.property_type, attrs.bedrooms, limit=self.comparables_limit)

    def _collect_comparables(self, pending: Future) -> List[ComparableListing]:
        try:
            return list(pending.result())
        except Exception as e:
            logger.warning("Comparables query failed, continuing without them: %s", e)
            return []

    def _predict(self, attrs: PropertyAttributes) -> float:
        loaded = self.model_cache.get()
        vector = feature_encoder.encode(attrs, loaded.metadata)
        return loaded.predict(vector)

    def estimate(self, attrs: Union[PropertyAttributes, Mapping[str, Any]]) -> PredictionResult:
        """Estimate the monthly rent for a property.

        Args:
            attrs: PropertyAttributes, or a raw request mapping to validate.

        Returns:
            PredictionResult with confidence, range and comparables used.

        Raises:
            InvalidRequestError: If property_type or bedrooms is missing or invalid.
            EstimationUnavailableError: If the model path fails and there are no comparables.
        """
        if not isinstance(attrs, PropertyAttributes):
            attrs = PropertyAttributes.from_dict(attrs)

        pending = self._executor.submit(self._find_comparables, attrs)

        try:
            raw_prediction = self._predict(attrs)
        except Exception as e:
            comparables = self._collect_comparables(pending)
            logger.warning(
                "Model prediction failed (%s: %s), falling back to %d comparables",
                type(e).__name__, e, len(comparables),
            )
            if not comparables:
                logger.error("No model and no comparables for %s/%d bedrooms",
                             attrs.property_type, attrs.bedrooms)
                raise EstimationUnavailableError(
                    f"Failed to predict price: {e}"
                ) from e
            return blender.comparables_only(comparables)

        comparables = self._collect_comparables(pending)
        result = blender.blend(raw_prediction, comparables)
        logger.info(
            "Estimated %.0f pcm for %s/%d bedrooms (confidence %.2f, %d comparables)",
            result.estimated_price, attrs.property_type, attrs.bedrooms,
            result.confidence, len(result.comparable_properties),
        )
        return result
