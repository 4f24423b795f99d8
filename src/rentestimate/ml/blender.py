"""
Prediction Blender

Combines a raw model prediction with comparable-listing prices into the final
estimate, a confidence score and a price range. Pure functions, no I/O.
"""

import math
from typing import Sequence

from rentestimate.core.constants import (
    BASE_CONFIDENCE,
    COMPARABLES_ONLY_CONFIDENCE,
    COMPARABLES_RANGE_HIGH_FACTOR,
    COMPARABLES_RANGE_LOW_FACTOR,
    COMPARABLES_WEIGHT,
    CONFIDENCE_PER_COMPARABLE,
    MAX_CONFIDENCE,
    MIN_RANGE_WIDTH,
    MODEL_ONLY_CONFIDENCE,
    MODEL_WEIGHT,
    RANGE_WIDTH_SCALE,
    ROUNDING_STEP,
)
from rentestimate.config import MAX_COMPARABLES
from rentestimate.core.models import ComparableListing, ModelStatus, PredictionResult, PriceRange
from rentestimate.exceptions import EstimationUnavailableError


def round_to_nearest_ten(value: float) -> float:
    """Round to the nearest multiple of 10, halves rounding up.

    Example:
        >>> round_to_nearest_ten(1484.9)
        1480.0
        >>> round_to_nearest_ten(1485)
        1490.0
    """
    return float(math.floor(value / ROUNDING_STEP + 0.5) * ROUNDING_STEP)


def confidence_for(comparable_count: int) -> float:
    """Confidence grows with the number of comparables, capped below certainty."""
    if comparable_count <= 0:
        return MODEL_ONLY_CONFIDENCE
    return min(MAX_CONFIDENCE, BASE_CONFIDENCE + CONFIDENCE_PER_COMPARABLE * comparable_count)


def range_width(confidence: float) -> float:
    """Fractional half-width of the price range: 0.5 at zero confidence, 0.1 at full."""
    return (1 - confidence) * RANGE_WIDTH_SCALE + MIN_RANGE_WIDTH


def average_price(comparables: Sequence[ComparableListing]) -> float:
    return sum(c.price_per_month for c in comparables) / len(comparables)


def blend(raw_prediction: float, comparables: Sequence[ComparableListing]) -> PredictionResult:
    """Blend a model prediction with comparable listings.

    With no comparables the model stands alone at confidence 0.7. Otherwise the
    estimate is 60% model and 40% comparables average.

    Args:
        raw_prediction: Model output in price per month.
        comparables: Up to 5 comparable listings; extras are ignored.

    Returns:
        PredictionResult with ``model_status`` set to ``model``.
    """
    comparables = list(comparables)[:MAX_COMPARABLES]

    if comparables:
        final = raw_prediction * MODEL_WEIGHT + average_price(comparables) * COMPARABLES_WEIGHT
    else:
        final = raw_prediction
    confidence = confidence_for(len(comparables))

    final = round_to_nearest_ten(final)
    width = range_width(confidence)
    # sorted() keeps min <= final <= max even for a negative raw prediction
    low, high = sorted((
        round_to_nearest_ten(final * (1 - width)),
        round_to_nearest_ten(final * (1 + width)),
    ))

    return PredictionResult(
        estimated_price=final,
        confidence=confidence,
        price_range=PriceRange(min=low, max=high),
        comparable_properties=comparables,
        model_status=ModelStatus.MODEL,
    )


def comparables_only(comparables: Sequence[ComparableListing]) -> PredictionResult:
    """Estimate from comparables alone, used when the model path fails.

    The range spans 90% of the cheapest to 110% of the dearest comparable.

    Raises:
        EstimationUnavailableError: If there are no comparables.
    """
    comparables = list(comparables)[:MAX_COMPARABLES]
    if not comparables:
        raise EstimationUnavailableError("No model and no comparable listings available")

    prices = [c.price_per_month for c in comparables]
    return PredictionResult(
        estimated_price=round_to_nearest_ten(average_price(comparables)),
        confidence=COMPARABLES_ONLY_CONFIDENCE,
        price_range=PriceRange(
            min=round_to_nearest_ten(min(prices) * COMPARABLES_RANGE_LOW_FACTOR),
            max=round_to_nearest_ten(max(prices) * COMPARABLES_RANGE_HIGH_FACTOR),
        ),
        comparable_properties=comparables,
        model_status=ModelStatus.FALLBACK_TO_COMPARABLES,
    )
