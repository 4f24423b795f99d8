"""
Unit tests for blender module.
"""

import pytest

from rentestimate.core.models import ComparableListing, ModelStatus
from rentestimate.exceptions import EstimationUnavailableError
from rentestimate.ml.blender import (
    blend,
    comparables_only,
    confidence_for,
    range_width,
    round_to_nearest_ten,
)


def _comps(*prices):
    return [ComparableListing(price_per_month=p, bedrooms=2, property_type="Flat") for p in prices]


class TestRoundToNearestTen:
    """Tests for round_to_nearest_ten function."""

    def test_rounds_down(self):
        assert round_to_nearest_ten(1484.9) == 1480

    def test_half_rounds_up(self):
        assert round_to_nearest_ten(1485) == 1490
        assert round_to_nearest_ten(1475) == 1480

    def test_idempotent_on_multiples_of_ten(self):
        for value in (0, 10, 1400, 1480, 123450):
            assert round_to_nearest_ten(value) == value
            assert round_to_nearest_ten(round_to_nearest_ten(value + 3)) == round_to_nearest_ten(value + 3)


class TestConfidence:
    """Tests for confidence_for and range_width."""

    def test_no_comparables(self):
        assert confidence_for(0) == 0.7

    def test_monotonic_and_capped(self):
        values = [confidence_for(n) for n in range(1, 6)]
        assert values == sorted(values)
        assert values[0] == pytest.approx(0.58)
        assert values[-1] == pytest.approx(0.9)
        assert confidence_for(10) == 0.9

    def test_range_width_bounds(self):
        assert range_width(1.0) == pytest.approx(0.1)
        assert range_width(0.0) == pytest.approx(0.5)
        assert range_width(0.7) == pytest.approx(0.22)


class TestBlend:
    """Tests for blend function."""

    def test_model_only(self):
        result = blend(1400.0, [])
        assert result.estimated_price == 1400
        assert result.confidence == 0.7
        assert result.price_range.min == 1090
        assert result.price_range.max == 1710
        assert result.comparable_properties == []
        assert result.model_status is ModelStatus.MODEL

    def test_five_comparables(self):
        result = blend(1400.0, _comps(1500, 1550, 1600, 1650, 1700))
        assert result.estimated_price == 1480
        assert result.confidence == pytest.approx(0.9)
        assert result.price_range.min == 1270
        assert result.price_range.max == 1690
        assert len(result.comparable_properties) == 5

    def test_rounds_blended_value(self):
        result = blend(1403.0, _comps(1600))
        # 1403 * 0.6 + 1600 * 0.4 = 1481.8
        assert result.estimated_price == 1480
        assert result.confidence == pytest.approx(0.58)

    def test_extra_comparables_ignored(self):
        result = blend(1000.0, _comps(*([1000] * 8)))
        assert len(result.comparable_properties) == 5

    @pytest.mark.parametrize("raw", [0.0, 3.7, 999.0, 1234.5, 25000.0, -420.0])
    @pytest.mark.parametrize("count", [0, 1, 3, 5])
    def test_range_contains_estimate(self, raw, count):
        result = blend(raw, _comps(*([1200.0] * count)))
        assert result.price_range.min <= result.estimated_price <= result.price_range.max


class TestComparablesOnly:
    """Tests for comparables_only function."""

    def test_uses_observed_bounds(self):
        result = comparables_only(_comps(1500, 1550, 1600, 1650, 1700))
        assert result.estimated_price == 1600
        assert result.confidence == 0.5
        assert result.price_range.min == 1350
        assert result.price_range.max == 1870
        assert result.model_status is ModelStatus.FALLBACK_TO_COMPARABLES

    def test_single_comparable(self):
        result = comparables_only(_comps(1234))
        assert result.estimated_price == 1230
        assert result.price_range.min <= result.estimated_price <= result.price_range.max

    def test_empty_raises(self):
        with pytest.raises(EstimationUnavailableError):
            comparables_only([])
