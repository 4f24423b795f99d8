"""
Data Models for the Rent Estimation Engine

Dataclass definitions for estimation requests, comparable listings and results.
"""

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from rentestimate.core.constants import REQUIRED_FIELDS
from rentestimate.exceptions import InvalidRequestError


class ModelStatus(str, Enum):
    """Which path produced a prediction."""

    MODEL = "model"
    FALLBACK_TO_COMPARABLES = "fallback_to_comparables"


def _parse_count(name: str, value: Any, received: List[str]) -> int:
    """Parse a non-negative whole-number count such as bedrooms."""
    if isinstance(value, bool):
        raise InvalidRequestError(
            f"Field '{name}' must be a whole number",
            required=REQUIRED_FIELDS,
            received=received,
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(
            f"Field '{name}' must be a whole number, got {value!r}",
            required=REQUIRED_FIELDS,
            received=received,
        )
    if not math.isfinite(number) or number != int(number) or number < 0:
        raise InvalidRequestError(
            f"Field '{name}' must be a whole number >= 0, got {value!r}",
            required=REQUIRED_FIELDS,
            received=received,
        )
    return int(number)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


@dataclass(frozen=True)
class PropertyAttributes:
    """Partially-specified property an estimate is requested for."""

    bedrooms: int
    property_type: str
    bathrooms: Optional[int] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    furnishing_status: Optional[str] = None
    has_parking: bool = False
    has_garden: bool = False

    def __post_init__(self):
        received = [name for name, value in asdict(self).items()
                    if value is not None and value is not False]
        if (not isinstance(self.property_type, str) or not self.property_type.strip()
                or self.bedrooms is None):
            raise InvalidRequestError(
                "Missing required fields",
                required=REQUIRED_FIELDS,
                received=received,
            )
        counts = {"bedrooms": self.bedrooms}
        if self.bathrooms is not None:
            counts["bathrooms"] = self.bathrooms
        for name, value in counts.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidRequestError(
                    f"Field '{name}' must be a whole number >= 0, got {value!r}",
                    required=REQUIRED_FIELDS,
                    received=received,
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PropertyAttributes":
        """Validate a raw request mapping.

        Accepts ``parking``/``garden`` as aliases of ``has_parking``/``has_garden``.

        Raises:
            InvalidRequestError: If a required field is missing or a count is invalid.
        """
        if data is None:
            data = {}
        received = list(data.keys())

        property_type = _optional_str(data.get("property_type"))
        bedrooms = data.get("bedrooms")
        if property_type is None or bedrooms is None or bedrooms == "":
            raise InvalidRequestError(
                "Missing required fields",
                required=REQUIRED_FIELDS,
                received=received,
            )

        bathrooms = data.get("bathrooms")
        if bathrooms is not None and bathrooms != "":
            bathrooms = _parse_count("bathrooms", bathrooms, received)
        else:
            bathrooms = None

        return cls(
            bedrooms=_parse_count("bedrooms", bedrooms, received),
            property_type=property_type,
            bathrooms=bathrooms,
            city=_optional_str(data.get("city")),
            postcode=_optional_str(data.get("postcode")),
            furnishing_status=_optional_str(data.get("furnishing_status")),
            has_parking=bool(data.get("has_parking", data.get("parking", False))),
            has_garden=bool(data.get("has_garden", data.get("garden", False))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class ComparableListing:
    """Read-only snapshot of an active listing used as a price anchor."""

    price_per_month: float
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ComparableListing":
        """Build from a database row dictionary."""
        return cls(
            price_per_month=float(row["price_per_month"]),
            bedrooms=row.get("bedrooms"),
            bathrooms=row.get("bathrooms"),
            property_type=row.get("property_type"),
            city=row.get("city"),
            postcode=row.get("postcode"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class PriceRange:
    """Inclusive monthly price band around an estimate."""

    min: float
    max: float

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class PredictionResult:
    """Final, user-facing rent estimate."""

    estimated_price: float
    confidence: float
    price_range: PriceRange
    comparable_properties: List[ComparableListing] = field(default_factory=list)
    model_status: ModelStatus = ModelStatus.MODEL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "estimated_price": self.estimated_price,
            "confidence": self.confidence,
            "price_range": self.price_range.to_dict(),
            "comparable_properties": [c.to_dict() for c in self.comparable_properties],
            "model_status": self.model_status.value,
        }
