"""
Model Metadata

Ordered feature names, normalization constants and categorical maps that a
model was trained (or constructed) against. Metadata is validated when it is
built, so a zero or non-finite standard deviation is rejected at load time and
never reaches the feature encoder.
"""

import json
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Sequence, Tuple

from rentestimate.core.constants import (
    CATEGORY_FURNISHING,
    CATEGORY_PROPERTY_TYPE,
    FALLBACK_FEATURE_NAMES,
    FALLBACK_FURNISHING_STATUS,
    FALLBACK_MEAN,
    FALLBACK_PROPERTY_TYPES,
    FALLBACK_STD,
)
from rentestimate.exceptions import InvalidMetadataError

# Older artifacts store categorical maps as top-level camelCase keys
_LEGACY_CATEGORY_KEYS = {
    "propertyTypes": CATEGORY_PROPERTY_TYPE,
    "furnishingStatus": CATEGORY_FURNISHING,
}


def _as_floats(name: str, values: Any) -> Tuple[float, ...]:
    if not isinstance(values, Sequence) or isinstance(values, (str, bytes)):
        raise InvalidMetadataError(f"Metadata field '{name}' must be a list of numbers")
    try:
        result = tuple(float(v) for v in values)
    except (TypeError, ValueError) as e:
        raise InvalidMetadataError(f"Metadata field '{name}' contains a non-numeric value") from e
    if not all(math.isfinite(v) for v in result):
        raise InvalidMetadataError(f"Metadata field '{name}' contains a non-finite value")
    return result


def _freeze_maps(maps: Mapping[str, Mapping[str, Any]]) -> Mapping[str, Mapping[str, int]]:
    frozen = {}
    for category, mapping in maps.items():
        if not isinstance(mapping, Mapping):
            raise InvalidMetadataError(f"Categorical map '{category}' must be an object")
        codes = {}
        for label, code in mapping.items():
            if isinstance(code, bool) or not isinstance(code, (int, float)) or code != int(code):
                raise InvalidMetadataError(
                    f"Categorical map '{category}' has non-integer code for {label!r}"
                )
            codes[str(label)] = int(code)
        frozen[str(category)] = MappingProxyType(codes)
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class ModelMetadata:
    """Feature contract between the encoder and a loaded model.

    Invariant: ``len(mean) == len(std) == len(feature_names)`` and no entry of
    ``std`` is zero.
    """

    feature_names: Tuple[str, ...]
    mean: Tuple[float, ...]
    std: Tuple[float, ...]
    categorical_maps: Mapping[str, Mapping[str, int]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        names = tuple(str(n) for n in self.feature_names)
        mean = _as_floats("mean", self.mean)
        std = _as_floats("std", self.std)

        if not names:
            raise InvalidMetadataError("Metadata must list at least one feature")
        if len(set(names)) != len(names):
            raise InvalidMetadataError("Metadata feature names must be unique")
        if not (len(mean) == len(std) == len(names)):
            raise InvalidMetadataError(
                f"Metadata length mismatch: {len(names)} features, "
                f"{len(mean)} means, {len(std)} stds"
            )
        zero = [names[i] for i, s in enumerate(std) if s == 0]
        if zero:
            raise InvalidMetadataError(f"Zero standard deviation for features: {zero}")

        # frozen dataclass: assign normalized values through object.__setattr__
        object.__setattr__(self, "feature_names", names)
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "std", std)
        object.__setattr__(self, "categorical_maps", _freeze_maps(self.categorical_maps))

    @property
    def feature_count(self) -> int:
        return len(self.feature_names)

    def category_code(self, category: str, label: Any) -> int:
        """Look up a categorical code; unknown or missing labels map to 0."""
        if label is None:
            return 0
        return self.categorical_maps.get(category, {}).get(str(label), 0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelMetadata":
        """Build metadata from its JSON document.

        Raises:
            InvalidMetadataError: If required keys are missing or values are invalid.
        """
        if not isinstance(data, Mapping):
            raise InvalidMetadataError("Metadata document must be a JSON object")

        names = data.get("feature_names", data.get("features"))
        if names is None or "mean" not in data or "std" not in data:
            raise InvalidMetadataError("Metadata requires 'feature_names', 'mean' and 'std'")
        if isinstance(names, (str, bytes)) or not isinstance(names, Sequence):
            raise InvalidMetadataError("Metadata 'feature_names' must be a list")

        maps: Dict[str, Mapping[str, Any]] = dict(data.get("categorical_maps") or {})
        for legacy_key, category in _LEGACY_CATEGORY_KEYS.items():
            if legacy_key in data and category not in maps:
                maps[category] = data[legacy_key]

        return cls(
            feature_names=tuple(names),
            mean=data["mean"],
            std=data["std"],
            categorical_maps=maps,
        )

    @classmethod
    def from_json(cls, raw: bytes) -> "ModelMetadata":
        """Parse metadata from UTF-8 JSON bytes."""
        try:
            data = json.loads(raw.decode("utf-8") if isinstance(raw, bytes) else raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidMetadataError(f"Metadata is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "feature_names": list(self.feature_names),
            "mean": list(self.mean),
            "std": list(self.std),
            "categorical_maps": {k: dict(v) for k, v in self.categorical_maps.items()},
        }


def fallback_metadata() -> ModelMetadata:
    """Hard-coded metadata paired with the fallback model."""
    return ModelMetadata(
        feature_names=tuple(FALLBACK_FEATURE_NAMES),
        mean=tuple(FALLBACK_MEAN),
        std=tuple(FALLBACK_STD),
        categorical_maps={
            CATEGORY_PROPERTY_TYPE: dict(FALLBACK_PROPERTY_TYPES),
            CATEGORY_FURNISHING: dict(FALLBACK_FURNISHING_STATUS),
        },
    )
