"""
Feature Encoder

Maps a PropertyAttributes record onto the normalized feature vector a model
expects, in the order given by the model's metadata.

Location is encoded through a stable string hash rather than a lookup table.
This is a deliberately coarse proxy: the same city or postcode always lands on
the same code, but unrelated places can collide. The exact hash is part of the
model contract:

    h = 0
    for each UTF-16 code unit u of the string:
        h = (h * 31 + u) wrapped to a signed 32-bit integer
    code = abs(h) % range        (city: 100, postcode first part: 200)

Cities are trimmed and lower-cased before hashing; postcodes are trimmed,
upper-cased and reduced to their first whitespace-separated token.

Categorical fields (property type, furnishing status) are looked up in the
metadata maps. Unknown or missing labels map to code 0 on purpose, which means
they are indistinguishable from whichever label the model assigned code 0
(``Flat`` and ``Furnished`` in the fallback metadata).
"""

import math
import struct
from typing import Any, Callable, Dict, List, Optional

from rentestimate.core.constants import (
    CATEGORY_FURNISHING,
    CATEGORY_PROPERTY_TYPE,
    CITY_HASH_RANGE,
    DEFAULT_NUMERIC_VALUE,
    FEATURE_BATHROOMS,
    FEATURE_BEDROOMS,
    FEATURE_CITY,
    FEATURE_FURNISHING,
    FEATURE_HAS_GARDEN,
    FEATURE_HAS_PARKING,
    FEATURE_POSTCODE,
    FEATURE_PROPERTY_TYPE,
    HASH_MULTIPLIER,
    POSTCODE_HASH_RANGE,
)
from rentestimate.core.models import PropertyAttributes
from rentestimate.exceptions import FeatureEncodingError
from rentestimate.ml.metadata import ModelMetadata

FeatureVector = List[float]


def stable_hash(text: str) -> int:
    """31-multiplier polynomial hash over UTF-16 code units, as signed 32-bit."""
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    units = struct.unpack(f"<{len(encoded) // 2}H", encoded)
    h = 0
    for unit in units:
        h = (h * HASH_MULTIPLIER + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def encode_city(city: Optional[str]) -> int:
    """Hash a city name into [0, 100)."""
    if not city:
        return 0
    cleaned = city.strip().lower()
    if not cleaned:
        return 0
    return abs(stable_hash(cleaned)) % CITY_HASH_RANGE


def encode_postcode(postcode: Optional[str]) -> int:
    """Hash the outward part of a postcode into [0, 200)."""
    if not postcode:
        return 0
    tokens = postcode.strip().upper().split()
    if not tokens:
        return 0
    return abs(stable_hash(tokens[0])) % POSTCODE_HASH_RANGE


def _numeric(value: Any) -> float:
    """Parse a count; missing or unparseable values default to 1."""
    # Explicit 0 is kept, not treated as missing. Pipelines that default falsy
    # counts to 1 encode 0 bathrooms as 1, so retrained artifacts must match this.
    if value is None or isinstance(value, bool):
        return DEFAULT_NUMERIC_VALUE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_NUMERIC_VALUE
    return number if math.isfinite(number) else DEFAULT_NUMERIC_VALUE


_RAW_FEATURES: Dict[str, Callable[[PropertyAttributes, ModelMetadata], float]] = {
    FEATURE_BEDROOMS: lambda a, m: _numeric(a.bedrooms),
    FEATURE_BATHROOMS: lambda a, m: _numeric(a.bathrooms),
    FEATURE_PROPERTY_TYPE: lambda a, m: float(m.category_code(CATEGORY_PROPERTY_TYPE, a.property_type)),
    FEATURE_CITY: lambda a, m: float(encode_city(a.city)),
    FEATURE_FURNISHING: lambda a, m: float(m.category_code(CATEGORY_FURNISHING, a.furnishing_status)),
    FEATURE_POSTCODE: lambda a, m: float(encode_postcode(a.postcode)),
    FEATURE_HAS_PARKING: lambda a, m: 1.0 if a.has_parking else 0.0,
    FEATURE_HAS_GARDEN: lambda a, m: 1.0 if a.has_garden else 0.0,
}


def raw_features(attrs: PropertyAttributes, metadata: ModelMetadata) -> FeatureVector:
    """Un-normalized feature values in metadata order.

    Raises:
        FeatureEncodingError: If the metadata names a feature this encoder cannot build.
    """
    values = []
    for name in metadata.feature_names:
        builder = _RAW_FEATURES.get(name)
        if builder is None:
            raise FeatureEncodingError(f"Unknown feature in model metadata: {name}", feature=name)
        values.append(builder(attrs, metadata))
    return values


def encode(attrs: PropertyAttributes, metadata: ModelMetadata) -> FeatureVector:
    """Build the normalized feature vector for ``attrs``.

    ``(raw - mean) / std`` per feature. ``std`` is non-zero by construction of
    ModelMetadata. The result always has ``metadata.feature_count`` entries.
    """
    raw = raw_features(attrs, metadata)
    return [(value - mean) / std for value, mean, std in zip(raw, metadata.mean, metadata.std)]
