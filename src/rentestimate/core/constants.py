"""
Shared Constants for the Rent Estimation Engine

Feature names, fallback model constants and blending parameters. Changing any
of the hashing or normalization constants silently changes model behaviour.
"""

from typing import Dict, List

# Semantic feature names understood by the feature encoder
FEATURE_BEDROOMS: str = "bedrooms"
FEATURE_BATHROOMS: str = "bathrooms"
FEATURE_PROPERTY_TYPE: str = "property_type_encoded"
FEATURE_CITY: str = "city_encoded"
FEATURE_FURNISHING: str = "furnishing_status_encoded"
FEATURE_POSTCODE: str = "postcode_first_part_encoded"
FEATURE_HAS_PARKING: str = "has_parking"
FEATURE_HAS_GARDEN: str = "has_garden"

# Keys into ModelMetadata.categorical_maps
CATEGORY_PROPERTY_TYPE: str = "property_type"
CATEGORY_FURNISHING: str = "furnishing_status"

# Fallback model metadata (used when the trained artifact cannot be loaded)
FALLBACK_FEATURE_NAMES: List[str] = [
    FEATURE_BEDROOMS,
    FEATURE_BATHROOMS,
    FEATURE_PROPERTY_TYPE,
    FEATURE_CITY,
    FEATURE_FURNISHING,
    FEATURE_POSTCODE,
    FEATURE_HAS_PARKING,
    FEATURE_HAS_GARDEN,
]
FALLBACK_MEAN: List[float] = [2.5, 1.5, 2.0, 50.0, 1.0, 100.0, 0.5, 0.3]
FALLBACK_STD: List[float] = [1.2, 0.7, 1.5, 30.0, 0.8, 50.0, 0.5, 0.5]
FALLBACK_PROPERTY_TYPES: Dict[str, int] = {
    "Flat": 0,
    "House": 1,
    "Studio": 2,
    "Bungalow": 3,
    "Maisonette": 4,
}
FALLBACK_FURNISHING_STATUS: Dict[str, int] = {
    "Furnished": 0,
    "Unfurnished": 1,
    "Part-Furnished": 2,
}
FALLBACK_HIDDEN_UNITS: int = 10
FALLBACK_SEED: int = 42

# Location hashing
HASH_MULTIPLIER: int = 31
CITY_HASH_RANGE: int = 100
POSTCODE_HASH_RANGE: int = 200

# Value used when a numeric attribute is missing or unparseable
DEFAULT_NUMERIC_VALUE: float = 1.0

# Blending
MODEL_WEIGHT: float = 0.6
COMPARABLES_WEIGHT: float = 0.4
MODEL_ONLY_CONFIDENCE: float = 0.7
BASE_CONFIDENCE: float = 0.5
CONFIDENCE_PER_COMPARABLE: float = 0.08
MAX_CONFIDENCE: float = 0.9
MIN_RANGE_WIDTH: float = 0.1
RANGE_WIDTH_SCALE: float = 0.4
ROUNDING_STEP: int = 10

# Comparables-only fallback
COMPARABLES_ONLY_CONFIDENCE: float = 0.5
COMPARABLES_RANGE_LOW_FACTOR: float = 0.9
COMPARABLES_RANGE_HIGH_FACTOR: float = 1.1

# Listings table
TABLE_PROPERTIES: str = "properties"

# Request fields
REQUIRED_FIELDS: List[str] = ["property_type", "bedrooms"]
