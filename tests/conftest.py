"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests.
"""

import io
import sqlite3
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional

import joblib
import numpy as np
import pytest
from sklearn.dummy import DummyRegressor

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rentestimate.core.models import ComparableListing
from rentestimate.exceptions import ArtifactNotFoundError, TransientArtifactError
from rentestimate.ml.artifact_store import ArtifactStore
from rentestimate.ml.metadata import fallback_metadata
from rentestimate.services.comparables import ComparablesProvider

MODEL_KEY = "price-prediction/model.joblib"
METADATA_KEY = "price-prediction/metadata.json"


class InMemoryArtifactStore(ArtifactStore):
    """Artifact store over a dict, counting fetches.

    ``delay`` slows fetch_model down; ``gate`` blocks it until set.
    """

    def __init__(self, blobs: Optional[Dict[str, bytes]] = None, delay: float = 0.0,
                 gate: Optional[threading.Event] = None, transient: bool = False):
        self.blobs = dict(blobs or {})
        self.delay = delay
        self.gate = gate
        self.transient = transient
        self.model_fetches = 0
        self.metadata_fetches = 0
        self._lock = threading.Lock()

    def _get(self, key: str) -> bytes:
        if self.transient:
            raise TransientArtifactError("storage offline", key=key)
        if key not in self.blobs:
            raise ArtifactNotFoundError(key)
        return self.blobs[key]

    def fetch_model(self, key: str) -> bytes:
        with self._lock:
            self.model_fetches += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.delay:
            time.sleep(self.delay)
        return self._get(key)

    def fetch_metadata(self, key: str) -> bytes:
        with self._lock:
            self.metadata_fetches += 1
        return self._get(key)


class StaticComparables(ComparablesProvider):
    """Comparables provider returning a fixed list, or raising."""

    def __init__(self, listings: Optional[List[ComparableListing]] = None, error: Exception = None):
        self.listings = list(listings or [])
        self.error = error
        self.calls = []

    def find(self, property_type, bedrooms, limit=5):
        self.calls.append((property_type, bedrooms, limit))
        if self.error is not None:
            raise self.error
        return self.listings[:limit]


def dump_model(estimator) -> bytes:
    """Serialize an estimator the way artifacts are stored."""
    buffer = io.BytesIO()
    joblib.dump(estimator, buffer)
    return buffer.getvalue()


def metadata_json(**overrides) -> bytes:
    """Fallback-shaped metadata JSON with optional field overrides."""
    import json

    data = fallback_metadata().to_dict()
    data.update(overrides)
    return json.dumps(data).encode("utf-8")


def constant_regressor(value: float, n_features: int = 8) -> DummyRegressor:
    """Fitted regressor that always predicts ``value``."""
    regressor = DummyRegressor(strategy="constant", constant=value)
    regressor.fit(np.zeros((2, n_features)), [value, value])
    return regressor


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config at temporary paths and reset process-wide singletons."""
    monkeypatch.setenv("RENTESTIMATE_DB_PATH", str(tmp_path / "listings.db"))
    monkeypatch.setenv("RENTESTIMATE_ARTIFACT_DIR", str(tmp_path / "artifacts"))
    monkeypatch.setenv("RENTESTIMATE_LOG_LEVEL", "DEBUG")

    from rentestimate.config import get_config, reset_config
    from rentestimate.ml.model_cache import reset_model_cache

    reset_config()
    reset_model_cache()
    yield get_config()
    reset_config()
    reset_model_cache()


@pytest.fixture
def artifact_store() -> InMemoryArtifactStore:
    """Store holding a constant-1400 model and fallback-shaped metadata."""
    return InMemoryArtifactStore({
        MODEL_KEY: dump_model(constant_regressor(1400.0)),
        METADATA_KEY: metadata_json(),
    })


@pytest.fixture
def empty_store() -> InMemoryArtifactStore:
    """Store with no artifacts at all."""
    return InMemoryArtifactStore()


@pytest.fixture
def five_comparables() -> List[ComparableListing]:
    """Five 2-bed flats averaging 1600 pcm."""
    return [
        ComparableListing(price_per_month=price, bedrooms=2, bathrooms=1,
                          property_type="Flat", city="London", postcode="E1 6AN")
        for price in (1500.0, 1550.0, 1600.0, 1650.0, 1700.0)
    ]


@pytest.fixture
def temp_db(isolated_config) -> str:
    """Create a temporary listings database with the properties schema."""
    from rentestimate.core.database import get_connection, init_schema

    db_path = isolated_config.database.path
    with get_connection(db_path) as conn:
        init_schema(conn)
    return db_path


@pytest.fixture
def populated_db(temp_db: str) -> str:
    """Listings database with a mix of matching and non-matching rows."""
    rows = [
        # id, price, beds, baths, type, city, postcode, active, flagged, created_at
        ("p1", 1500.0, 2, 1, "Flat", "London", "E1 6AN", 1, 0, "2024-01-01T10:00:00"),
        ("p2", 1600.0, 2, 1, "Flat", "London", "E2 7DG", 1, 0, "2024-03-01T10:00:00"),
        ("p3", 1700.0, 2, 2, "Flat", "London", "N1 9GU", 1, 0, "2024-02-01T10:00:00"),
        ("p4", 9000.0, 2, 1, "Flat", "London", "W1 1AA", 0, 0, "2024-04-01T10:00:00"),
        ("p5", 8000.0, 2, 1, "Flat", "London", "W1 1AB", 1, 1, "2024-04-02T10:00:00"),
        ("p6", 2500.0, 3, 2, "Flat", "London", "SW1A 1AA", 1, 0, "2024-04-03T10:00:00"),
        ("p7", 2200.0, 2, 1, "House", "Leeds", "LS6 2AB", 1, 0, "2024-04-04T10:00:00"),
    ]
    conn = sqlite3.connect(temp_db)
    conn.executemany(
        """
        INSERT INTO properties (
            id, price_per_month, bedrooms, bathrooms, property_type, city, postcode,
            is_active, is_flagged, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    conn.commit()
    conn.close()
    return temp_db
