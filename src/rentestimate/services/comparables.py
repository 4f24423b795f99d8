"""
Comparable Listings Provider

Read-only query for recent, active, non-flagged listings that match a property
type and bedroom count exactly. An empty list is a valid result.
"""

from typing import List, Optional

from rentestimate.config import MAX_COMPARABLES
from rentestimate.core.constants import TABLE_PROPERTIES
from rentestimate.core.database import fetch_all, get_connection
from rentestimate.core.models import ComparableListing
from rentestimate.exceptions import ComparablesError, DatabaseError
from rentestimate.logging_config import get_logger

logger = get_logger(__name__)


class ComparablesProvider:
    """Source of comparable listings, newest first."""

    def find(self, property_type: str, bedrooms: int,
             limit: int = MAX_COMPARABLES) -> List[ComparableListing]:
        raise NotImplementedError


class SQLiteComparablesProvider(ComparablesProvider):
    """Comparables read from the listings table."""

    QUERY = f"""
        SELECT price_per_month, bedrooms, bathrooms, property_type, city, postcode
        FROM {TABLE_PROPERTIES}
        WHERE property_type = ?
          AND bedrooms = ?
          AND is_active = 1
          AND is_flagged = 0
          AND price_per_month IS NOT NULL
        ORDER BY created_at DESC
        LIMIT ?
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def find(self, property_type: str, bedrooms: int,
             limit: int = MAX_COMPARABLES) -> List[ComparableListing]:
        """Fetch up to ``limit`` comparables.

        Raises:
            ComparablesError: If the database cannot be queried.
        """
        try:
            with get_connection(self.db_path) as conn:
                rows = fetch_all(conn, self.QUERY, (property_type, bedrooms, limit))
        except DatabaseError as e:
            raise ComparablesError(f"Comparable listings query failed: {e}") from e

        listings = [ComparableListing.from_row(row) for row in rows]
        logger.debug(
            "Found %d comparables for %s with %d bedrooms",
            len(listings), property_type, bedrooms,
        )
        return listings
