"""
Unit tests for the SQLite comparables provider.
"""

import pytest

from rentestimate.core.database import get_connection, table_exists
from rentestimate.exceptions import ComparablesError
from rentestimate.services.comparables import SQLiteComparablesProvider


class TestSQLiteComparablesProvider:
    """Tests for SQLiteComparablesProvider.find."""

    def test_filters_and_orders(self, populated_db):
        provider = SQLiteComparablesProvider(populated_db)
        listings = provider.find("Flat", 2)

        # Inactive (p4) and flagged (p5) listings are excluded; newest first
        assert [c.price_per_month for c in listings] == [1600.0, 1700.0, 1500.0]
        assert all(c.property_type == "Flat" and c.bedrooms == 2 for c in listings)

    def test_limit(self, populated_db):
        listings = SQLiteComparablesProvider(populated_db).find("Flat", 2, limit=2)
        assert len(listings) == 2

    def test_exact_type_match(self, populated_db):
        listings = SQLiteComparablesProvider(populated_db).find("House", 2)
        assert [c.city for c in listings] == ["Leeds"]

    def test_no_matches(self, populated_db):
        assert SQLiteComparablesProvider(populated_db).find("Bungalow", 4) == []

    def test_defaults_to_configured_db(self, populated_db):
        assert len(SQLiteComparablesProvider().find("Flat", 3)) == 1

    def test_missing_table_raises(self, isolated_config):
        with pytest.raises(ComparablesError):
            SQLiteComparablesProvider().find("Flat", 2)


class TestSchema:
    """Tests for the listings schema helper."""

    def test_init_schema(self, temp_db):
        with get_connection(temp_db) as conn:
            assert table_exists(conn, "properties") is True
            assert table_exists(conn, "bookings") is False
