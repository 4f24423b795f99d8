"""
Unit tests for database module.
"""

import threading

import pytest

from rentestimate.core.database import (
    execute,
    fetch_all,
    get_connection,
    init_schema,
    table_exists,
)
from rentestimate.exceptions import DatabaseError


class TestGetConnection:
    """Tests for get_connection context manager."""

    def test_rows_are_dicts(self, populated_db):
        with get_connection(populated_db) as conn:
            rows = fetch_all(conn, "SELECT id, price_per_month FROM properties WHERE id = ?", ("p1",))
        assert rows == [{"id": "p1", "price_per_month": 1500.0}]

    def test_defaults_to_configured_path(self, temp_db):
        with get_connection() as conn:
            assert table_exists(conn, "properties")

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "listings.db"
        with get_connection(str(db_path)) as conn:
            init_schema(conn)
        assert db_path.exists()

    def test_usable_from_worker_thread(self, populated_db):
        results = []
        with get_connection(populated_db) as conn:
            worker = threading.Thread(
                target=lambda: results.extend(fetch_all(conn, "SELECT id FROM properties"))
            )
            worker.start()
            worker.join()
        assert len(results) == 7


class TestQueries:
    """Tests for fetch_all and execute."""

    def test_fetch_all_empty(self, temp_db):
        with get_connection(temp_db) as conn:
            assert fetch_all(conn, "SELECT * FROM properties") == []

    def test_execute_returns_rowcount(self, populated_db):
        with get_connection(populated_db) as conn:
            changed = execute(conn, "UPDATE properties SET is_flagged = 1 WHERE city = ?", ("Leeds",))
            assert changed == 1
            rows = fetch_all(conn, "SELECT id FROM properties WHERE is_flagged = 1 ORDER BY id")
        assert [r["id"] for r in rows] == ["p5", "p7"]

    def test_fetch_all_bad_query(self, temp_db):
        with get_connection(temp_db) as conn:
            with pytest.raises(DatabaseError):
                fetch_all(conn, "SELECT * FROM no_such_table")

    def test_execute_bad_statement(self, temp_db):
        with get_connection(temp_db) as conn:
            with pytest.raises(DatabaseError):
                execute(conn, "INSERT INTO properties (nope) VALUES (1)")


class TestSchema:
    """Tests for the listings schema."""

    def test_table_exists(self, temp_db):
        with get_connection(temp_db) as conn:
            assert table_exists(conn, "properties")
            assert not table_exists(conn, "listings")

    def test_init_schema_idempotent(self, temp_db):
        with get_connection(temp_db) as conn:
            init_schema(conn)
            init_schema(conn)
            assert table_exists(conn, "properties")

    def test_defaults(self, temp_db):
        with get_connection(temp_db) as conn:
            execute(conn, "INSERT INTO properties (id, price_per_month) VALUES ('x', 1000)")
            row = fetch_all(conn, "SELECT is_active, is_flagged FROM properties")[0]
        assert row == {"is_active": 1, "is_flagged": 0}
