"""
Database Helper Functions

Context manager and query helpers for the SQLite listings database that backs
the comparable-listings provider. The estimation core only reads from it.

Usage:
    from rentestimate.core.database import get_connection, fetch_all

    with get_connection() as conn:
        rows = fetch_all(conn, "SELECT * FROM properties WHERE is_active = 1")
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple, Union

from rentestimate.config import get_config
from rentestimate.core.constants import TABLE_PROPERTIES
from rentestimate.exceptions import DatabaseConnectionError, DatabaseError
from rentestimate.logging_config import get_logger

logger = get_logger(__name__)

# Type aliases
Row = Dict[str, Any]
Params = Union[Tuple, Dict[str, Any], None]

PROPERTIES_SCHEMA = f"""
    CREATE TABLE IF NOT EXISTS {TABLE_PROPERTIES} (
        id TEXT PRIMARY KEY,
        price_per_month REAL NOT NULL,
        bedrooms INTEGER,
        bathrooms INTEGER,
        property_type TEXT,
        city TEXT,
        postcode TEXT,
        furnishing_status TEXT,
        is_active INTEGER DEFAULT 1,
        is_flagged INTEGER DEFAULT 0,
        created_at TEXT
    )
"""


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> Dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


@contextmanager
def get_connection(db_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections.

    Rows are returned as dictionaries. ``check_same_thread`` is disabled
    because the estimation service queries from a worker pool.

    Args:
        db_path: Path to database file. Uses config default if not specified.

    Yields:
        SQLite connection object.

    Raises:
        DatabaseConnectionError: If unable to connect to the database.
    """
    if db_path is None:
        db_path = get_config().database.path

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = None
    try:
        conn = sqlite3.connect(db_path, check_same_thread=False)
        conn.row_factory = dict_factory
        logger.debug("Connected to database: %s", db_path)
    except sqlite3.Error as e:
        logger.error("Database connection error: %s", e)
        raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

    try:
        yield conn
    finally:
        conn.close()
        logger.debug("Closed database connection")


def fetch_all(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
) -> List[Row]:
    """Execute a query and fetch all results.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        return cursor.fetchall()
    except sqlite3.Error as e:
        logger.error("Query failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Query failed: {e}") from e


def execute(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
    commit: bool = True,
) -> int:
    """Execute a statement (INSERT, UPDATE, DELETE, DDL).

    Returns:
        Number of rows affected.

    Raises:
        DatabaseError: If execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        if commit:
            conn.commit()
        return cursor.rowcount
    except sqlite3.Error as e:
        logger.error("Execute failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Execute failed: {e}") from e


def table_exists(conn: sqlite3.Connection, table_name: str) -> bool:
    """Check if a table exists in the database."""
    rows = fetch_all(
        conn,
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table_name,),
    )
    return len(rows) > 0


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the listings table if it does not exist."""
    execute(conn, PROPERTIES_SCHEMA)
