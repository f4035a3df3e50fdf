"""
Database utilities for SQLite-backed datasets.
Provides connection management and read helpers for level tables.
"""
import logging
import re
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Table names are interpolated into SQL, so only plain identifiers are allowed
IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


@contextmanager
def get_db_connection(db_path: Path):
    """
    Context manager for read-only style database connections.
    Automatically handles connection close.

    Args:
        db_path: Path to SQLite database file

    Yields:
        sqlite3.Connection object

    Example:
        >>> with get_db_connection(Path('admin.db')) as conn:
        ...     conn.execute("SELECT * FROM province LIMIT 1").fetchone()
    """
    db_path = Path(db_path)
    if not db_path.exists():
        # sqlite3.connect would silently create an empty file
        raise FileNotFoundError(f"Database not found: {db_path}")

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row  # Enable column access by name
    try:
        yield conn
    finally:
        conn.close()


def query_all(db_path: Path, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
    """
    Execute query and return all rows as list of dictionaries.

    Args:
        db_path: Path to SQLite database file
        query: SQL query string
        params: Query parameters (tuple)

    Returns:
        List of dictionaries with column names as keys

    Example:
        >>> query_all(db, "SELECT * FROM province LIMIT 1")
        [{'idProvince': '01', 'name': 'Thành phố Hà Nội'}]
    """
    start_time = time.time()

    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(query, params)
        result = [dict(row) for row in cursor.fetchall()]

    elapsed_ms = (time.time() - start_time) * 1000
    logger.debug(f"[SQL] {query.strip()} → {len(result)} rows | {elapsed_ms:.1f}ms")

    return result


def load_table_rows(db_path: Path, table: str) -> List[Dict[str, Any]]:
    """
    Load every row of a level table in insertion (rowid) order.

    Args:
        db_path: Path to SQLite database file
        table: Table name (plain identifier)

    Returns:
        List of row dicts
    """
    if not IDENTIFIER_PATTERN.match(table):
        raise ValueError(f"Invalid table name: {table!r}")

    return query_all(db_path, f'SELECT * FROM "{table}" ORDER BY rowid')
