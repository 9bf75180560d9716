# src/seotoolkit/database.py
"""Audit log storage for analysis results."""

import json
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List, Dict, Any
import logging

from seotoolkit.config import settings

logger = logging.getLogger(__name__)

# Table name -> column definitions (id and created_at are added to all)
TABLES = {
    "seo_audits": {
        "url": "TEXT NOT NULL",
        "title": "TEXT",
        "meta_description": "TEXT",
        "og_tags": "TEXT",
        "twitter_tags": "TEXT",
        "headings": "TEXT",
        "images_without_alt": "INTEGER",
        "internal_links": "INTEGER",
        "external_links": "INTEGER",
        "page_speed": "INTEGER",
        "mobile_friendly": "INTEGER",
        "schema_markup": "TEXT",
        "ssl_enabled": "INTEGER",
        "overall_score": "INTEGER",
    },
    "on_page_seo": {
        "url": "TEXT NOT NULL",
        "keyword": "TEXT NOT NULL",
        "title_contains_keyword": "INTEGER",
        "meta_contains_keyword": "INTEGER",
        "headings_contain_keyword": "INTEGER",
        "keyword_density": "REAL",
        "content_length": "INTEGER",
        "readability_score": "INTEGER",
        "optimization_suggestions": "TEXT",
    },
    "keyword_gap_analysis": {
        "your_domain": "TEXT NOT NULL",
        "competitor_domain": "TEXT NOT NULL",
        "competitor_keywords": "TEXT",
        "missing_keywords": "TEXT",
    },
    "keyword_research": {
        "keyword": "TEXT NOT NULL",
        "related_keywords": "TEXT",
        "people_also_ask": "TEXT",
    },
    "competitors": {
        "your_domain": "TEXT NOT NULL",
        "competitor_domain": "TEXT NOT NULL",
    },
    "rank_tracking": {
        "keyword": "TEXT NOT NULL",
        "domain": "TEXT NOT NULL",
        "position": "INTEGER",
        "url": "TEXT",
        "location": "TEXT",
        "city": "TEXT",
        "country": "TEXT",
        "device": "TEXT",
    },
}


def create_table_sql(table: str) -> str:
    columns = ",\n    ".join(f"{name} {definition}" for name, definition in TABLES[table].items())
    return (
        f"CREATE TABLE IF NOT EXISTS {table} (\n"
        f"    id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
        f"    {columns},\n"
        f"    created_at TIMESTAMP NOT NULL\n"
        f");"
    )


def _to_column_value(value: Any) -> Any:
    """Convert a Python value to something SQLite can store."""
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class AbstractStore(ABC):
    """Abstract base class defining the audit store interface."""

    @abstractmethod
    def connect(self) -> None:
        """Establish the storage connection."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the storage connection."""
        pass

    @abstractmethod
    def create_schema(self) -> None:
        """Create the necessary tables."""
        pass

    @abstractmethod
    def insert(self, table: str, record: Dict[str, Any]) -> int:
        """Insert a record and return its id.

        Args:
            table: Target table name.
            record: Column values. Unknown columns are ignored.
        """
        pass

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        newest_first: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        """Retrieve records matching all equality filters.

        Args:
            table: Table to read.
            newest_first: Order by creation time descending instead of ascending.
            limit: Maximum number of rows to return.
            **filters: Column equality filters.
        """
        pass

    @abstractmethod
    def delete(self, table: str, record_id: int) -> bool:
        """Delete a record by id. Returns True when a row was removed."""
        pass


class LocalSqliteStore(AbstractStore):
    """SQLite implementation for local storage."""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize local SQLite storage.

        Args:
            db_url: Database URL (sqlite:///path/to/db.db). Defaults to settings.DATABASE_URL.
        """
        self.db_url = db_url or settings.DATABASE_URL
        self.db_path = self.db_url.replace("sqlite:///", "")
        self.conn: Optional[sqlite3.Connection] = None
        self.connect()
        self.create_schema()

    def connect(self) -> None:
        """Establish SQLite connection."""
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to local SQLite database: {self.db_path}")

    def close(self) -> None:
        """Close SQLite connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Closed local SQLite connection")

    def create_schema(self) -> None:
        """Create all tables if they don't exist."""
        with self.conn:
            for table in TABLES:
                self.conn.execute(create_table_sql(table))
        logger.debug("Schema verified/created for local SQLite")

    def _check_table(self, table: str) -> None:
        if table not in TABLES:
            raise ValueError(f"Unknown table: '{table}'. Known tables: {', '.join(TABLES)}")

    def insert(self, table: str, record: Dict[str, Any]) -> int:
        """Insert a record into SQLite."""
        self._check_table(table)

        valid = {k: _to_column_value(v) for k, v in record.items() if k in TABLES[table]}
        valid["created_at"] = _to_column_value(record.get("created_at") or datetime.now())

        columns = ', '.join(valid.keys())
        placeholders = ', '.join('?' for _ in valid)
        insert_sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"

        with self.conn:
            cursor = self.conn.execute(insert_sql, tuple(valid.values()))
        logger.debug(f"Saved record {cursor.lastrowid} to {table}")
        return cursor.lastrowid

    def select(
        self,
        table: str,
        *,
        newest_first: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        """Retrieve records from SQLite."""
        self._check_table(table)

        unknown = set(filters) - set(TABLES[table]) - {"id"}
        if unknown:
            raise ValueError(f"Unknown columns for {table}: {', '.join(sorted(unknown))}")

        query_sql = f"SELECT * FROM {table}"
        if filters:
            query_sql += " WHERE " + " AND ".join(f"{column} = ?" for column in filters)
        direction = "DESC" if newest_first else "ASC"
        query_sql += f" ORDER BY created_at {direction}, id {direction}"

        params = [_to_column_value(v) for v in filters.values()]
        if limit is not None:
            query_sql += " LIMIT ?"
            params.append(limit)

        cursor = self.conn.cursor()
        cursor.execute(query_sql, tuple(params))
        return [dict(row) for row in cursor.fetchall()]

    def delete(self, table: str, record_id: int) -> bool:
        """Delete a record from SQLite."""
        self._check_table(table)
        with self.conn:
            cursor = self.conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
        return cursor.rowcount > 0


def get_db_client(
    backend: Optional[str] = None,
    **kwargs,
) -> AbstractStore:
    """Factory function to create the appropriate store.

    Args:
        backend: Storage backend ('local'). Defaults to settings.DB_BACKEND.
        **kwargs: Additional arguments passed to the store constructor.

    Returns:
        An instance of AbstractStore.

    Raises:
        ValueError: If an unknown backend is specified.
    """
    backend = backend or settings.DB_BACKEND

    if backend == "local":
        logger.info("Using local SQLite database backend")
        return LocalSqliteStore(**kwargs)
    raise ValueError(
        f"Unknown database backend: '{backend}'. "
        "Supported backends: 'local'"
    )
