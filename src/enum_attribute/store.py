"""
Document stores backing the host record type.

Two implementations of the ``DocumentStore`` protocol:

- ``MemoryStore``: plain dicts, the process default
- ``SQLiteStore``: one table per collection, each row a JSON document

Both keep insertion order when returning query results.
"""

from __future__ import annotations

import copy
import json
import logging
import re
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol

from .query import Criterion, CriterionOperator

logger = logging.getLogger(__name__)

# Valid SQL identifier pattern (alphanumeric and underscore, not starting with digit)
_VALID_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def validate_sql_identifier(name: str, context: str = "identifier") -> str:
    """
    Validate that a string is a safe SQL identifier.

    Raises:
        ValueError: If the name contains invalid characters
    """
    if not name:
        raise ValueError(f"SQL {context} cannot be empty")
    if not _VALID_IDENTIFIER_PATTERN.match(name):
        raise ValueError(
            f"Invalid SQL {context} '{name}': must contain only letters, digits, "
            "and underscores, and cannot start with a digit"
        )
    return name


class DocumentStore(Protocol):
    """Persistence contract used by ``Document``."""

    def insert(self, collection: str, doc_id: str, attributes: dict[str, Any]) -> None: ...

    def update(self, collection: str, doc_id: str, attributes: dict[str, Any]) -> None: ...

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    def delete(self, collection: str, doc_id: str) -> bool: ...

    def find(
        self, collection: str, criteria: list[Criterion]
    ) -> list[tuple[str, dict[str, Any]]]: ...

    def clear(self, collection: str | None = None) -> None: ...


# =============================================================================
# In-memory store
# =============================================================================


class MemoryStore:
    """Keeps deep copies of documents in per-collection dicts."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def insert(self, collection: str, doc_id: str, attributes: dict[str, Any]) -> None:
        self._collection(collection)[doc_id] = copy.deepcopy(attributes)

    def update(self, collection: str, doc_id: str, attributes: dict[str, Any]) -> None:
        self._collection(collection)[doc_id] = copy.deepcopy(attributes)

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        stored = self._collection(collection).get(doc_id)
        return copy.deepcopy(stored) if stored is not None else None

    def delete(self, collection: str, doc_id: str) -> bool:
        return self._collection(collection).pop(doc_id, None) is not None

    def find(
        self, collection: str, criteria: list[Criterion]
    ) -> list[tuple[str, dict[str, Any]]]:
        return [
            (doc_id, copy.deepcopy(attrs))
            for doc_id, attrs in self._collection(collection).items()
            if all(criterion.matches(attrs) for criterion in criteria)
        ]

    def clear(self, collection: str | None = None) -> None:
        if collection is None:
            self._collections.clear()
        else:
            self._collections.pop(collection, None)


# =============================================================================
# SQLite store
# =============================================================================


def _quote(table: str) -> str:
    # Collection names may be SQL keywords ("order", "group")
    return f'"{table}"'


def _json_path(field: str) -> str:
    return f'$."{field}"'


class SQLiteStore:
    """
    Stores documents as JSON text in SQLite.

    Each collection gets a table ``(id TEXT PRIMARY KEY, data TEXT)``, created
    on first use. Equality filters use ``json_extract``; list membership uses
    ``json_each``.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ``":memory:"``
        """
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._connection: sqlite3.Connection | None = None
        self._tables: set[str] = set()

    def get_persistent_connection(self) -> sqlite3.Connection:
        """Return the shared connection, opening it on first use."""
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path)
            self._connection.row_factory = sqlite3.Row
        return self._connection

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Transaction scope over the shared connection."""
        conn = self.get_persistent_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None
            self._tables.clear()

    def _table(self, collection: str) -> str:
        """Return the quoted table name for ``collection``, creating the table once."""
        table = validate_sql_identifier(collection, "collection name")
        if table not in self._tables:
            with self.connection() as conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {_quote(table)} "
                    "(id TEXT PRIMARY KEY, data TEXT NOT NULL)"
                )
            self._tables.add(table)
            logger.debug("Created SQLite table %s", table)
        return _quote(table)

    def insert(self, collection: str, doc_id: str, attributes: dict[str, Any]) -> None:
        table = self._table(collection)
        with self.connection() as conn:
            conn.execute(
                f"INSERT INTO {table} (id, data) VALUES (?, ?)",
                (doc_id, json.dumps(attributes)),
            )

    def update(self, collection: str, doc_id: str, attributes: dict[str, Any]) -> None:
        table = self._table(collection)
        with self.connection() as conn:
            conn.execute(
                f"UPDATE {table} SET data = ? WHERE id = ?",
                (json.dumps(attributes), doc_id),
            )

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        table = self._table(collection)
        with self.connection() as conn:
            row = conn.execute(f"SELECT data FROM {table} WHERE id = ?", (doc_id,)).fetchone()
        return json.loads(row["data"]) if row else None

    def delete(self, collection: str, doc_id: str) -> bool:
        table = self._table(collection)
        with self.connection() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (doc_id,))
        return cursor.rowcount > 0

    def find(
        self, collection: str, criteria: list[Criterion]
    ) -> list[tuple[str, dict[str, Any]]]:
        table = self._table(collection)
        where, params = self._build_where_clause(criteria)
        sql = f"SELECT id, data FROM {table}{where} ORDER BY rowid"
        with self.connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [(row["id"], json.loads(row["data"])) for row in rows]

    def clear(self, collection: str | None = None) -> None:
        tables = [validate_sql_identifier(collection)] if collection else sorted(self._tables)
        with self.connection() as conn:
            for table in tables:
                conn.execute(f"DROP TABLE IF EXISTS {_quote(table)}")
        self._tables.difference_update(tables)

    def _build_where_clause(self, criteria: list[Criterion]) -> tuple[str, list[Any]]:
        """Build a WHERE clause (with leading space) and its parameters."""
        if not criteria:
            return "", []

        clauses: list[str] = []
        params: list[Any] = []
        for criterion in criteria:
            path = _json_path(criterion.field)
            if criterion.operator == CriterionOperator.CONTAINS:
                clauses.append(
                    "EXISTS (SELECT 1 FROM json_each(data, ?) WHERE json_each.value = ?)"
                )
            else:
                clauses.append("json_extract(data, ?) IS ?")
            params.extend([path, criterion.value])

        return " WHERE " + " AND ".join(clauses), params
