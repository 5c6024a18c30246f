"""
SQLite Storage Implementation

DESIGN DECISION: SQLite is the persistent backend because:
1. No database server to set up for a personal ledger
2. Single file, easy to back up
3. Real foreign keys between transactions and categories

TRADEOFFS:
- No UNIQUE constraint on category title: concurrent resolution of the same
  new title can create two rows (kept on purpose, see DESIGN.md)
- Each save() is its own commit; nothing spans category + transaction saves
- sqlite3 calls are blocking; the async methods run them inline on the event
  loop thread

The implementation follows the abstract interface, so business logic does
not change when the backend does.
"""

import json
import sqlite3
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.config import get_settings
from ledger.models.audit import AuditEvent, AuditEventType, AuditSeverity
from ledger.models.transaction import Category, Transaction
from ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryStorageInterface,
    ConnectionError,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)


SCHEMA = """
CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    type TEXT NOT NULL,
    value REAL NOT NULL,
    category_id TEXT NOT NULL REFERENCES categories(id),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_categories_title ON categories(title);

CREATE TABLE IF NOT EXISTS audit_events (
    event_id TEXT PRIMARY KEY,
    timestamp TEXT NOT NULL,
    event_type TEXT NOT NULL,
    severity TEXT NOT NULL,
    entity_type TEXT,
    entity_id TEXT,
    correlation_id TEXT,
    description TEXT NOT NULL,
    details_json TEXT,
    error_message TEXT
);
"""

# Retry only on transient errors such as "database is locked"
write_retry = retry(
    retry=retry_if_exception_type(sqlite3.OperationalError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class SQLiteClient:
    """
    Low-level SQLite connection wrapper.

    Holds one connection for the lifetime of the client and creates the
    schema on first use.
    """

    def __init__(self, database_path: Optional[str] = None):
        self._database_path = database_path or get_settings().storage.database_path
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def database_path(self) -> str:
        return self._database_path

    def connect(self) -> sqlite3.Connection:
        """Open the connection (once) and make sure the schema exists."""
        if self._connection is None:
            try:
                connection = sqlite3.connect(
                    self._database_path,
                    check_same_thread=False,
                )
                connection.row_factory = sqlite3.Row
                connection.execute("PRAGMA foreign_keys = ON")
                connection.executescript(SCHEMA)
                connection.commit()
            except sqlite3.Error as e:
                raise ConnectionError(
                    f"Failed to open SQLite database {self._database_path}: {e}"
                )
            self._connection = connection

        return self._connection

    @write_retry
    def execute_batch(self, sql: str, rows: list[tuple]) -> None:
        """Run one statement for many rows and commit once."""
        connection = self.connect()
        try:
            connection.executemany(sql, rows)
            connection.commit()
        except sqlite3.Error:
            connection.rollback()
            raise

    def query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        return self.connect().execute(sql, params).fetchall()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None


def _row_to_category(row: sqlite3.Row, prefix: str = "") -> Category:
    return Category(
        id=UUID(row[f"{prefix}id"]),
        title=row[f"{prefix}title"],
        created_at=datetime.fromisoformat(row[f"{prefix}created_at"]),
        updated_at=datetime.fromisoformat(row[f"{prefix}updated_at"]),
    )


class SQLiteCategoryStorage(CategoryStorageInterface):
    """SQLite implementation of category storage."""

    def __init__(self, client: Optional[SQLiteClient] = None):
        self._client = client or SQLiteClient()

    async def find_by_title(self, title: str) -> Optional[Category]:
        try:
            rows = self._client.query(
                "SELECT * FROM categories WHERE title = ? ORDER BY rowid LIMIT 1",
                (title,),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to find category: {e}")
        return _row_to_category(rows[0]) if rows else None

    async def find_by_titles(self, titles: Iterable[str]) -> list[Category]:
        unique_titles = list(dict.fromkeys(titles))
        if not unique_titles:
            return []

        placeholders = ", ".join("?" for _ in unique_titles)
        try:
            rows = self._client.query(
                f"SELECT * FROM categories WHERE title IN ({placeholders}) ORDER BY rowid",
                tuple(unique_titles),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to find categories: {e}")
        return [_row_to_category(row) for row in rows]

    async def save(self, categories: list[Category]) -> list[Category]:
        if not categories:
            return categories

        rows = [
            (
                str(category.id),
                category.title,
                category.created_at.isoformat(),
                category.updated_at.isoformat(),
            )
            for category in categories
        ]
        try:
            self._client.execute_batch(
                "INSERT INTO categories (id, title, created_at, updated_at) "
                "VALUES (?, ?, ?, ?)",
                rows,
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save categories: {e}")
        return categories


class SQLiteTransactionStorage(TransactionStorageInterface):
    """
    SQLite implementation of transaction storage.

    get_all() always JOINs categories, so every returned transaction has
    its category populated.
    """

    def __init__(self, client: Optional[SQLiteClient] = None):
        self._client = client or SQLiteClient()

    async def save(self, transactions: list[Transaction]) -> list[Transaction]:
        if not transactions:
            return transactions

        rows = [
            (
                str(t.id),
                t.title,
                t.type,
                t.value,
                str(t.category_id),
                t.created_at.isoformat(),
                t.updated_at.isoformat(),
            )
            for t in transactions
        ]
        try:
            self._client.execute_batch(
                "INSERT INTO transactions "
                "(id, title, type, value, category_id, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
        except sqlite3.IntegrityError as e:
            raise NotFoundError(f"Transaction references an unknown category: {e}")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save transactions: {e}")
        return transactions

    async def get_all(self) -> list[Transaction]:
        try:
            rows = self._client.query(
                """
                SELECT t.id, t.title, t.type, t.value, t.category_id,
                       t.created_at, t.updated_at,
                       c.id AS c_id, c.title AS c_title,
                       c.created_at AS c_created_at, c.updated_at AS c_updated_at
                FROM transactions t
                JOIN categories c ON c.id = t.category_id
                ORDER BY t.rowid
                """
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list transactions: {e}")

        return [
            Transaction(
                id=UUID(row["id"]),
                title=row["title"],
                type=row["type"],
                value=row["value"],
                category_id=UUID(row["category_id"]),
                category=_row_to_category(row, prefix="c_"),
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
            for row in rows
        ]


class SQLiteAuditStorage(AuditStorageInterface):
    """
    SQLite implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[SQLiteClient] = None):
        self._client = client or SQLiteClient()

    def _row_to_event(self, row: sqlite3.Row) -> AuditEvent:
        return AuditEvent(
            event_id=UUID(row["event_id"]),
            timestamp=datetime.fromisoformat(row["timestamp"]),
            event_type=AuditEventType(row["event_type"]),
            severity=AuditSeverity(row["severity"]),
            entity_type=row["entity_type"] or None,
            entity_id=UUID(row["entity_id"]) if row["entity_id"] else None,
            correlation_id=UUID(row["correlation_id"]) if row["correlation_id"] else None,
            description=row["description"],
            details=json.loads(row["details_json"]) if row["details_json"] else {},
            error_message=row["error_message"] or None,
        )

    async def append_event(self, event: AuditEvent) -> bool:
        self._client.execute_batch(
            "INSERT INTO audit_events VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [event.to_row()],
        )
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        try:
            rows = self._client.query(
                "SELECT * FROM audit_events WHERE correlation_id = ? "
                "ORDER BY timestamp, rowid",
                (str(correlation_id),),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to get audit events: {e}")
        return [self._row_to_event(row) for row in rows]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        try:
            rows = self._client.query(
                "SELECT * FROM audit_events ORDER BY rowid DESC LIMIT ?",
                (limit,),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to get audit events: {e}")
        return [self._row_to_event(row) for row in rows]
