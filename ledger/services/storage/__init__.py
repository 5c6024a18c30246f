"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Implements an in-memory backend and SQLite; designed to be swappable.
"""

from ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryStorageInterface,
    ConnectionError,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)
from ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryCategoryStorage,
    InMemoryTransactionStorage,
)
from ledger.services.storage.sqlite import (
    SQLiteAuditStorage,
    SQLiteCategoryStorage,
    SQLiteClient,
    SQLiteTransactionStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "CategoryStorageInterface",
    "TransactionStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryCategoryStorage",
    "InMemoryTransactionStorage",
    # SQLite implementation
    "SQLiteAuditStorage",
    "SQLiteCategoryStorage",
    "SQLiteClient",
    "SQLiteTransactionStorage",
]
