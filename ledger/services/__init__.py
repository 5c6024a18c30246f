"""Services package."""

from ledger.services.files import CsvFileSource
from ledger.services.storage import (
    AuditStorageInterface,
    CategoryStorageInterface,
    ConnectionError,
    InMemoryAuditStorage,
    InMemoryCategoryStorage,
    InMemoryTransactionStorage,
    NotFoundError,
    SQLiteAuditStorage,
    SQLiteCategoryStorage,
    SQLiteClient,
    SQLiteTransactionStorage,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    # File services
    "CsvFileSource",
    # Storage services
    "AuditStorageInterface",
    "CategoryStorageInterface",
    "ConnectionError",
    "InMemoryAuditStorage",
    "InMemoryCategoryStorage",
    "InMemoryTransactionStorage",
    "NotFoundError",
    "SQLiteAuditStorage",
    "SQLiteCategoryStorage",
    "SQLiteClient",
    "SQLiteTransactionStorage",
    "StorageError",
    "TransactionStorageInterface",
]
