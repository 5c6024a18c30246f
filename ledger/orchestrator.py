"""
Main Orchestrator for Ledger

This module wires storage, audit logging and the transaction services
together for the surrounding layer (HTTP handlers, scripts, tests).

DESIGN DECISION: Dependencies are passed explicitly.
Every service receives the category and transaction stores it works with;
nothing reaches for a global repository. Tests build the same graph with
in-memory stores.
"""

from typing import NamedTuple, Optional

from ledger.audit import AuditLogger, configure_logging
from ledger.config import get_settings
from ledger.services.files import CsvFileSource
from ledger.services.storage import (
    CategoryStorageInterface,
    InMemoryAuditStorage,
    InMemoryCategoryStorage,
    InMemoryTransactionStorage,
    SQLiteAuditStorage,
    SQLiteCategoryStorage,
    SQLiteClient,
    SQLiteTransactionStorage,
    TransactionStorageInterface,
)
from ledger.transactions import (
    BalanceCalculator,
    CreateTransactionService,
    ImportTransactionsService,
    ListTransactionsService,
)


class LedgerComponents(NamedTuple):
    """Everything a caller needs to serve ledger requests."""

    category_storage: CategoryStorageInterface
    transaction_storage: TransactionStorageInterface
    balance_calculator: BalanceCalculator
    create_transaction: CreateTransactionService
    import_transactions: ImportTransactionsService
    list_transactions: ListTransactionsService
    audit_logger: AuditLogger
    sqlite_client: Optional[SQLiteClient] = None


def create_app_components(
    backend: Optional[str] = None,
    database_path: Optional[str] = None,
    file_source: Optional[CsvFileSource] = None,
) -> LedgerComponents:
    """
    Factory function to create all application components.

    Args:
        backend: 'memory' or 'sqlite'. Defaults to the configured backend.
        database_path: SQLite file. Defaults to the configured path.
        file_source: CSV source for imports. Defaults to one built from settings.

    Returns:
        LedgerComponents with shared stores injected into every service
    """
    settings = get_settings()
    configure_logging()
    backend = backend or settings.storage.backend

    sqlite_client = None
    if backend == "sqlite":
        sqlite_client = SQLiteClient(database_path)
        category_storage = SQLiteCategoryStorage(sqlite_client)
        transaction_storage = SQLiteTransactionStorage(sqlite_client)
        audit_logger = AuditLogger(SQLiteAuditStorage(sqlite_client))
    elif backend == "memory":
        category_storage = InMemoryCategoryStorage()
        transaction_storage = InMemoryTransactionStorage(category_storage)
        audit_logger = AuditLogger(InMemoryAuditStorage())
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    balance_calculator = BalanceCalculator(transaction_storage)

    return LedgerComponents(
        category_storage=category_storage,
        transaction_storage=transaction_storage,
        balance_calculator=balance_calculator,
        create_transaction=CreateTransactionService(
            category_storage,
            transaction_storage,
            balance_calculator=balance_calculator,
            audit_logger=audit_logger,
        ),
        import_transactions=ImportTransactionsService(
            category_storage,
            transaction_storage,
            file_source=file_source or CsvFileSource(settings.imports),
            audit_logger=audit_logger,
        ),
        list_transactions=ListTransactionsService(transaction_storage),
        audit_logger=audit_logger,
        sqlite_client=sqlite_client,
    )
