"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the in-memory store for SQLite (or a real server database)
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
Just the operations the ledger services need: find, create, save, read all.

`create(...)` builds UNSAVED objects; nothing is persisted until `save(...)`.
Each `save(...)` call is one batch, but there is no transaction spanning
two calls (e.g. category save + transaction save).
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from uuid import UUID

from ledger.models.audit import AuditEvent
from ledger.models.transaction import Category, Transaction, TransactionSpec


class CategoryStorageInterface(ABC):
    """
    Abstract interface for category storage operations.

    Any storage implementation (in-memory, SQLite, etc.)
    must implement these methods.
    """

    def create(self, titles: list[str]) -> list[Category]:
        """
        Build unsaved categories, one per title, in the given order.

        No deduplication happens here; callers pass the exact title set.
        """
        return [Category(title=title) for title in titles]

    @abstractmethod
    async def find_by_title(self, title: str) -> Optional[Category]:
        """
        Find a category by exact title.

        Args:
            title: Category title (case-sensitive)

        Returns:
            The first matching category, None if absent
        """
        pass

    @abstractmethod
    async def find_by_titles(self, titles: Iterable[str]) -> list[Category]:
        """
        Find every category whose title is in `titles` (one query).

        Args:
            titles: Titles to look up; duplicates are allowed

        Returns:
            Matching categories (any order)
        """
        pass

    @abstractmethod
    async def save(self, categories: list[Category]) -> list[Category]:
        """
        Persist categories in a single batch.

        Returns:
            The saved categories

        Raises:
            StorageError: If save fails
        """
        pass


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.

    CONTRACT: every read populates `Transaction.category` by joining on
    category_id. Callers never fetch the category separately.
    """

    def create(self, specs: list[TransactionSpec]) -> list[Transaction]:
        """Build unsaved transactions referencing each spec's category."""
        return [
            Transaction(
                title=spec.title,
                type=spec.type,
                value=spec.value,
                category_id=spec.category.id,
                category=spec.category,
            )
            for spec in specs
        ]

    @abstractmethod
    async def save(self, transactions: list[Transaction]) -> list[Transaction]:
        """
        Persist transactions in a single batch.

        Returns:
            The saved transactions

        Raises:
            StorageError: If save fails
            NotFoundError: If a transaction references an unknown category
        """
        pass

    @abstractmethod
    async def get_all(self) -> list[Transaction]:
        """
        Read every stored transaction, oldest first, category joined.

        Returns:
            List of all transactions
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one import).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
