"""
In-Memory Storage Implementation

Dict-backed storage used by the test suite and as the default backend.
Objects are copied on the way in and on the way out, so callers never share
state with the store.

The transaction store joins categories from the category store it was given,
mirroring what the SQLite backend does with a JOIN.
"""

from typing import Iterable, Optional
from uuid import UUID

from ledger.models.audit import AuditEvent
from ledger.models.transaction import Category, Transaction
from ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryStorageInterface,
    NotFoundError,
    TransactionStorageInterface,
)


class InMemoryCategoryStorage(CategoryStorageInterface):
    """Categories kept in insertion order."""

    def __init__(self):
        self._categories: dict[UUID, Category] = {}

    def get(self, category_id: UUID) -> Optional[Category]:
        category = self._categories.get(category_id)
        return category.model_copy() if category else None

    async def find_by_title(self, title: str) -> Optional[Category]:
        for category in self._categories.values():
            if category.title == title:
                return category.model_copy()
        return None

    async def find_by_titles(self, titles: Iterable[str]) -> list[Category]:
        wanted = set(titles)
        return [
            category.model_copy()
            for category in self._categories.values()
            if category.title in wanted
        ]

    async def save(self, categories: list[Category]) -> list[Category]:
        for category in categories:
            self._categories[category.id] = category.model_copy()
        return categories

    def __len__(self) -> int:
        return len(self._categories)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Transactions kept in insertion order, joined against a category store."""

    def __init__(self, categories: InMemoryCategoryStorage):
        self._category_store = categories
        self._transactions: dict[UUID, Transaction] = {}

    async def save(self, transactions: list[Transaction]) -> list[Transaction]:
        # Check the whole batch first so a bad reference writes nothing
        for transaction in transactions:
            if self._category_store.get(transaction.category_id) is None:
                raise NotFoundError(
                    f"Category not found: {transaction.category_id}"
                )

        for transaction in transactions:
            self._transactions[transaction.id] = transaction.model_copy(
                update={"category": None}
            )
        return transactions

    async def get_all(self) -> list[Transaction]:
        return [
            transaction.model_copy(
                update={"category": self._category_store.get(transaction.category_id)}
            )
            for transaction in self._transactions.values()
        ]

    def __len__(self) -> int:
        return len(self._transactions)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event.model_copy())
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
