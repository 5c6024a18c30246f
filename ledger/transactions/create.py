"""
Create Transaction Service

Validates a single transaction request and persists it.

Validation order (fail fast, nothing is written on failure):
1. Type must be income or outcome
2. An outcome may not exceed the current balance (value == balance is fine)

Then the category is resolved by exact title, created and saved on the spot
if it doesn't exist, and the transaction is saved referencing it.

NOTE: Category save and transaction save are two independent persistence
calls. If the transaction save fails, the new category stays.
"""

from typing import Optional
from uuid import UUID

from ledger.audit import AuditLogger, create_correlation_id
from ledger.errors import ValidationError
from ledger.models.transaction import (
    Category,
    Transaction,
    TransactionSpec,
    TransactionType,
)
from ledger.services.storage import (
    CategoryStorageInterface,
    StorageError,
    TransactionStorageInterface,
)
from ledger.transactions.balance import BalanceCalculator


class CreateTransactionService:
    """Creates one income or outcome transaction."""

    def __init__(
        self,
        category_storage: CategoryStorageInterface,
        transaction_storage: TransactionStorageInterface,
        balance_calculator: Optional[BalanceCalculator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._categories = category_storage
        self._transactions = transaction_storage
        self._balance = balance_calculator or BalanceCalculator(transaction_storage)
        self._audit_logger = audit_logger

    async def execute(
        self,
        title: str,
        value: float,
        type: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Validate and persist a transaction.

        Args:
            title: Transaction title
            value: Amount (float)
            type: 'income' or 'outcome'
            category: Category title; created if it doesn't exist yet

        Returns:
            The saved Transaction with its category populated

        Raises:
            ValidationError: Invalid type, or not enough balance for an outcome
            StorageError: A category or transaction write failed (audited)
        """
        correlation_id = correlation_id or create_correlation_id()

        if type not in TransactionType.values():
            await self._reject(
                "Invalid transaction",
                {"title": title, "type": type, "value": value},
                correlation_id,
            )

        if type == TransactionType.OUTCOME.value:
            # Fresh read on every call; not serialized against concurrent creates
            balance = await self._balance.get_balance()
            if value > balance.total:
                await self._reject(
                    "You do not have enough balance",
                    {"title": title, "value": value, "balance": balance.total},
                    correlation_id,
                )

        try:
            resolved = await self._resolve_category(category, correlation_id)

            [transaction] = self._transactions.create([
                TransactionSpec(title=title, type=type, value=value, category=resolved)
            ])
            await self._transactions.save([transaction])
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="transaction_storage_failed",
                    error_message=str(e),
                    details={"title": title, "category": category},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_transaction_created(
                transaction_id=transaction.id,
                title=transaction.title,
                transaction_type=transaction.type,
                value=transaction.value,
                category_title=resolved.title,
                correlation_id=correlation_id,
            )

        return transaction

    async def _resolve_category(self, title: str, correlation_id: UUID) -> Category:
        """Find a category by exact title, or create and save it."""
        existing = await self._categories.find_by_title(title)
        if existing:
            return existing

        [created] = self._categories.create([title])
        await self._categories.save([created])

        if self._audit_logger:
            await self._audit_logger.log_category_created(
                category_id=created.id,
                title=created.title,
                correlation_id=correlation_id,
            )

        return created

    async def _reject(self, message: str, details: dict, correlation_id: UUID) -> None:
        if self._audit_logger:
            await self._audit_logger.log_validation_failed(
                reason=message,
                details=details,
                correlation_id=correlation_id,
            )
        raise ValidationError(message, status_code=400, details=details)
